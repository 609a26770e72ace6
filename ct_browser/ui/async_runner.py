from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
from typing import Any, Awaitable, Optional

logger = logging.getLogger(__name__)


class AsyncRunner:
    """
    One asyncio loop on a background thread.

    Dash callbacks run on worker threads; every session mutation is submitted
    here so the catalog cache, load tokens and debounce timers all live on a
    single loop (the core is single-threaded and cooperative).
    """

    def __init__(self, name: str = "ct-browser-loop"):
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._thread.start()
        logger.info("Async runner started", extra={"thread": name})

    def _run(self) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.run_forever()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def run(self, coro: Awaitable[Any], timeout: Optional[float] = None) -> Any:
        """Run `coro` on the loop thread and block until it finishes."""
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        try:
            return future.result(timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            raise

    def close(self) -> None:
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=5)
        self._loop.close()
