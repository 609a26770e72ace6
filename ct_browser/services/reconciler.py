from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from ct_browser.core.catalog import iter_records, normalize_name
from ct_browser.core.models import NeuronRecord, PaneState, UpdateSource
from ct_browser.core.paths import BLANK_URL, available_hemispheres, build_navigable_url, normalize_url, resolve_path
from ct_browser.services.pane import PaneController

logger = logging.getLogger(__name__)

DEFAULT_QUIET_PERIOD = 0.05


def match_navigation(state: PaneState, navigated_url: Optional[str]) -> Optional[Tuple[NeuronRecord, str]]:
    """
    Find the (record, hemisphere) whose detail page is `navigated_url`.

    Both sides are compared without fragment and trailing slash. Catalog
    order, then hemisphere insertion order; the first match wins.
    """
    target = normalize_url(navigated_url)
    if not target or state.base_url is None:
        return None

    for record in iter_records(state.catalog_names, state.catalog_index):
        for hemisphere in available_hemispheres(record):
            expected = build_navigable_url(state.base_url, resolve_path(record, hemisphere))
            if normalize_url(expected) == target:
                return record, hemisphere
    return None


class NavigationDebouncer:
    """
    Coalesces rapid signals per key: a value is delivered only after `delay`
    seconds without a newer value for the same key. Last writer wins, nothing
    is queued. Must be used from inside a running event loop.
    """

    def __init__(self, delay: float, callback: Callable[[str, Any], Any]):
        self.delay = delay
        self._callback = callback
        self._handles: Dict[str, asyncio.TimerHandle] = {}
        self._pending: Dict[str, Any] = {}
        self._idle: Optional[asyncio.Event] = None

    def _idle_event(self) -> asyncio.Event:
        if self._idle is None:
            self._idle = asyncio.Event()
            self._idle.set()
        return self._idle

    def submit(self, key: str, value: Any) -> None:
        loop = asyncio.get_running_loop()
        handle = self._handles.pop(key, None)
        if handle is not None:
            handle.cancel()

        self._pending[key] = value
        self._handles[key] = loop.call_later(self.delay, self._fire, key)
        self._idle_event().clear()

    def pending(self, key: str) -> Optional[Any]:
        return self._pending.get(key)

    def _fire(self, key: str) -> None:
        self._handles.pop(key, None)
        value = self._pending.pop(key, None)
        try:
            self._callback(key, value)
        except Exception:
            logger.exception("Debounced callback failed", extra={"key": key})
        finally:
            if not self._handles:
                self._idle_event().set()

    async def wait_idle(self) -> None:
        await self._idle_event().wait()

    def cancel(self, key: Optional[str] = None) -> None:
        keys = [key] if key is not None else list(self._handles)
        for k in keys:
            handle = self._handles.pop(k, None)
            if handle is not None:
                handle.cancel()
            self._pending.pop(k, None)
        if not self._handles:
            self._idle_event().set()


class NavigationReconciler:
    """
    Keeps each pane's selection in line with where its embedded frame actually is.

    Raw "current URL changed" signals go through a NavigationDebouncer; the
    settled URL is matched against the pane's catalog. Updates are tagged
    UpdateSource.RECONCILED so nobody navigates the frame in response.
    """

    def __init__(self, panes: Mapping[str, PaneController], delay: float = DEFAULT_QUIET_PERIOD):
        self._panes = panes
        self._last_url: Dict[str, str] = {}
        self.debouncer = NavigationDebouncer(delay, self.reconcile)

    def notify(self, pane_id: str, current_url: str) -> None:
        """Raw navigation signal from a frame. A blank frame says nothing about the selection."""
        if pane_id not in self._panes or not current_url or current_url == BLANK_URL:
            return
        self.debouncer.submit(pane_id, current_url)

    def on_navigation_requested(self, pane_id: str, url: str) -> None:
        """Frame is about to navigate (pre-navigation intent); make sure the landing URL is processed."""
        logger.debug("Frame navigation requested", extra={"pane": pane_id, "url": url})
        self.forget(pane_id)

    def forget(self, pane_id: Optional[str] = None) -> None:
        if pane_id is None:
            self._last_url.clear()
        else:
            self._last_url.pop(pane_id, None)

    def last_url(self, pane_id: str) -> Optional[str]:
        return self._last_url.get(pane_id)

    async def settle(self) -> None:
        await self.debouncer.wait_idle()

    def reconcile(self, pane_id: str, url: Optional[str]) -> bool:
        """
        Bring pane `pane_id` in line with `url`. No-op for the URL processed last.

        :return: True if the pane's selection changed
        """
        pane = self._panes.get(pane_id)
        if pane is None or not url or url == BLANK_URL:
            return False

        state = pane.state
        if state.base_url is None:
            # nothing loaded to match against; retry once a catalog arrives
            return False

        if self._last_url.get(pane_id) == url:
            return False
        self._last_url[pane_id] = url

        match = match_navigation(state, url)
        if match is None:
            if state.current_record is None and state.current_hemisphere is None:
                return False
            logger.info("Frame left the catalog", extra={"pane": pane_id, "url": url})
            pane.select_cell_type(None, source=UpdateSource.RECONCILED)
            return True

        record, hemisphere = match
        current = state.current_record
        if current is None or normalize_name(current.name) != normalize_name(record.name):
            logger.info(
                "Reconciled cell type from frame",
                extra={"pane": pane_id, "celltype": record.name, "hemisphere": hemisphere},
            )
            pane.select_cell_type(record.name, source=UpdateSource.RECONCILED, hemisphere=hemisphere)
            return True

        if state.current_hemisphere != hemisphere:
            logger.info(
                "Reconciled hemisphere from frame",
                extra={"pane": pane_id, "celltype": record.name, "hemisphere": hemisphere},
            )
            pane.select_hemisphere(hemisphere, source=UpdateSource.RECONCILED)
            return True

        return False
