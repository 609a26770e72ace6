from __future__ import annotations

import asyncio
import logging
import uuid
from collections import OrderedDict
from typing import Callable, Dict, Iterator, Optional, Tuple

from ct_browser.core.dataset_registry import DatasetRegistry
from ct_browser.core.exceptions import InvalidArgument
from ct_browser.core.models import PaneChange, PaneSelection, UpdateSource
from ct_browser.core.url_codec import PANE_IDS, build_location, decode, encode, selection_from_state
from ct_browser.services.catalog_loader import CatalogLoader
from ct_browser.services.coordinator import FrameCollaborator, PaneCoordinator
from ct_browser.services.pane import PaneController
from ct_browser.services.reconciler import DEFAULT_QUIET_PERIOD, NavigationReconciler

logger = logging.getLogger(__name__)

UrlSink = Callable[[str], None]

DEFAULT_MAX_SESSIONS = 200


def generate_session_id() -> str:
    return f"session-{uuid.uuid4().hex[:8]}"


class CompareSession:
    """
    State of one comparison page: two panes, their frames and the URL.

    Replaces ambient globals with explicit fields:
    - restoring: number of URL restores in progress; URL writes are suppressed
      until the last one finishes
    - per-pane load tokens live in each PaneController's state

    The URL is replaced in place through `replace_url` (no history entries).
    """

    def __init__(
            self,
            registry: DatasetRegistry,
            loader: CatalogLoader,
            *,
            session_id: Optional[str] = None,
            pane_ids: Tuple[str, ...] = PANE_IDS,
            quiet_period: float = DEFAULT_QUIET_PERIOD,
            base_path: str = "/",
            replace_url: Optional[UrlSink] = None,
    ):
        self.session_id = session_id or generate_session_id()
        self.registry = registry
        self.pane_ids = pane_ids
        self.base_path = base_path
        self.replace_url = replace_url

        self.panes: Dict[str, PaneController] = {
            pane_id: PaneController(pane_id, registry, loader) for pane_id in pane_ids
        }
        self.reconciler = NavigationReconciler(self.panes, delay=quiet_period)
        self.coordinator = PaneCoordinator(pane_ids)
        self.frames: Dict[str, FrameCollaborator] = {}

        self._restoring = 0
        self._last_location: Optional[str] = None

        for pane in self.panes.values():
            pane.subscribe(self._on_pane_change)

    # ------------------------------------------------------------------
    # Wiring
    # ------------------------------------------------------------------
    @property
    def restoring(self) -> bool:
        return self._restoring > 0

    def pane(self, pane_id: str) -> PaneController:
        try:
            return self.panes[pane_id]
        except KeyError:
            raise KeyError(f"Unknown pane '{pane_id}'")

    def attach_frame(self, pane_id: str, frame: FrameCollaborator) -> None:
        """Subscribe to a pane's embedded frame and point it at the current selection."""
        pane = self.pane(pane_id)
        self.frames[pane_id] = frame
        frame.on_navigated(lambda url: self.reconciler.notify(pane_id, url))
        frame.on_navigation_requested(lambda url: self.reconciler.on_navigation_requested(pane_id, url))
        frame.navigate(pane.frame_url)

    def _on_pane_change(self, change: PaneChange) -> None:
        pane = self.panes[change.pane_id]
        self.coordinator.set_visible(change.pane_id, pane.navigable_url is not None)

        if change.source is not UpdateSource.RECONCILED:
            self.reconciler.forget(change.pane_id)
            frame = self.frames.get(change.pane_id)
            if frame is not None:
                frame.navigate(pane.frame_url)

        self.sync_url()

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------
    async def select_dataset(self, pane_id: str, name: Optional[str]) -> bool:
        return await self.pane(pane_id).select_dataset(name, source=UpdateSource.USER)

    def select_cell_type(self, pane_id: str, display_name: Optional[str]) -> bool:
        return self.pane(pane_id).select_cell_type(display_name, source=UpdateSource.USER)

    def select_hemisphere(self, pane_id: str, key: Optional[str]) -> None:
        self.pane(pane_id).select_hemisphere(key, source=UpdateSource.USER)

    def jump_to_anchor(self, anchor: str):
        return self.coordinator.jump_to_anchor(anchor, self.frames)

    async def reset(self) -> str:
        """Both panes back to EMPTY, placeholder shown, URL back to its bare form."""
        self.reconciler.debouncer.cancel()
        for pane in self.panes.values():
            pane.clear(source=UpdateSource.RESET)
        self.reconciler.forget()
        self.coordinator.reset()
        logger.info("Session reset", extra={"session_id": self.session_id})
        return self.sync_url(force=True)

    # ------------------------------------------------------------------
    # Frame notifications
    # ------------------------------------------------------------------
    async def navigation_reported(self, pane_id: str, current_url: str) -> None:
        """Feed one raw frame URL report and wait until reconciliation has settled."""
        self.reconciler.notify(pane_id, current_url)
        await self.reconciler.settle()

    # ------------------------------------------------------------------
    # URL
    # ------------------------------------------------------------------
    def selections(self) -> Dict[str, PaneSelection]:
        return {pane_id: selection_from_state(pane.state) for pane_id, pane in self.panes.items()}

    def current_query(self) -> str:
        return encode(self.selections(), self.pane_ids)

    def current_location(self) -> str:
        return build_location(self.base_path, self.current_query())

    def sync_url(self, force: bool = False) -> Optional[str]:
        """
        Write the current location through replace_url. Suppressed while a
        restore is in progress; unchanged locations are not rewritten.
        """
        if self.restoring:
            return None

        location = self.current_location()
        if location == self._last_location and not force:
            return location

        self._last_location = location
        if self.replace_url is not None:
            self.replace_url(location)
        return location

    async def restore_from_query(self, query: Optional[str]) -> Optional[str]:
        """
        Rebuild both panes from a query string (display names, not keys).

        Panes restore concurrently. URL writes stay suppressed until every
        pane is done, whether restoring succeeded or not. Restores may overlap
        (back/forward in quick succession); pane load tokens let the newest
        selection win and only the last restore to finish writes the URL.
        """
        selections = decode(query, self.pane_ids)
        logger.info(
            "Restoring session from URL",
            extra={"session_id": self.session_id, "query": query or ""},
        )

        self._restoring += 1
        try:
            await asyncio.gather(
                *(self._restore_pane(pane_id, selections[pane_id]) for pane_id in self.pane_ids)
            )
        finally:
            self._restoring -= 1

        return self.sync_url(force=True)

    async def _restore_pane(self, pane_id: str, selection: PaneSelection) -> None:
        pane = self.panes[pane_id]
        if not selection.dataset:
            pane.clear(source=UpdateSource.RESTORED)
            return

        loaded = await pane.select_dataset(selection.dataset, source=UpdateSource.RESTORED)
        if not loaded or not selection.celltype:
            return

        found = pane.select_cell_type(selection.celltype, source=UpdateSource.RESTORED)
        if found and selection.hemisphere:
            pane.select_hemisphere(selection.hemisphere, source=UpdateSource.RESTORED)


class SessionStore:
    """
    In-memory map of session id -> CompareSession, one per browser tab.
    Nothing is persisted; sessions vanish with the process.

    At most `max_sessions` are kept; the least recently used one is evicted
    when a new tab arrives. An evicted tab gets a fresh, empty session on its
    next request.
    """

    def __init__(self, factory: Callable[[str], CompareSession], max_sessions: int = DEFAULT_MAX_SESSIONS):
        if max_sessions < 1:
            raise InvalidArgument("max_sessions must be at least 1.")
        self._factory = factory
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, CompareSession] = OrderedDict()

    def ensure(self, session_id: Optional[str]) -> CompareSession:
        if session_id and session_id in self._sessions:
            self._sessions.move_to_end(session_id)
            return self._sessions[session_id]

        session_id = session_id or generate_session_id()
        session = self._factory(session_id)
        self._sessions[session_id] = session
        logger.info("Created comparison session", extra={"session_id": session_id})

        while len(self._sessions) > self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info(
                "Evicted least recently used session",
                extra={"session_id": evicted_id, "max_sessions": self.max_sessions},
            )
        return session

    def get(self, session_id: Optional[str]) -> Optional[CompareSession]:
        if not session_id:
            return None
        return self._sessions.get(session_id)

    def drop(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def __iter__(self) -> Iterator[str]:
        return iter(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)
