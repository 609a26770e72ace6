from __future__ import annotations

import logging
from typing import List, Optional

from ct_browser.core.paths import BLANK_URL
from ct_browser.services.coordinator import FrameCollaborator, UrlCallback

logger = logging.getLogger(__name__)


class BrowserFrame(FrameCollaborator):
    """
    Server-side stand-in for one browser iframe.

    The browser half (assets/frame_bridge.js) reports navigation and
    readiness into Dash stores; callbacks forward those reports here.
    Commands flow the other way: navigate() bumps a revision and
    jump_to_anchor() queues an anchor; callbacks turn both into store updates
    the bridge executes.
    """

    def __init__(self, pane_id: str):
        self.pane_id = pane_id
        self.location = BLANK_URL
        self.target = BLANK_URL
        self.revision = 0
        self.rendered_revision = 0
        self.ready = False
        self.pending_anchor: Optional[str] = None
        self._navigated: List[UrlCallback] = []
        self._requested: List[UrlCallback] = []

    # FrameCollaborator -------------------------------------------------
    def is_ready(self) -> bool:
        return self.ready

    def navigate(self, url: str) -> None:
        if url == self.location:
            return
        self.location = url
        self.target = url
        self.revision += 1
        self.ready = False

    def jump_to_anchor(self, anchor: str) -> None:
        logger.debug("Anchor jump queued", extra={"pane": self.pane_id, "anchor": anchor})
        self.pending_anchor = anchor

    def on_navigated(self, callback: UrlCallback) -> None:
        self._navigated.append(callback)

    def on_navigation_requested(self, callback: UrlCallback) -> None:
        self._requested.append(callback)

    # browser reports ---------------------------------------------------
    def report_navigation(self, url: str) -> None:
        self.location = url
        self.ready = True
        for callback in list(self._navigated):
            callback(url)

    def report_navigation_requested(self, url: str) -> None:
        for callback in list(self._requested):
            callback(url)

    def mark_ready(self, ready: bool = True) -> None:
        self.ready = ready

    # commands ----------------------------------------------------------
    def take_command(self) -> Optional[dict]:
        """Navigation command not yet sent to the browser, if any."""
        if self.revision == self.rendered_revision:
            return None
        self.rendered_revision = self.revision
        return {"url": self.target, "rev": self.revision}

    def take_anchor(self) -> Optional[str]:
        anchor, self.pending_anchor = self.pending_anchor, None
        return anchor


class LocationOutbox:
    """
    URL sink for a CompareSession: keeps the latest location until a callback
    hands it to the browser (history.replaceState, never a new entry).
    """

    def __init__(self):
        self._pending: Optional[str] = None

    def __call__(self, location: str) -> None:
        self._pending = location

    def take(self) -> Optional[str]:
        location, self._pending = self._pending, None
        return location
