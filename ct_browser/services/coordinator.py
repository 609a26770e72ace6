from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping

logger = logging.getLogger(__name__)

UrlCallback = Callable[[str], None]


class FrameCollaborator(ABC):
    """
    Abstract interface for an embedded content frame (browser iframe bridge,
    test double, ...). The core only consumes it; the transport lives elsewhere.
    """

    @abstractmethod
    def is_ready(self) -> bool:
        pass

    @abstractmethod
    def jump_to_anchor(self, anchor: str) -> None:
        """In-page navigation to `anchor` without reloading the frame."""
        pass

    @abstractmethod
    def navigate(self, url: str) -> None:
        pass

    @abstractmethod
    def on_navigated(self, callback: UrlCallback) -> None:
        """Register for "current URL changed" notifications."""
        pass

    @abstractmethod
    def on_navigation_requested(self, callback: UrlCallback) -> None:
        """Register for pre-navigation intent notifications."""
        pass


@dataclass(frozen=True)
class LayoutSnapshot:
    visible: Dict[str, bool]
    placeholder_visible: bool
    cross_link_visible: bool

    def to_dict(self) -> dict:
        return {
            "visible": dict(self.visible),
            "placeholder_visible": self.placeholder_visible,
            "cross_link_visible": self.cross_link_visible,
        }


class PaneCoordinator:
    """
    Cross-pane concerns: pane visibility, the shared empty-state placeholder
    (shown iff every pane is hidden), the cross-pane link (shown iff every
    pane is visible) and anchor jumps broadcast to all ready frames.
    """

    def __init__(self, pane_ids: Iterable[str]):
        self._visible: Dict[str, bool] = {pane_id: False for pane_id in pane_ids}
        self._listeners: List[Callable[[LayoutSnapshot], None]] = []

    def subscribe(self, listener: Callable[[LayoutSnapshot], None]) -> None:
        self._listeners.append(listener)

    def show_pane(self, pane_id: str) -> None:
        self._set(pane_id, True)

    def hide_pane(self, pane_id: str) -> None:
        self._set(pane_id, False)

    def set_visible(self, pane_id: str, visible: bool) -> None:
        self._set(pane_id, visible)

    def is_visible(self, pane_id: str) -> bool:
        return self._visible.get(pane_id, False)

    @property
    def placeholder_visible(self) -> bool:
        return not any(self._visible.values())

    @property
    def cross_link_visible(self) -> bool:
        return bool(self._visible) and all(self._visible.values())

    def snapshot(self) -> LayoutSnapshot:
        return LayoutSnapshot(
            visible=dict(self._visible),
            placeholder_visible=self.placeholder_visible,
            cross_link_visible=self.cross_link_visible,
        )

    def reset(self) -> None:
        for pane_id in self._visible:
            self._visible[pane_id] = False
        self._publish()

    def jump_to_anchor(self, anchor: str, frames: Mapping[str, FrameCollaborator]) -> List[str]:
        """
        Ask every ready frame to scroll to `anchor`. Frames that are not ready
        are skipped.

        :return: ids of the panes that received the jump
        """
        anchor = (anchor or "").lstrip("#")
        if not anchor:
            return []

        jumped: List[str] = []
        for pane_id, frame in frames.items():
            if not frame.is_ready():
                logger.debug("Skipping anchor jump for frame not ready", extra={"pane": pane_id})
                continue
            frame.jump_to_anchor(anchor)
            jumped.append(pane_id)

        logger.info("Anchor jump", extra={"anchor": anchor, "panes": jumped})
        return jumped

    def _set(self, pane_id: str, visible: bool) -> None:
        if pane_id not in self._visible:
            raise KeyError(f"Unknown pane '{pane_id}'")
        self._visible[pane_id] = visible
        self._publish()

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Layout listener failed")
