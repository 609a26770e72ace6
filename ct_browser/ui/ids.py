from __future__ import annotations

__all__ = ["IDs", "pane_id", "anchor_button_id"]


class IDs:
    class Store:
        SESSION_ID = "session-id"
        SESSION_REV = "session-rev"
        LOCATION_TARGET = "location-target"
        LOCATION_ACK = "location-ack"
        LAYOUT_STATE = "layout-state"
        ANCHOR_CMD = "anchor-cmd"
        ANCHOR_ACK = "anchor-ack"

    class Control:
        URL = "url"
        RESET_BTN = "reset-btn"
        PLACEHOLDER = "empty-placeholder"
        CROSS_LINK = "cross-pane-link"
        ANCHOR_BAR = "anchor-bar"

    class Pane:
        # per-pane ids are "<prefix>-<pane id>", see pane_id()
        CONTAINER = "pane-container"
        BODY = "pane-body"
        DATASET_SELECT = "dataset-select"
        CELLTYPE_SELECT = "celltype-select"
        HEMISPHERE_SELECT = "hemisphere-select"
        STATUS = "pane-status"
        FRAME = "frame"

        # written by assets/frame_bridge.js
        FRAME_NAV = "frame-nav"
        FRAME_REQUEST = "frame-request"
        FRAME_READY = "frame-ready"

        # server -> browser navigation commands
        FRAME_CMD = "frame-cmd"
        FRAME_CMD_ACK = "frame-cmd-ack"
        FRAME_EVENT_ACK = "frame-event-ack"

    class Pattern:
        ANCHOR_BTN = "anchor-jump"


def pane_id(prefix: str, pane: str) -> str:
    return f"{prefix}-{pane}"


def anchor_button_id(anchor: str) -> dict:
    return {"type": IDs.Pattern.ANCHOR_BTN, "index": anchor}
