from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import dash
from dash import ALL, Input, Output, State, exceptions

from ct_browser.core.url_codec import PANE_IDS
from ct_browser.services.session import CompareSession
from ct_browser.ui.ids import IDs, pane_id

if TYPE_CHECKING:
    from ct_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


async def handle_frame_event(session: CompareSession, pane: str, trigger: str | None, ready, request) -> None:
    frame = session.frames.get(pane)
    if frame is None:
        return
    if trigger == pane_id(IDs.Pane.FRAME_READY, pane):
        frame.mark_ready(bool((ready or {}).get("ready")))
    elif trigger == pane_id(IDs.Pane.FRAME_REQUEST, pane):
        url = (request or {}).get("url")
        if url:
            frame.report_navigation_requested(url)


async def broadcast_anchor(session: CompareSession, anchor: str) -> dict:
    session.jump_to_anchor(anchor)
    jumps = {}
    for pane, frame in session.frames.items():
        pending = frame.take_anchor()
        if pending:
            jumps[pane] = pending
    return jumps


def _register_frame(app: dash.Dash, ctx: AppConfig, pane: str) -> None:
    @app.callback(
        Output(pane_id(IDs.Pane.FRAME_EVENT_ACK, pane), "data"),
        Input(pane_id(IDs.Pane.FRAME_READY, pane), "data"),
        Input(pane_id(IDs.Pane.FRAME_REQUEST, pane), "data"),
        State(IDs.Store.SESSION_ID, "data"),
        prevent_initial_call=True,
    )
    def forward_frame_event(ready, request, session_id):
        if not session_id:
            raise exceptions.PreventUpdate
        session = ctx.sessions.ensure(session_id)
        ctx.runner.run(
            handle_frame_event(session, pane, dash.ctx.triggered_id, ready, request),
            timeout=ctx.request_timeout,
        )
        return time.time()

    # server -> iframe: assign src even if unchanged, so the frame really reloads
    app.clientside_callback(
        f"""
        function(cmd) {{
            if (!cmd || !window.ctBrowserFrames) {{
                return window.dash_clientside.no_update;
            }}
            window.ctBrowserFrames.navigate("{pane}", cmd.url);
            return cmd.rev;
        }}
        """,
        Output(pane_id(IDs.Pane.FRAME_CMD_ACK, pane), "data"),
        Input(pane_id(IDs.Pane.FRAME_CMD, pane), "data"),
    )


def register_frame_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    for pane in PANE_IDS:
        _register_frame(app, ctx, pane)

    # ---------------------------------------------------------
    # Anchor buttons -> jump in every ready frame
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.ANCHOR_CMD, "data"),
        Input({"type": IDs.Pattern.ANCHOR_BTN, "index": ALL}, "n_clicks"),
        State(IDs.Store.SESSION_ID, "data"),
        prevent_initial_call=True,
    )
    def jump_to_anchor(n_clicks, session_id):
        triggered = dash.ctx.triggered_id
        if not session_id or not triggered or not any(n_clicks or []):
            raise exceptions.PreventUpdate

        session = ctx.sessions.ensure(session_id)
        anchor = triggered["index"]
        jumps = ctx.runner.run(broadcast_anchor(session, anchor), timeout=ctx.request_timeout)
        if not jumps:
            raise exceptions.PreventUpdate
        return {"jumps": jumps, "ts": time.time()}

    app.clientside_callback(
        """
        function(cmd) {
            if (!cmd || !cmd.jumps || !window.ctBrowserFrames) {
                return window.dash_clientside.no_update;
            }
            Object.keys(cmd.jumps).forEach(function(pane) {
                window.ctBrowserFrames.jumpToAnchor(pane, cmd.jumps[pane]);
            });
            return cmd.ts;
        }
        """,
        Output(IDs.Store.ANCHOR_ACK, "data"),
        Input(IDs.Store.ANCHOR_CMD, "data"),
    )
