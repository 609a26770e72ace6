from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import dash
from dash import Input, Output, State, exceptions

from ct_browser.core.url_codec import PANE_IDS
from ct_browser.ui.ids import IDs, pane_id
from ct_browser.ui.layout.build_pane import HIDDEN

if TYPE_CHECKING:
    from ct_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


def register_session_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    # ---------------------------------------------------------
    # URL -> session (first load, browser back/forward)
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SESSION_ID, "data"),
        Output(IDs.Store.SESSION_REV, "data"),
        Input(IDs.Control.URL, "search"),
        State(IDs.Store.SESSION_ID, "data"),
    )
    def restore_from_url(search: str | None, session_id: str | None):
        session = ctx.sessions.ensure(session_id)
        ctx.runner.run(session.restore_from_query(search), timeout=ctx.request_timeout)
        return session.session_id, time.time()

    # ---------------------------------------------------------
    # Reset: both panes empty, placeholder back, bare URL
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Store.SESSION_REV, "data", allow_duplicate=True),
        Input(IDs.Control.RESET_BTN, "n_clicks"),
        State(IDs.Store.SESSION_ID, "data"),
        prevent_initial_call=True,
    )
    def reset_session(n_clicks, session_id):
        if not n_clicks:
            raise exceptions.PreventUpdate
        session = ctx.sessions.ensure(session_id)
        ctx.runner.run(session.reset(), timeout=ctx.request_timeout)
        return time.time()

    # ---------------------------------------------------------
    # Coordinator snapshot -> placeholder / cross link / pane bodies
    # ---------------------------------------------------------
    @app.callback(
        Output(IDs.Control.PLACEHOLDER, "style"),
        Output(IDs.Control.CROSS_LINK, "style"),
        *[Output(pane_id(IDs.Pane.BODY, pane), "style") for pane in PANE_IDS],
        Input(IDs.Store.LAYOUT_STATE, "data"),
    )
    def render_layout(snapshot: dict | None):
        snapshot = snapshot or {}
        visible = snapshot.get("visible", {})

        def style(flag: bool) -> dict:
            return {} if flag else HIDDEN

        return (
            style(snapshot.get("placeholder_visible", True)),
            style(snapshot.get("cross_link_visible", False)),
            *[style(bool(visible.get(pane))) for pane in PANE_IDS],
        )

    # ---------------------------------------------------------
    # Address bar: replace in place, never push
    # ---------------------------------------------------------
    app.clientside_callback(
        """
        function(location) {
            if (location) {
                window.history.replaceState(window.history.state, "", location);
            }
            return location || window.dash_clientside.no_update;
        }
        """,
        Output(IDs.Store.LOCATION_ACK, "data"),
        Input(IDs.Store.LOCATION_TARGET, "data"),
    )
