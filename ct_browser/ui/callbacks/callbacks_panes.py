from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import dash
from dash import Input, Output, State, exceptions, no_update

from ct_browser.core.catalog import normalize_name
from ct_browser.core.url_codec import PANE_IDS
from ct_browser.services.session import CompareSession
from ct_browser.ui.frames import BrowserFrame
from ct_browser.ui.helpers import layout_state, render_pane
from ct_browser.ui.ids import IDs, pane_id

if TYPE_CHECKING:
    from ct_browser.ui.config import AppConfig

logger = logging.getLogger(__name__)


async def apply_pane_trigger(
        session: CompareSession,
        pane: str,
        trigger: str | None,
        inputs: dict[str, Any],
) -> dict[str, Any]:
    """
    Apply whatever changed for one pane, then read back everything the UI shows.

    Selector values that already match the pane state are ignored: they are
    this callback's own output coming back in (loop prevention on the Dash side).
    """
    controller = session.pane(pane)
    state = controller.state

    if trigger == pane_id(IDs.Pane.DATASET_SELECT, pane):
        dataset = inputs.get("dataset")
        if dataset != state.dataset_name:
            await session.select_dataset(pane, dataset)

    elif trigger == pane_id(IDs.Pane.CELLTYPE_SELECT, pane):
        celltype = inputs.get("celltype")
        if state.base_url is not None and (
                normalize_name(celltype) != normalize_name(controller.current_cell_type_label())
        ):
            session.select_cell_type(pane, celltype)

    elif trigger == pane_id(IDs.Pane.HEMISPHERE_SELECT, pane):
        hemisphere = inputs.get("hemisphere")
        if state.current_record is not None and hemisphere and hemisphere != state.current_hemisphere:
            session.select_hemisphere(pane, hemisphere)

    elif trigger == pane_id(IDs.Pane.FRAME_NAV, pane):
        url = (inputs.get("frame_nav") or {}).get("currentUrl")
        if url:
            frame = session.frames.get(pane)
            if isinstance(frame, BrowserFrame):
                # keeps frame.location current, then reaches the reconciler via on_navigated
                frame.report_navigation(url)
                await session.reconciler.settle()
            else:
                await session.navigation_reported(pane, url)

    frame = session.frames.get(pane)
    return {
        "view": render_pane(controller),
        "frame_cmd": frame.take_command() if frame is not None else None,
        "location": session.replace_url.take() if session.replace_url is not None else None,
        "layout": layout_state(session),
    }


def _register_pane(app: dash.Dash, ctx: AppConfig, pane: str) -> None:
    @app.callback(
        Output(pane_id(IDs.Pane.DATASET_SELECT, pane), "value"),
        Output(pane_id(IDs.Pane.CELLTYPE_SELECT, pane), "options"),
        Output(pane_id(IDs.Pane.CELLTYPE_SELECT, pane), "value"),
        Output(pane_id(IDs.Pane.CELLTYPE_SELECT, pane), "disabled"),
        Output(pane_id(IDs.Pane.HEMISPHERE_SELECT, pane), "options"),
        Output(pane_id(IDs.Pane.HEMISPHERE_SELECT, pane), "value"),
        Output(pane_id(IDs.Pane.HEMISPHERE_SELECT, pane), "disabled"),
        Output(pane_id(IDs.Pane.STATUS, pane), "children"),
        Output(pane_id(IDs.Pane.FRAME_CMD, pane), "data"),
        Output(IDs.Store.LOCATION_TARGET, "data", allow_duplicate=True),
        Output(IDs.Store.LAYOUT_STATE, "data", allow_duplicate=True),
        Input(IDs.Store.SESSION_REV, "data"),
        Input(pane_id(IDs.Pane.DATASET_SELECT, pane), "value"),
        Input(pane_id(IDs.Pane.CELLTYPE_SELECT, pane), "value"),
        Input(pane_id(IDs.Pane.HEMISPHERE_SELECT, pane), "value"),
        Input(pane_id(IDs.Pane.FRAME_NAV, pane), "data"),
        State(IDs.Store.SESSION_ID, "data"),
        prevent_initial_call=True,
    )
    def update_pane(_rev, dataset, celltype, hemisphere, frame_nav, session_id):
        if not session_id:
            raise exceptions.PreventUpdate

        session = ctx.sessions.ensure(session_id)
        inputs = {
            "dataset": dataset,
            "celltype": celltype,
            "hemisphere": hemisphere,
            "frame_nav": frame_nav,
        }
        triggered_id = dash.ctx.triggered_id

        try:
            result = ctx.runner.run(
                apply_pane_trigger(session, pane, triggered_id, inputs),
                timeout=ctx.request_timeout,
            )
        except Exception:
            logger.exception(
                "Error updating pane",
                extra={"pane": pane, "trigger": str(triggered_id), "session_id": session_id},
            )
            raise exceptions.PreventUpdate

        view = result["view"]
        return (
            view["dataset"],
            view["celltype_options"],
            view["celltype"],
            view["celltype_disabled"],
            view["hemisphere_options"],
            view["hemisphere"],
            view["hemisphere_disabled"],
            view["status"],
            result["frame_cmd"] or no_update,
            result["location"] or no_update,
            result["layout"],
        )


def register_pane_callbacks(app: dash.Dash, ctx: AppConfig) -> None:
    for pane in PANE_IDS:
        _register_pane(app, ctx, pane)
