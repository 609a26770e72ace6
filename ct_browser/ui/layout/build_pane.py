from __future__ import annotations

from typing import List

import dash_bootstrap_components as dbc
from dash import dcc, html

from ct_browser.core.dataset_registry import DatasetRegistry
from ct_browser.core.paths import BLANK_URL
from ct_browser.ui.ids import IDs, pane_id

HIDDEN = {"display": "none"}


def _labelled(label: str, control) -> html.Div:
    return html.Div(
        [html.Label(label, className="form-label small mb-1"), control],
        className="mb-2",
    )


def dataset_options(registry: DatasetRegistry) -> List[dict]:
    return [{"label": ds.name, "value": ds.name} for ds in registry.all()]


def build_pane(pane: str, registry: DatasetRegistry) -> dbc.Card:
    """
    One comparison pane: dataset -> cell type -> hemisphere selectors above
    the embedded detail page. The stores at the bottom are the transport for
    assets/frame_bridge.js.
    """
    selectors = dbc.Row(
        [
            dbc.Col(
                _labelled(
                    "Dataset",
                    dcc.Dropdown(
                        id=pane_id(IDs.Pane.DATASET_SELECT, pane),
                        options=dataset_options(registry),
                        value=None,
                        placeholder="Select dataset",
                    ),
                ),
                md=4,
            ),
            dbc.Col(
                _labelled(
                    "Cell type",
                    dcc.Dropdown(
                        id=pane_id(IDs.Pane.CELLTYPE_SELECT, pane),
                        options=[],
                        value=None,
                        disabled=True,
                        placeholder="Select cell type",
                    ),
                ),
                md=5,
            ),
            dbc.Col(
                _labelled(
                    "Hemisphere",
                    dcc.Dropdown(
                        id=pane_id(IDs.Pane.HEMISPHERE_SELECT, pane),
                        options=[],
                        value=None,
                        disabled=True,
                        clearable=False,
                        placeholder="-",
                    ),
                ),
                md=3,
            ),
        ],
        className="gx-2",
    )

    body = html.Div(
        html.Iframe(
            id=pane_id(IDs.Pane.FRAME, pane),
            src=BLANK_URL,
            className="ctb-frame",
            style={"width": "100%", "height": "75vh", "border": "0"},
        ),
        id=pane_id(IDs.Pane.BODY, pane),
        style=HIDDEN,
    )

    return dbc.Card(
        [
            dbc.CardHeader(f"Pane {pane.upper()}"),
            dbc.CardBody(
                [
                    selectors,
                    dcc.Loading(
                        html.Div(id=pane_id(IDs.Pane.STATUS, pane), className="small text-muted mb-2"),
                        type="dot",
                    ),
                    body,
                    dcc.Store(id=pane_id(IDs.Pane.FRAME_NAV, pane)),
                    dcc.Store(id=pane_id(IDs.Pane.FRAME_REQUEST, pane)),
                    dcc.Store(id=pane_id(IDs.Pane.FRAME_READY, pane)),
                    dcc.Store(id=pane_id(IDs.Pane.FRAME_CMD, pane)),
                    dcc.Store(id=pane_id(IDs.Pane.FRAME_CMD_ACK, pane)),
                    dcc.Store(id=pane_id(IDs.Pane.FRAME_EVENT_ACK, pane)),
                ],
                className="p-2",
            ),
        ],
        id=pane_id(IDs.Pane.CONTAINER, pane),
        className="ctb-pane h-100",
    )
