from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from ct_browser.config.model import GlobalConfig
from ct_browser.ui.ids import IDs, anchor_button_id


def build_navbar(global_config: GlobalConfig) -> dbc.Navbar:
    anchor_buttons = [
        dbc.Button(
            link.label,
            id=anchor_button_id(link.anchor),
            color="secondary",
            outline=True,
            size="sm",
            className="me-1",
        )
        for link in global_config.anchors
    ]

    return dbc.Navbar(
        dbc.Container(
            fluid=True,
            children=[
                html.Div(
                    [
                        html.H2(global_config.ui_title, className="mb-0"),
                        html.Small(
                            global_config.subtitle,
                            className="text-muted",
                            id="navbar-subtitle",
                        ),
                    ],
                    className="d-flex flex-column justify-content-center",
                ),
                html.Div(
                    [
                        html.Div(
                            anchor_buttons,
                            id=IDs.Control.ANCHOR_BAR,
                            className="d-flex align-items-center me-3",
                        ),
                        dbc.Button(
                            "Reset",
                            id=IDs.Control.RESET_BTN,
                            color="danger",
                            outline=True,
                            size="sm",
                        ),
                    ],
                    className="ms-auto d-flex align-items-center",
                ),
            ],
        ),
        dark=False,
        className="shadow-sm ctb-navbar",
    )
