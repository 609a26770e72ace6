from __future__ import annotations

from typing import TYPE_CHECKING

import dash_bootstrap_components as dbc
from dash import dcc, html

from ct_browser.core.url_codec import PANE_IDS
from ct_browser.ui.ids import IDs
from ct_browser.ui.layout.build_navbar import build_navbar
from ct_browser.ui.layout.build_pane import HIDDEN, build_pane

if TYPE_CHECKING:
    from ct_browser.ui.config import AppConfig


def build_placeholder() -> html.Div:
    return html.Div(
        [
            html.H4("Nothing selected yet", className="text-muted"),
            html.P(
                "Pick a dataset and a cell type in either pane to show its detail page. "
                "The address bar always reflects both panes, so the view can be shared.",
                className="text-muted mb-0",
            ),
        ],
        id=IDs.Control.PLACEHOLDER,
        className="ctb-placeholder text-center py-5",
    )


def build_cross_link() -> html.Div:
    return html.Div(
        html.Small("Both panes loaded - use the section buttons above to jump both pages at once."),
        id=IDs.Control.CROSS_LINK,
        className="text-center text-muted my-2",
        style=HIDDEN,
    )


def build_layout(ctx: AppConfig):
    navbar = build_navbar(ctx.global_config)

    return dbc.Container(
        fluid=True,
        className="ctb-root",
        children=[
            navbar,

            dcc.Location(id=IDs.Control.URL, refresh=False),

            # App-level stores
            dcc.Store(id=IDs.Store.SESSION_ID, storage_type="session"),
            dcc.Store(id=IDs.Store.SESSION_REV),
            dcc.Store(id=IDs.Store.LOCATION_TARGET),
            dcc.Store(id=IDs.Store.LOCATION_ACK),
            dcc.Store(id=IDs.Store.LAYOUT_STATE),
            dcc.Store(id=IDs.Store.ANCHOR_CMD),
            dcc.Store(id=IDs.Store.ANCHOR_ACK),

            build_cross_link(),
            build_placeholder(),

            dbc.Row(
                [dbc.Col(build_pane(pane, ctx.registry), md=6, className="mt-3") for pane in PANE_IDS],
                className="gx-3",
            ),
        ],
    )
