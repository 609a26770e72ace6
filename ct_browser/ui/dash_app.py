from __future__ import annotations

import logging
from pathlib import Path

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from ct_browser.config.loader import load_dataset_registry
from ct_browser.config.model import GlobalConfig
from ct_browser.core.dataset_registry import DatasetRegistry
from ct_browser.core.url_codec import PANE_IDS
from ct_browser.services.catalog_loader import CatalogLoader
from ct_browser.services.session import CompareSession, SessionStore
from ct_browser.ui.async_runner import AsyncRunner
from ct_browser.ui.frames import BrowserFrame, LocationOutbox
from ct_browser.ui.layout.build_layout import build_layout
from ct_browser.ui.callbacks.callbacks_session import register_session_callbacks
from ct_browser.ui.callbacks.callbacks_panes import register_pane_callbacks
from ct_browser.ui.callbacks.callbacks_frames import register_frame_callbacks

logger = logging.getLogger(__name__)


def build_session_factory(
        registry: DatasetRegistry,
        loader: CatalogLoader,
        global_config: GlobalConfig,
):
    """Sessions for the web UI: browser-backed frames and a URL outbox per tab."""

    def factory(session_id: str) -> CompareSession:
        session = CompareSession(
            registry,
            loader,
            session_id=session_id,
            quiet_period=global_config.quiet_period,
            base_path=global_config.base_path,
            replace_url=LocationOutbox(),
        )
        for pane in PANE_IDS:
            session.attach_frame(pane, BrowserFrame(pane))
        return session

    return factory


def create_dash_app(config_root: Path | str = Path("config")) -> Dash:
    config_root = Path(config_root)

    # 1) Load Config
    global_config, registry = load_dataset_registry(config_root)

    # 2) Initialize Service Layer
    loader = CatalogLoader(
        catalog_file=global_config.catalog_file,
        timeout=global_config.request_timeout,
    )
    runner = AsyncRunner()
    sessions = SessionStore(
        build_session_factory(registry, loader, global_config),
        max_sessions=global_config.max_sessions,
    )

    # 3) App Context
    ctx = AppConfig(
        config_root=config_root,
        global_config=global_config,
        registry=registry,
        loader=loader,
        sessions=sessions,
        runner=runner,
        request_timeout=max(global_config.request_timeout * 3, 5.0),
    )
    ctx.validate()

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
    )

    app.title = global_config.ui_title

    app.layout = build_layout(ctx)

    # Register callbacks
    register_session_callbacks(app, ctx)
    register_pane_callbacks(app, ctx)
    register_frame_callbacks(app, ctx)

    logger.info(
        "Dash app created",
        extra={"config_root": str(config_root), "datasets": registry.names()},
    )
    return app
