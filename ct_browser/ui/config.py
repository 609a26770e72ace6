from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ct_browser.config.model import GlobalConfig
from ct_browser.core.dataset_registry import DatasetRegistry
from ct_browser.services.catalog_loader import CatalogLoader
from ct_browser.services.session import SessionStore
from ct_browser.ui.async_runner import AsyncRunner


@dataclass
class AppConfig:
    """
    Shared state for the Dash app, passed into layout + callback
    registration functions instead of using module-level globals.
    """
    config_root: Path
    global_config: GlobalConfig
    registry: DatasetRegistry
    loader: Optional[CatalogLoader] = None
    sessions: Optional[SessionStore] = None
    runner: Optional[AsyncRunner] = None
    request_timeout: float = 30.0

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.loader is None:
            raise RuntimeError("AppConfig.loader must be initialized.")
        if self.sessions is None:
            raise RuntimeError("AppConfig.sessions must be initialized.")
        if self.runner is None:
            raise RuntimeError("AppConfig.runner must be initialized.")
