"""
Config package for ct_browser.

Responsible for:
- config models (GlobalConfig, DatasetConfig, AnchorLink)
- config I/O helpers (load_global_config / load_dataset_registry)
"""

from .model import AnchorLink, DatasetConfig, GlobalConfig
from .loader import build_dataset_registry, load_dataset_registry, load_global_config

__all__ = [
    "AnchorLink",
    "DatasetConfig",
    "GlobalConfig",
    "build_dataset_registry",
    "load_dataset_registry",
    "load_global_config",
]
