from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from ct_browser.config.model import AnchorLink, DatasetConfig, GlobalConfig
from ct_browser.core.dataset_registry import DatasetRegistry, seed_defaults
from ct_browser.core.exceptions import ConfigError, InvalidArgument

logger = logging.getLogger(__name__)


def _parse_anchors(raw: Any) -> List[AnchorLink]:
    anchors: List[AnchorLink] = []
    if not isinstance(raw, list):
        return anchors
    for entry in raw:
        if not isinstance(entry, dict) or not entry.get("anchor"):
            logger.warning(f"Ignoring malformed anchor entry: {entry!r}")
            continue
        anchor = str(entry["anchor"]).lstrip("#")
        anchors.append(AnchorLink(label=str(entry.get("label") or anchor), anchor=anchor))
    return anchors


def _read_json(path: Path) -> Dict[str, Any]:
    with path.open() as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return raw


def load_global_config(root: Path) -> GlobalConfig:
    """
    Load configuration from a directory using the multi-file layout:

        root/
          global.json
          datasets/
            *.json      one {"name", "base_url"} per file
    """
    root = Path(root)
    logger.info(
        "Loading global config",
        extra={"config_root": str(root)},
    )

    global_path = root / "global.json"
    if not global_path.is_file():
        raise ConfigError(f"File not found at {global_path}")

    try:
        raw_global = _read_json(global_path)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {global_path}: {e}") from e

    datasets_dir = root / "datasets"
    datasets: List[DatasetConfig] = []

    if datasets_dir.is_dir():
        logger.info(f"Scanning for dataset configurations in: {datasets_dir}")

        files = sorted(datasets_dir.glob("*.json"))
        if not files:
            logger.warning(f"No .json files found in {datasets_dir}")

        for idx, config_file in enumerate(files):
            logger.info(f"Loading dataset config: {config_file.name}")
            try:
                datasets.append(
                    DatasetConfig.from_raw(_read_json(config_file), source_path=config_file, index=idx)
                )
            except (OSError, ValueError, ConfigError) as e:
                logger.error(f"Failed to load {config_file.name}: {e}")
    else:
        logger.warning(f"Datasets directory not found at: {datasets_dir}")

    defaults = GlobalConfig()
    try:
        cfg = GlobalConfig(
            ui_title=raw_global.get("ui_title", defaults.ui_title),
            subtitle=raw_global.get("subtitle", defaults.subtitle),
            catalog_file=raw_global.get("catalog_file", defaults.catalog_file),
            request_timeout=float(raw_global.get("request_timeout", defaults.request_timeout)),
            debounce_ms=int(raw_global.get("debounce_ms", defaults.debounce_ms)),
            base_path=raw_global.get("base_path", defaults.base_path),
            max_sessions=int(raw_global.get("max_sessions", defaults.max_sessions)),
            anchors=_parse_anchors(raw_global.get("anchors", [])),
            datasets=datasets,
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value in {global_path}: {e}") from e

    if cfg.max_sessions < 1:
        raise ConfigError(f"max_sessions in {global_path} must be at least 1")
    return cfg


def build_dataset_registry(global_config: GlobalConfig) -> DatasetRegistry:
    """
    Fill a DatasetRegistry from dataset configs, in file order.
    Falls back to the built-in datasets when nothing usable is configured.
    """
    registry = DatasetRegistry()
    for ds_cfg in global_config.datasets:
        source = ds_cfg.source_path.name if ds_cfg.source_path else f"#{ds_cfg.index}"
        try:
            registry.add(ds_cfg.name, ds_cfg.base_url)
        except InvalidArgument as e:
            logger.error(f"Skipping dataset config {source}: {e}")

    if not len(registry):
        logger.warning("No datasets configured; registering built-in defaults")
        seed_defaults(registry)

    logger.info(
        "Dataset registry loaded",
        extra={
            "n_datasets": len(registry),
            "dataset_names": registry.names(),
        },
    )
    return registry


def load_dataset_registry(root: Path) -> tuple[GlobalConfig, DatasetRegistry]:
    global_config = load_global_config(root)
    return global_config, build_dataset_registry(global_config)
