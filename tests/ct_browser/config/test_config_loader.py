from __future__ import annotations

import json

import pytest

from ct_browser.config.loader import build_dataset_registry, load_dataset_registry, load_global_config
from ct_browser.config.model import AnchorLink, GlobalConfig
from ct_browser.core.dataset_registry import DEFAULT_DATASETS
from ct_browser.core.exceptions import ConfigError


def write_json(path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload))


def test_load_global_config_reads_all_fields(tmp_path):
    write_json(
        tmp_path / "global.json",
        {
            "ui_title": "Fly Explorer",
            "catalog_file": "index.json",
            "request_timeout": 5,
            "debounce_ms": 120,
            "max_sessions": 25,
            "anchors": [{"label": "Summary", "anchor": "#summary"}, {"label": "broken"}],
        },
    )
    write_json(tmp_path / "datasets" / "02_vnc.json", {"name": "VNC", "base_url": "https://ex.org/vnc"})
    write_json(tmp_path / "datasets" / "01_brain.json", {"name": "Brain", "base_url": "https://ex.org/brain"})

    cfg = load_global_config(tmp_path)

    assert cfg.ui_title == "Fly Explorer"
    assert cfg.catalog_file == "index.json"
    assert cfg.request_timeout == 5.0
    assert cfg.quiet_period == pytest.approx(0.12)
    assert cfg.max_sessions == 25
    assert cfg.anchors == [AnchorLink(label="Summary", anchor="summary")]
    assert [ds.name for ds in cfg.datasets] == ["Brain", "VNC"]


def test_missing_global_json_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_global_config(tmp_path)


def test_invalid_global_json_raises(tmp_path):
    (tmp_path / "global.json").write_text("{not json")
    with pytest.raises(ConfigError):
        load_global_config(tmp_path)


def test_invalid_value_in_global_json_raises(tmp_path):
    write_json(tmp_path / "global.json", {"debounce_ms": "soon"})
    with pytest.raises(ConfigError):
        load_global_config(tmp_path)


def test_broken_dataset_file_is_skipped(tmp_path):
    write_json(tmp_path / "global.json", {})
    (tmp_path / "datasets").mkdir()
    (tmp_path / "datasets" / "01_bad.json").write_text("[")
    write_json(tmp_path / "datasets" / "02_list.json", ["not", "an", "object"])
    write_json(tmp_path / "datasets" / "03_ok.json", {"name": "Brain", "base_url": "https://ex.org/brain"})

    cfg, registry = load_dataset_registry(tmp_path)

    assert [ds.name for ds in cfg.datasets] == ["Brain"]
    assert registry.names() == ["Brain"]


def test_registry_skips_incomplete_entries(tmp_path):
    write_json(tmp_path / "global.json", {})
    write_json(tmp_path / "datasets" / "01.json", {"name": "Brain"})
    write_json(tmp_path / "datasets" / "02.json", {"name": "VNC", "base_url": "https://ex.org/vnc"})

    _, registry = load_dataset_registry(tmp_path)

    assert registry.names() == ["VNC"]


def test_registry_falls_back_to_defaults():
    registry = build_dataset_registry(GlobalConfig())
    assert registry.names() == [name for name, _ in DEFAULT_DATASETS]


def test_shipped_config_loads():
    from pathlib import Path

    root = Path(__file__).resolve().parents[3] / "config"
    cfg, registry = load_dataset_registry(root)

    assert "Male CNS" in registry
    assert "Female Adult Fly Brain" in registry
    assert cfg.anchors


def test_max_sessions_must_be_positive(tmp_path):
    write_json(tmp_path / "global.json", {"max_sessions": 0})
    with pytest.raises(ConfigError):
        load_global_config(tmp_path)
