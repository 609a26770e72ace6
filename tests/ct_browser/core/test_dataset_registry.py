from __future__ import annotations

import pytest

from ct_browser.core.dataset_registry import DEFAULT_DATASETS, DatasetRegistry, seed_defaults
from ct_browser.core.exceptions import InvalidArgument
from ct_browser.core.models import DatasetDescriptor


def test_add_appends_and_returns_descriptor():
    registry = DatasetRegistry()
    entry = registry.add("Brain", "https://ex.org/brain")

    assert entry == DatasetDescriptor("Brain", "https://ex.org/brain")
    assert registry.get("Brain") == entry
    assert registry.names() == ["Brain"]


def test_add_existing_name_replaces_in_place():
    registry = DatasetRegistry()
    registry.add("A", "https://a.org")
    registry.add("B", "https://b.org")
    registry.add("C", "https://c.org")

    registry.add("B", "https://b2.org")

    assert registry.names() == ["A", "B", "C"]
    assert registry.get("B").base_url == "https://b2.org"
    assert len(registry) == 3


@pytest.mark.parametrize("name,base_url", [("", "https://x"), ("X", ""), (None, "https://x"), ("  ", "https://x")])
def test_add_requires_both_fields(name, base_url):
    registry = DatasetRegistry()
    with pytest.raises(InvalidArgument):
        registry.add(name, base_url)
    assert len(registry) == 0


def test_all_returns_a_copy():
    registry = DatasetRegistry()
    registry.add("A", "https://a.org")

    snapshot = registry.all()
    snapshot.clear()

    assert registry.names() == ["A"]


def test_get_unknown_is_none():
    registry = DatasetRegistry()
    assert registry.get("nope") is None
    assert registry.get(None) is None
    assert "nope" not in registry


def test_seed_defaults_registers_builtin_datasets():
    registry = seed_defaults(DatasetRegistry())
    assert registry.names() == [name for name, _ in DEFAULT_DATASETS]
    assert registry.get("Male CNS").base_url.startswith("https://reiserlab.github.io/")
