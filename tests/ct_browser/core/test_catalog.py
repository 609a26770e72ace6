from __future__ import annotations

import pytest

from ct_browser.core.catalog import display_label, normalize_name, parse_catalog
from ct_browser.core.exceptions import SchemaError
from ct_browser.core.models import NeuronRecord


def test_normalize_name_is_trim_and_casefold():
    assert normalize_name(" Foo ") == normalize_name("foo") == normalize_name("FOO") == "foo"
    assert normalize_name(normalize_name("  MiXeD ")) == normalize_name("  MiXeD ")
    assert normalize_name(None) == ""


def test_parse_catalog_builds_index_first_record_wins():
    raw = {
        "names": ["T1", "T2"],
        "neurons": [
            {"name": "T1", "urls": {"combined": "t1.html"}},
            {"name": " t1 ", "urls": {"combined": "other.html"}},
            {"name": "T2"},
        ],
    }

    catalog = parse_catalog("https://ex.org/brain", raw)

    assert catalog.neuron_types == ["T1", "T2"]
    assert set(catalog.neuron_data) == {"t1", "t2"}
    assert catalog.neuron_data["t1"].urls == {"combined": "t1.html"}
    assert catalog.neuron_data["t2"].urls == {}
    assert catalog.lookup("  T1") is catalog.neuron_data["t1"]


def test_parse_catalog_without_neurons_is_empty_index():
    catalog = parse_catalog("https://ex.org/brain", {"names": ["T1"]})
    assert catalog.neuron_types == ["T1"]
    assert catalog.neuron_data == {}


def test_parse_catalog_skips_malformed_neuron_entries():
    raw = {
        "names": ["T1"],
        "neurons": ["junk", {"urls": {"combined": "x.html"}}, {"name": "T1", "urls": ["not", "a", "dict"]}],
    }
    catalog = parse_catalog("https://ex.org/brain", raw)
    assert list(catalog.neuron_data) == ["t1"]
    assert catalog.neuron_data["t1"].urls == {}


@pytest.mark.parametrize(
    "raw",
    [
        [],
        {"neurons": []},
        {"names": "T1"},
        {"names": None},
        {"names": ["T1"], "neurons": {"name": "T1"}},
    ],
)
def test_parse_catalog_rejects_bad_shapes(raw):
    with pytest.raises(SchemaError):
        parse_catalog("https://ex.org/brain", raw)


def test_iter_records_follows_names_then_unlisted_records():
    raw = {
        "names": ["B", "A"],
        "neurons": [{"name": "A"}, {"name": "B"}, {"name": "C"}],
    }
    catalog = parse_catalog("https://ex.org", raw)
    assert [r.name for r in catalog.iter_records()] == ["B", "A", "C"]


def test_display_label_prefers_catalog_spelling():
    record = NeuronRecord(name="t1 ")
    assert display_label(["T1", "T2"], record) == "T1"
    assert display_label([], record) == "t1 "
    assert display_label(["T1"], None) is None
