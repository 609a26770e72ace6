from __future__ import annotations

import pytest

from ct_browser.core.models import NeuronRecord
from ct_browser.core.paths import (
    BLANK_URL,
    available_hemispheres,
    build_navigable_url,
    default_hemisphere,
    normalize_url,
    resolve_path,
)


def test_missing_hemisphere_falls_back_to_combined():
    record = NeuronRecord(name="X", urls={"combined": "x"})
    assert resolve_path(record, "dorsal") == "/types/x"


def test_resolve_path_uses_requested_hemisphere():
    record = NeuronRecord(name="T1", urls={"combined": "t1.html", "left": "/t1-left.html"})
    assert resolve_path(record) == "/types/t1.html"
    assert resolve_path(record, "left") == "/types/t1-left.html"


def test_resolve_path_does_not_fall_back_to_first_available():
    record = NeuronRecord(name="T1", urls={"left": "t1-left.html"})
    assert resolve_path(record, "right") == ""
    assert resolve_path(record, "combined") == ""
    assert resolve_path(None) == ""


def test_resolve_path_ignores_empty_and_non_string_paths():
    record = NeuronRecord(name="T1", urls={"combined": "", "left": None, "right": 3})
    assert resolve_path(record, "left") == ""
    assert available_hemispheres(record) == []


def test_available_hemispheres_keeps_insertion_order():
    record = NeuronRecord(name="T1", urls={"right": "r.html", "combined": "c.html", "left": "", "dorsal": "d.html"})
    assert available_hemispheres(record) == ["right", "combined", "dorsal"]


def test_default_hemisphere_prefers_combined_then_first():
    assert default_hemisphere(NeuronRecord("T", {"left": "l", "combined": "c"})) == "combined"
    assert default_hemisphere(NeuronRecord("T", {"right": "r", "left": "l"})) == "right"
    assert default_hemisphere(NeuronRecord("T", {})) is None


@pytest.mark.parametrize(
    "base_url,path,expected",
    [
        ("https://ex.org/brain", "/types/t1.html", "https://ex.org/brain/types/t1.html"),
        ("https://ex.org/brain/", "/types/t1.html", "https://ex.org/brain/types/t1.html"),
        ("https://ex.org/brain/", "types/t1.html", "https://ex.org/brain/types/t1.html"),
        ("https://ex.org/brain", "https://other.org/t1.html", "https://other.org/t1.html"),
        ("https://ex.org/brain", "HTTP://other.org/t1.html", "HTTP://other.org/t1.html"),
        ("https://ex.org/brain", "", "https://ex.org/brain"),
        ("", "", BLANK_URL),
        (None, None, BLANK_URL),
    ],
)
def test_build_navigable_url(base_url, path, expected):
    assert build_navigable_url(base_url, path) == expected


def test_normalize_url_strips_fragment_and_trailing_slash():
    assert normalize_url("https://ex.org/a/#top") == "https://ex.org/a"
    assert normalize_url("https://ex.org/a.html#x") == "https://ex.org/a.html"
    assert normalize_url("") == ""
