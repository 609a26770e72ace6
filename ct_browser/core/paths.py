from __future__ import annotations

import re
from typing import List, Optional

from ct_browser.core.models import NeuronRecord

COMBINED = "combined"
TYPES_PREFIX = "/types/"
BLANK_URL = "about:blank"

_ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)


def _usable(value: object) -> bool:
    return isinstance(value, str) and value != ""


def available_hemispheres(record: Optional[NeuronRecord]) -> List[str]:
    """Hemisphere keys with a non-empty path, in the record's insertion order."""
    if record is None:
        return []
    return [key for key, value in record.urls.items() if _usable(value)]


def default_hemisphere(record: Optional[NeuronRecord]) -> Optional[str]:
    """
    Hemisphere picked automatically when a cell type is selected:
    "combined" if present, else the first available one.
    """
    hemispheres = available_hemispheres(record)
    if not hemispheres:
        return None
    if COMBINED in hemispheres:
        return COMBINED
    return hemispheres[0]


def resolve_path(record: Optional[NeuronRecord], hemisphere: Optional[str] = COMBINED) -> str:
    """
    Detail page path for (record, hemisphere), "/types/<path>" or "".

    A missing hemisphere falls back to "combined", never to the first available.
    """
    if record is None:
        return ""
    hemisphere = hemisphere or COMBINED

    path = record.urls.get(hemisphere)
    if not _usable(path) and hemisphere != COMBINED:
        path = record.urls.get(COMBINED)
    if not _usable(path):
        return ""

    if _ABSOLUTE_URL.match(path):
        return path
    if path.startswith("/"):
        path = path[1:]
    return TYPES_PREFIX + path


def is_absolute_url(value: str) -> bool:
    return bool(value) and bool(_ABSOLUTE_URL.match(value))


def build_navigable_url(base_url: Optional[str], path: Optional[str]) -> str:
    """Join a dataset base URL and a detail page path into what the frame should load."""
    base_url = base_url or ""
    path = path or ""

    if not path:
        return base_url or BLANK_URL
    if is_absolute_url(path):
        return path
    if not base_url:
        return path

    if path.startswith("/"):
        path = path[1:]
    return f"{base_url.rstrip('/')}/{path}"


def normalize_url(url: Optional[str]) -> str:
    """Drop the fragment and trailing slashes so equivalent frame URLs compare equal."""
    if not url:
        return ""
    url = url.split("#", 1)[0]
    return url.rstrip("/")


def strip_trailing_slashes(url: Optional[str]) -> str:
    return (url or "").strip().rstrip("/")
