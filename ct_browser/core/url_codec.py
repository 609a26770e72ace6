from __future__ import annotations

from typing import Dict, Mapping, Optional, Tuple
from urllib.parse import parse_qsl, quote, urlencode

from ct_browser.core.catalog import display_label
from ct_browser.core.models import PaneSelection, PaneState

PANE_IDS: Tuple[str, ...] = ("a", "b")

_FIELDS = ("dataset", "celltype", "hemisphere")


def param_name(field_name: str, pane_id: str) -> str:
    return f"{field_name}-{pane_id}"


def encode(selections: Mapping[str, PaneSelection], pane_ids: Tuple[str, ...] = PANE_IDS) -> str:
    """
    Flat, pane-suffixed query string ("dataset-a=Brain&celltype-a=T1&...").
    Values are display strings, percent-encoded. No selections -> "".
    """
    pairs = []
    for pane_id in pane_ids:
        selection = selections.get(pane_id)
        if selection is None:
            continue
        for field_name in _FIELDS:
            value = getattr(selection, field_name)
            if value:
                pairs.append((param_name(field_name, pane_id), value))
    return urlencode(pairs, quote_via=quote)


def decode(query: Optional[str], pane_ids: Tuple[str, ...] = PANE_IDS) -> Dict[str, PaneSelection]:
    """Inverse of encode(); unknown keys are ignored and missing keys come back as None."""
    query = (query or "").lstrip("?")
    params: Dict[str, str] = {}
    for key, value in parse_qsl(query, keep_blank_values=False):
        # first occurrence wins, like URLSearchParams.get
        params.setdefault(key, value)

    result: Dict[str, PaneSelection] = {}
    for pane_id in pane_ids:
        values = {
            field_name: params.get(param_name(field_name, pane_id)) or None
            for field_name in _FIELDS
        }
        result[pane_id] = PaneSelection(**values)
    return result


def build_location(path: str, query: str) -> str:
    path = path or "/"
    return f"{path}?{query}" if query else path


def selection_from_state(state: PaneState) -> PaneSelection:
    """
    Display strings for one pane. The cell type is written with the label the
    catalog's names list shows (falling back to the record name), so it matches
    what the selector displays.
    """
    if state.dataset_name is None:
        return PaneSelection()

    celltype = display_label(state.catalog_names, state.current_record)

    hemisphere = state.current_hemisphere if celltype else None
    return PaneSelection(dataset=state.dataset_name, celltype=celltype, hemisphere=hemisphere)
