from __future__ import annotations

from typing import Any, Dict, List, Optional

from ct_browser.core.models import SelectionStage
from ct_browser.services.pane import PaneController
from ct_browser.services.session import CompareSession


def options(values: List[str]) -> List[dict]:
    return [{"label": v, "value": v} for v in values]


def status_text(pane: PaneController) -> str:
    state = pane.state
    if state.error:
        return f"Could not load dataset: {state.error}"
    if state.loading:
        return f"Loading {state.dataset_name}..."

    stage = pane.stage
    if stage is SelectionStage.EMPTY:
        return "No dataset selected."
    if stage is SelectionStage.DATASET_SELECTED:
        n = len(state.catalog_names)
        return f"{state.dataset_name}: {n} cell types. Choose one to show its page."
    if not pane.has_target:
        return f"No page available for {pane.current_cell_type_label()} ({state.current_hemisphere or 'combined'})."
    return f"{state.dataset_name} / {pane.current_cell_type_label()} / {state.current_hemisphere or 'combined'}"


def render_pane(pane: PaneController) -> Dict[str, Any]:
    """Selector values/options for one pane, read straight from its PaneState."""
    state = pane.state
    has_catalog = state.base_url is not None
    has_record = state.current_record is not None

    hemisphere_value: Optional[str] = state.current_hemisphere if has_record else None
    hemisphere_options = options(pane.hemisphere_options())
    if hemisphere_value and hemisphere_value not in pane.hemisphere_options():
        # keep an unknown restored key visible instead of silently dropping it
        hemisphere_options.append({"label": f"{hemisphere_value} (n/a)", "value": hemisphere_value})

    return {
        "dataset": state.dataset_name,
        "celltype_options": options(pane.cell_type_options()) if has_catalog else [],
        "celltype": pane.current_cell_type_label(),
        "celltype_disabled": not has_catalog,
        "hemisphere_options": hemisphere_options,
        "hemisphere": hemisphere_value,
        "hemisphere_disabled": not has_record,
        "status": status_text(pane),
    }


def layout_state(session: CompareSession) -> dict:
    return session.coordinator.snapshot().to_dict()
