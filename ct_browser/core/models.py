from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


@dataclass(frozen=True)
class DatasetDescriptor:
    """
    A selectable dataset: display name plus the root URL its catalog and
    detail pages are served from.
    """
    name: str
    base_url: str


@dataclass(frozen=True)
class NeuronRecord:
    """
    One cell-type entry of a catalog.

    - name: display label as shipped by the dataset
    - urls: hemisphere key -> relative detail page path, insertion order kept.
      "combined" is the distinguished default when present.
    """
    name: str
    urls: Dict[str, str] = field(default_factory=dict)


class SelectionStage(str, Enum):
    EMPTY = "empty"
    DATASET_SELECTED = "dataset_selected"
    CELL_TYPE_SELECTED = "cell_type_selected"
    HEMISPHERE_SELECTED = "hemisphere_selected"


class UpdateSource(str, Enum):
    """Who caused a pane mutation. Reconciled changes must never navigate the frame."""
    USER = "user"
    RECONCILED = "reconciled"
    RESTORED = "restored"
    RESET = "reset"


@dataclass
class PaneState:
    """
    Selection hierarchy for one pane: dataset -> cell type -> hemisphere.

    - load_token: bumped on every dataset switch; a catalog load result is
      applied only while its token is still current
    - loading: True between dataset switch and load completion
    - error: message of the last failed load, cleared on the next switch
    """
    pane_id: str
    dataset_name: Optional[str] = None
    base_url: Optional[str] = None
    catalog_names: List[str] = field(default_factory=list)
    catalog_index: Dict[str, NeuronRecord] = field(default_factory=dict)
    current_record: Optional[NeuronRecord] = None
    current_hemisphere: Optional[str] = None
    load_token: int = 0
    loading: bool = False
    error: Optional[str] = None

    @property
    def stage(self) -> SelectionStage:
        if self.base_url is None:
            return SelectionStage.EMPTY
        if self.current_record is None:
            return SelectionStage.DATASET_SELECTED
        if self.current_hemisphere is None:
            return SelectionStage.CELL_TYPE_SELECTED
        return SelectionStage.HEMISPHERE_SELECTED

    def clear_selection(self) -> None:
        self.current_record = None
        self.current_hemisphere = None

    def clear_dataset(self) -> None:
        self.dataset_name = None
        self.base_url = None
        self.catalog_names = []
        self.catalog_index = {}
        self.loading = False
        self.clear_selection()


@dataclass(frozen=True)
class PaneSelection:
    """Display strings persisted in the URL for one pane."""
    dataset: Optional[str] = None
    celltype: Optional[str] = None
    hemisphere: Optional[str] = None

    def is_empty(self) -> bool:
        return not (self.dataset or self.celltype or self.hemisphere)


@dataclass(frozen=True)
class PaneChange:
    pane_id: str
    source: UpdateSource
    state: PaneState
