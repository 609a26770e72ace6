"""
Core domain layer: dataset registry, catalog model, pane selection state,
path resolution and the URL codec
"""

from .catalog import Catalog, normalize_name, parse_catalog
from .dataset_registry import DatasetRegistry, seed_defaults
from .models import (
    DatasetDescriptor,
    NeuronRecord,
    PaneChange,
    PaneSelection,
    PaneState,
    SelectionStage,
    UpdateSource,
)

__all__ = [
    "Catalog",
    "normalize_name",
    "parse_catalog",
    "DatasetRegistry",
    "seed_defaults",
    "DatasetDescriptor",
    "NeuronRecord",
    "PaneChange",
    "PaneSelection",
    "PaneState",
    "SelectionStage",
    "UpdateSource",
]
