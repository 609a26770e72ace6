from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

from ct_browser.core.exceptions import SchemaError
from ct_browser.core.models import NeuronRecord

logger = logging.getLogger(__name__)

CatalogIndex = Dict[str, NeuronRecord]


def normalize_name(value: Any) -> str:
    """Trim + case-fold. Idempotent: normalize_name(normalize_name(x)) == normalize_name(x)."""
    if value is None:
        return ""
    return str(value).strip().casefold()


@dataclass(frozen=True)
class Catalog:
    """
    Normalized catalog for one dataset, as produced by the loader.

    - base_url: trailing-slash-free root the catalog was fetched from
    - neuron_types: display labels in catalog order (what selectors show)
    - neuron_data: normalized name -> first matching NeuronRecord
    """
    base_url: str
    neuron_types: List[str] = field(default_factory=list)
    neuron_data: CatalogIndex = field(default_factory=dict)

    def lookup(self, display_name: str):
        return self.neuron_data.get(normalize_name(display_name))

    def iter_records(self) -> Iterator[NeuronRecord]:
        return iter_records(self.neuron_types, self.neuron_data)


def iter_records(names: List[str], index: CatalogIndex) -> Iterator[NeuronRecord]:
    """Records in catalog order, then any indexed record not listed in names."""
    seen: set[str] = set()
    for label in names:
        key = normalize_name(label)
        if key in seen:
            continue
        seen.add(key)
        record = index.get(key)
        if record is not None:
            yield record
    for key, record in index.items():
        if key not in seen:
            seen.add(key)
            yield record


def _parse_record(raw: Any) -> NeuronRecord | None:
    if not isinstance(raw, dict):
        return None
    name = raw.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    urls = raw.get("urls") or {}
    if not isinstance(urls, dict):
        urls = {}
    return NeuronRecord(name=name, urls={str(k): v for k, v in urls.items()})


def build_index(records: List[NeuronRecord]) -> CatalogIndex:
    index: CatalogIndex = {}
    for record in records:
        key = normalize_name(record.name)
        if key in index:
            continue
        index[key] = record
    return index


def parse_catalog(base_url: str, raw: Any) -> Catalog:
    """
    Shape-check a fetched catalog document and build its lookup table.

    Raises:
        SchemaError: if the body is not an object or 'names' is missing / not a list
    """
    if not isinstance(raw, dict):
        raise SchemaError(f"Catalog for {base_url} must be a JSON object")

    names = raw.get("names")
    if not isinstance(names, list):
        raise SchemaError(f"Catalog for {base_url} has no 'names' list")

    neurons = raw.get("neurons")
    if neurons is None:
        neurons = []
    if not isinstance(neurons, list):
        raise SchemaError(f"Catalog for {base_url}: 'neurons' must be a list")

    records: List[NeuronRecord] = []
    skipped = 0
    for entry in neurons:
        record = _parse_record(entry)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.warning(
            "Skipped malformed neuron entries",
            extra={"base_url": base_url, "n_skipped": skipped},
        )

    return Catalog(
        base_url=base_url,
        neuron_types=[str(n) for n in names if n is not None],
        neuron_data=build_index(records),
    )


def display_label(names: List[str], record: NeuronRecord | None) -> str | None:
    """Label the selector shows for `record`: its entry in names, else the record name."""
    if record is None:
        return None
    wanted = normalize_name(record.name)
    return next((label for label in names if normalize_name(label) == wanted), record.name)
