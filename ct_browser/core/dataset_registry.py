from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from ct_browser.core.exceptions import InvalidArgument
from ct_browser.core.models import DatasetDescriptor

logger = logging.getLogger(__name__)

DEFAULT_DATASETS = (
    (
        "Male CNS",
        "https://reiserlab.github.io/celltype-explorer-drosophila-male-cns/",
    ),
    (
        "Female Adult Fly Brain",
        "https://reiserlab.github.io/celltype-explorer-drosophila-female-adult-fly-brain/",
    ),
)


class DatasetRegistry:
    """
    Ordered, name-keyed table of datasets the panes can pick from

    Design Notes:
    - Entries are {@link DatasetDescriptor} values, keyed by 'name'
    - Re-adding an existing name replaces the entry in place, so the
      dropdown order stays stable when a dataset's base URL is updated
    - Purely in memory; config files and defaults feed it at startup
    """

    def __init__(self):
        self._datasets: List[DatasetDescriptor] = []

    def add(self, name: str, base_url: str) -> DatasetDescriptor:
        """
        Insert or replace a dataset

        :param name: unique display name
        :param base_url: root URL the catalog is served from
        :return: the stored descriptor

        Raises:
            InvalidArgument: if either field is empty
        """
        if not name or not str(name).strip() or not base_url or not str(base_url).strip():
            raise InvalidArgument("Both name and base_url are required to add a dataset.")

        entry = DatasetDescriptor(name=name, base_url=base_url)

        for i, existing in enumerate(self._datasets):
            if existing.name == name:
                self._datasets[i] = entry
                logger.info("Dataset replaced", extra={"dataset": name, "base_url": base_url})
                return entry

        self._datasets.append(entry)
        logger.info("Dataset registered", extra={"dataset": name, "base_url": base_url})
        return entry

    def all(self) -> List[DatasetDescriptor]:
        """Snapshot in registration order; mutating it does not affect the registry."""
        return list(self._datasets)

    def get(self, name: Optional[str]) -> Optional[DatasetDescriptor]:
        if not name:
            return None
        return next((ds for ds in self._datasets if ds.name == name), None)

    def names(self) -> List[str]:
        return [ds.name for ds in self._datasets]

    def __contains__(self, name: object) -> bool:
        return any(ds.name == name for ds in self._datasets)

    def __iter__(self) -> Iterator[DatasetDescriptor]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self._datasets)


def seed_defaults(registry: DatasetRegistry) -> DatasetRegistry:
    """Register the built-in datasets. Used when no dataset config is found."""
    for name, base_url in DEFAULT_DATASETS:
        registry.add(name, base_url)
    return registry
