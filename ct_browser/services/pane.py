from __future__ import annotations

import logging
from typing import Callable, List, Optional

from ct_browser.core.catalog import display_label, normalize_name
from ct_browser.core.dataset_registry import DatasetRegistry
from ct_browser.core.exceptions import FetchError, InvalidArgument, SchemaError
from ct_browser.core.models import PaneChange, PaneState, SelectionStage, UpdateSource
from ct_browser.core.paths import (
    BLANK_URL,
    available_hemispheres,
    build_navigable_url,
    default_hemisphere,
    resolve_path,
)
from ct_browser.services.catalog_loader import CatalogLoader

logger = logging.getLogger(__name__)

PaneListener = Callable[[PaneChange], None]


class PaneController:
    """
    Selection state machine for one pane.

    States: EMPTY -> DATASET_SELECTED -> CELL_TYPE_SELECTED -> HEMISPHERE_SELECTED,
    derived from PaneState (see PaneState.stage). Every mutation is announced to
    subscribers as a PaneChange tagged with the UpdateSource that caused it.
    """

    def __init__(self, pane_id: str, registry: DatasetRegistry, loader: CatalogLoader):
        self.state = PaneState(pane_id=pane_id)
        self._registry = registry
        self._loader = loader
        self._listeners: List[PaneListener] = []

    @property
    def pane_id(self) -> str:
        return self.state.pane_id

    @property
    def stage(self) -> SelectionStage:
        return self.state.stage

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def subscribe(self, listener: PaneListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, source: UpdateSource) -> None:
        change = PaneChange(pane_id=self.pane_id, source=source, state=self.state)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception(
                    "Pane listener failed",
                    extra={"pane": self.pane_id, "source": source.value},
                )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    async def select_dataset(self, name: Optional[str], source: UpdateSource = UpdateSource.USER) -> bool:
        """
        Switch the pane to dataset `name` and load its catalog.

        Cell type and hemisphere are cleared before the fetch starts. The load
        result is applied only if no other switch happened meanwhile. Load
        failures are logged and leave the pane EMPTY with state.error set.

        :return: True if the catalog was applied
        """
        descriptor = self._registry.get(name)
        if descriptor is None:
            if name:
                logger.warning("Unknown dataset requested", extra={"pane": self.pane_id, "dataset": name})
            self.clear(source)
            return False

        self.state.load_token += 1
        token = self.state.load_token

        self.state.clear_dataset()
        self.state.error = None
        self.state.dataset_name = descriptor.name
        self.state.loading = True
        self._emit(source)

        try:
            catalog = await self._loader.load(descriptor.base_url)
        except (FetchError, SchemaError, InvalidArgument) as e:
            if token != self.state.load_token:
                logger.debug("Ignoring failure of superseded load", extra={"pane": self.pane_id, "token": token})
                return False
            logger.error(
                "Dataset load failed",
                extra={"pane": self.pane_id, "dataset": descriptor.name, "error": str(e)},
            )
            self.state.clear_dataset()
            self.state.error = str(e)
            self._emit(source)
            return False
        except Exception:
            logger.exception(
                "Unexpected error while loading dataset",
                extra={"pane": self.pane_id, "dataset": descriptor.name},
            )
            if token == self.state.load_token:
                self.state.clear_dataset()
                self._emit(source)
            raise

        if token != self.state.load_token:
            logger.debug(
                "Discarding stale catalog",
                extra={"pane": self.pane_id, "dataset": descriptor.name, "token": token},
            )
            return False

        self.state.base_url = descriptor.base_url
        self.state.catalog_names = list(catalog.neuron_types)
        self.state.catalog_index = catalog.neuron_data
        self.state.loading = False
        self._emit(source)
        return True

    def select_cell_type(
            self,
            display_name: Optional[str],
            source: UpdateSource = UpdateSource.USER,
            hemisphere: Optional[str] = None,
    ) -> bool:
        """
        Select a cell type by display name (case/whitespace-insensitive).

        The hemisphere defaults to "combined" or the first available one; a
        caller that already knows the hemisphere (reconciliation) passes it so
        both change in a single transition. Unknown names clear the selection.

        :return: True if the record was found
        """
        if self.state.base_url is None:
            raise InvalidArgument(f"Pane '{self.pane_id}' has no dataset loaded")

        record = self.state.catalog_index.get(normalize_name(display_name)) if display_name else None
        if record is None:
            if display_name:
                logger.info(
                    "Cell type not in catalog",
                    extra={"pane": self.pane_id, "celltype": display_name},
                )
            self.state.clear_selection()
            self._emit(source)
            return False

        self.state.current_record = record
        if hemisphere and hemisphere in available_hemispheres(record):
            self.state.current_hemisphere = hemisphere
        else:
            self.state.current_hemisphere = default_hemisphere(record)
        self._emit(source)
        return True

    def select_hemisphere(self, key: Optional[str], source: UpdateSource = UpdateSource.USER) -> None:
        """
        Pick a hemisphere of the current record. An unknown key is kept and
        resolved with the "combined" fallback; if nothing resolves the pane has
        no navigable target but keeps its record.
        """
        if self.state.current_record is None:
            raise InvalidArgument(f"Pane '{self.pane_id}' has no cell type selected")

        self.state.current_hemisphere = key or None
        if not self.has_target:
            logger.info(
                "Hemisphere has no page",
                extra={"pane": self.pane_id, "celltype": self.state.current_record.name, "hemisphere": key},
            )
        self._emit(source)

    def clear(self, source: UpdateSource = UpdateSource.USER) -> None:
        """Back to EMPTY; any in-flight load is superseded."""
        self.state.load_token += 1
        self.state.clear_dataset()
        self.state.error = None
        self._emit(source)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------
    @property
    def path(self) -> str:
        return resolve_path(self.state.current_record, self.state.current_hemisphere)

    @property
    def has_target(self) -> bool:
        return bool(self.path)

    @property
    def navigable_url(self) -> Optional[str]:
        """URL the embedded frame should show, or None when nothing is selectable."""
        if self.state.base_url is None or not self.has_target:
            return None
        return build_navigable_url(self.state.base_url, self.path)

    @property
    def frame_url(self) -> str:
        return self.navigable_url or BLANK_URL

    def cell_type_options(self) -> List[str]:
        return list(self.state.catalog_names)

    def hemisphere_options(self) -> List[str]:
        return available_hemispheres(self.state.current_record)

    def current_cell_type_label(self) -> Optional[str]:
        return display_label(self.state.catalog_names, self.state.current_record)
