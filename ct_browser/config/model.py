from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from ct_browser.services.catalog_loader import DEFAULT_CATALOG_FILE, DEFAULT_TIMEOUT
from ct_browser.services.session import DEFAULT_MAX_SESSIONS

DEFAULT_DEBOUNCE_MS = 50


@dataclass
class DatasetConfig:
    """
    Parsed config entry for a single dataset.
    """
    raw: Dict[str, Any]
    source_path: Optional[Path]
    index: int

    @property
    def name(self) -> str:
        return str(self.raw.get("name") or "").strip()

    @property
    def base_url(self) -> str:
        return str(self.raw.get("base_url") or "").strip()

    @classmethod
    def from_raw(cls, raw: Dict[str, Any], source_path: Optional[Path], index: int) -> DatasetConfig:
        return cls(raw=raw, source_path=source_path, index=index)


@dataclass(frozen=True)
class AnchorLink:
    """An in-page section every detail page shares; rendered as a jump button."""
    label: str
    anchor: str


@dataclass
class GlobalConfig:
    ui_title: str = "Cell Type Explorer"
    subtitle: str = "Compare cell types side by side"
    catalog_file: str = DEFAULT_CATALOG_FILE
    request_timeout: float = DEFAULT_TIMEOUT
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    base_path: str = "/"
    max_sessions: int = DEFAULT_MAX_SESSIONS
    anchors: List[AnchorLink] = field(default_factory=list)
    datasets: List[DatasetConfig] = field(default_factory=list)

    @property
    def quiet_period(self) -> float:
        return max(self.debounce_ms, 0) / 1000.0
