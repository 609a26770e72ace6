"""
Service layer: catalog loading/caching, per-pane selection state machines,
navigation reconciliation, cross-pane coordination and the comparison session.
"""

from .catalog_loader import CatalogLoader, RequestsFetcher
from .coordinator import FrameCollaborator, PaneCoordinator
from .pane import PaneController
from .reconciler import NavigationDebouncer, NavigationReconciler, match_navigation
from .session import CompareSession, SessionStore, generate_session_id

__all__ = [
    "CatalogLoader",
    "RequestsFetcher",
    "FrameCollaborator",
    "PaneCoordinator",
    "PaneController",
    "NavigationDebouncer",
    "NavigationReconciler",
    "match_navigation",
    "CompareSession",
    "SessionStore",
    "generate_session_id",
]
