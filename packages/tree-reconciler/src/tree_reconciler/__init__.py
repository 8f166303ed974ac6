"""Mirror a directory tree into a typed in-memory node tree."""

from tree_reconciler.components import (
    Node,
    ReconcileError,
    get_registry,
    reconcile,
    reconcile_directory,
)

__all__ = ["Node", "ReconcileError", "get_registry", "reconcile", "reconcile_directory"]
