"""Exceptions raised while reconciling a directory into a node tree.

None of these are recovered inside the reconciler: every one of them unwinds
the whole walk back to the caller of :func:`~tree_reconciler.reconcile`.
"""

from __future__ import annotations

from pathlib import Path


class ReconcileError(Exception):
    """Base class for every reconciliation failure."""


class ParseError(ReconcileError):
    """A metadata file does not contain valid JSON."""

    summary = "Invalid JSON"

    def __init__(self, path: str | Path, detail: str) -> None:
        self.path = str(path)
        self.detail = detail
        super().__init__(f"{self.summary} in {self.path}: {detail}")


class MetadataError(ParseError):
    """A metadata file is valid JSON but not a valid metadata document."""

    summary = "Invalid metadata"


class UnsupportedKindError(ReconcileError):
    """The node factory does not know the requested kind."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Unsupported node kind: {kind!r}")


class PropertyAssignmentError(ReconcileError):
    """A property does not exist on a kind, or the value has the wrong type."""

    def __init__(self, kind: str, prop: str, detail: str) -> None:
        self.kind = kind
        self.prop = prop
        super().__init__(f"Cannot set {kind}.{prop}: {detail}")


class KindRegistrationError(ReconcileError):
    """A kind's property table is invalid."""


class FilesystemError(ReconcileError):
    """An entry vanished or became unreadable during the walk."""

    def __init__(self, path: str | Path, detail: str) -> None:
        self.path = str(path)
        super().__init__(f"{detail}: {self.path}")
