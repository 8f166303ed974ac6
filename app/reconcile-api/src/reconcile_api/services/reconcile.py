import logging
import os
from pathlib import Path
from typing import Any

from tree_reconciler.components import ScopeRegistry, reconcile

logger = logging.getLogger(__name__)


class DirectoryNotAllowedError(Exception):
    """The requested directory lies outside the configured allowed root."""


def resolve_directory(directory: str, allowed_root: Path | None) -> Path:
    """Make *directory* absolute and check it stays inside *allowed_root*.

    Containment is checked on the fully resolved path. The returned path
    keeps any symlinked names so the tree is named as requested.

    Raises:
        DirectoryNotAllowedError: If *allowed_root* is set and does not
                                  contain the resolved path.
    """
    path = Path(os.path.abspath(Path(directory).expanduser()))
    if allowed_root is not None:
        real = path.resolve()
        root = allowed_root.expanduser().resolve()
        if real != root and root not in real.parents:
            raise DirectoryNotAllowedError(f"{real} is outside {root}")
    return path


def reconcile_directory(
    directory: str,
    scope: int | None,
    registry: ScopeRegistry,
    allowed_root: Path | None = None,
) -> dict[str, Any]:
    path = resolve_directory(directory, allowed_root)
    if scope is None:
        scope = registry.allocate_scope()
    tree = reconcile(path, scope)
    return {"scope": scope, "tree": tree.to_dict()}


def describe_scopes(registry: ScopeRegistry) -> dict[str, Any]:
    return {
        "current_scope": registry.current_scope,
        "environments": sorted(registry.environments),
    }


def allocate_scope(registry: ScopeRegistry) -> dict[str, int]:
    scope = registry.allocate_scope()
    logger.info("Allocated scope %d via API", scope)
    return {"scope": scope}
