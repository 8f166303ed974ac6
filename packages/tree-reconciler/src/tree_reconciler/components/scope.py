"""
Process-wide registry of reconciliation scopes and script environments.

There is exactly one :class:`ScopeRegistry` per process. :func:`get_registry`
creates it on first access and returns the same instance afterwards, even
when this module is reloaded, so live environments and the scope counter
survive for the whole session. Entries are never evicted here.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, PrivateAttr

from .node import Node

logger = logging.getLogger(__name__)


def environment_key(scope: int, path: str | Path) -> str:
    """Key identifying one script-bearing node within *scope*."""
    return f"{scope}:{Path(path).as_posix()}"


class VirtualEnvironment(BaseModel):
    """Execution context for one script node in one scope."""

    key: str
    scope: int
    script_name: str
    script_kind: str
    variables: dict[str, Any] = Field(default_factory=dict)


class ScopeRegistry(BaseModel):
    current_scope: int = 0
    environments: dict[str, VirtualEnvironment] = Field(default_factory=dict)

    # Serialises counter increments and environment creation.
    _mutex: threading.Lock = PrivateAttr(default_factory=threading.Lock)

    def allocate_scope(self) -> int:
        """Return a new scope id. Ids start at 1 and are never reused."""
        with self._mutex:
            self.current_scope += 1
            scope = self.current_scope
        logger.debug("Allocated scope %d", scope)
        return scope

    def open_environment(self, node: Node) -> VirtualEnvironment:
        """Return the environment for a script node, creating it on first use.

        Raises:
            ValueError: If *node* is not a script or carries no environment key.
        """
        key = node.environment_key
        if not node.is_script or key is None:
            raise ValueError(f"{node.kind} {node.name!r} has no script environment")

        with self._mutex:
            env = self.environments.get(key)
            if env is None:
                scope, _, _ = key.partition(":")
                env = VirtualEnvironment(
                    key=key,
                    scope=int(scope),
                    script_name=node.name,
                    script_kind=node.kind,
                )
                self.environments[key] = env
                logger.debug("Opened environment %s", key)
        return env


# Looked up in globals() so that reloading this module keeps the live registry.
_registry: ScopeRegistry | None = globals().get("_registry")
_lock: threading.Lock = globals().get("_lock") or threading.Lock()


def get_registry() -> ScopeRegistry:
    """Return the process-wide registry, creating it only if none exists."""
    global _registry
    with _lock:
        if _registry is None:
            _registry = ScopeRegistry()
            logger.info("Created scope registry")
        return _registry


def reset_registry() -> None:
    """Drop the process-wide registry.

    For test fixtures only; production code must never call this.
    """
    global _registry
    with _lock:
        _registry = None
