from typing import Annotated

from fastapi import Depends

from tree_reconciler.components import ScopeRegistry, get_registry

from reconcile_api.config import Settings, settings


def get_scope_registry() -> ScopeRegistry:
    """FastAPI dependency returning the process-wide scope registry."""
    return get_registry()


def get_settings() -> Settings:
    return settings


Registry = Annotated[ScopeRegistry, Depends(get_scope_registry)]
ApiSettings = Annotated[Settings, Depends(get_settings)]
