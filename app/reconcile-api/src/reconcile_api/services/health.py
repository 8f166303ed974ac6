from typing import Any

from tree_reconciler.components import ScopeRegistry


async def health_check(registry: ScopeRegistry) -> dict[str, Any]:
    return {
        "status": "ok",
        "current_scope": registry.current_scope,
        "environments": len(registry.environments),
    }
