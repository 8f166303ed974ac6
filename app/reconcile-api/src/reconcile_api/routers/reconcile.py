import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from tree_reconciler.components import FilesystemError, ReconcileError

from reconcile_api.dependencies import ApiSettings, Registry
from reconcile_api.services import reconcile as reconcile_service
from reconcile_api.services.reconcile import DirectoryNotAllowedError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reconcile"])


# ── Schemas ───────────────────────────────────────────────────────────────────

class ReconcileRequest(BaseModel):
    directory: str
    scope: int | None = Field(default=None, ge=1)


class ReconcileResponse(BaseModel):
    scope: int
    tree: dict[str, Any]


class ScopesResponse(BaseModel):
    current_scope: int
    environments: list[str]


class ScopeResponse(BaseModel):
    scope: int


# ── Routes ────────────────────────────────────────────────────────────────────

# Plain def: reconciliation does blocking filesystem reads, so FastAPI runs it
# in its threadpool.
@router.post("/reconcile", response_model=ReconcileResponse)
def reconcile_directory(body: ReconcileRequest, registry: Registry, settings: ApiSettings) -> ReconcileResponse:
    """Reconcile a directory and return its node tree."""
    try:
        result = reconcile_service.reconcile_directory(
            body.directory, body.scope, registry, settings.allowed_root
        )
    except DirectoryNotAllowedError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
    except FilesystemError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ReconcileError as exc:
        logger.warning("Reconciliation of %s failed: %s", body.directory, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return ReconcileResponse(**result)


@router.get("/scopes", response_model=ScopesResponse)
async def list_scopes(registry: Registry) -> ScopesResponse:
    """Return the current scope counter and the registered environment keys."""
    return ScopesResponse(**reconcile_service.describe_scopes(registry))


@router.post("/scopes", response_model=ScopeResponse, status_code=201)
async def create_scope(registry: Registry) -> ScopeResponse:
    """Allocate a new scope id."""
    return ScopeResponse(**reconcile_service.allocate_scope(registry))
