from fastapi import APIRouter
from pydantic import BaseModel

from reconcile_api.dependencies import Registry
from reconcile_api.services import health as health_service


router = APIRouter(prefix="/health", tags=["health"])


class HealthResponse(BaseModel):
    status: str
    current_scope: int
    environments: int


@router.get("", response_model=HealthResponse)
async def health_check(registry: Registry) -> HealthResponse:
    """Return API liveness and scope registry counters."""
    result = await health_service.health_check(registry)
    return HealthResponse(**result)
