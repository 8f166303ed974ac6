import logging

import uvicorn
from fastapi import FastAPI

from reconcile_api.config import settings
from reconcile_api.routers import health, reconcile


logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Tree Reconciler API",
    description="Mirror directories into node trees over HTTP.",
    version="0.1.0",
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(health.router)
app.include_router(reconcile.router, prefix="/api/v1")


@app.get("/", tags=["root"])
def root() -> dict[str, str]:
    return {"message": "Tree Reconciler API", "docs": "/docs"}


# ── Entrypoint ────────────────────────────────────────────────────────────────
def start() -> None:
    """CLI entrypoint used by the `reconcile-api` script."""
    uvicorn.run(
        "reconcile_api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    start()
