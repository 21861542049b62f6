"""REST route registration."""

from fastapi import FastAPI

from gateway.app.api.routes.health import router as health_router
from gateway.app.api.routes.metrics import router as metrics_router
from gateway.app.api.routes.root import router as root_router


def setup_routes(app: FastAPI) -> None:
    """Register the auxiliary REST routes on ``app``."""
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(root_router, tags=["root"])
