"""Health check endpoints.

- /health is a liveness probe and never touches the stores
- /healthz pings both stores through the shared connections
"""

import asyncio
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from gateway.app.config import Settings
from gateway.app.stores import SharedConnections

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple health check for Docker/k8s.

    Returns:
        200 OK always (application is running)
    """
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness check against the backing stores.

    The listener accepts traffic before the stores are confirmed, so this is
    where an orchestrator learns whether they are actually reachable.

    Returns:
        200 with component status if both stores answer
        503 if either store fails
    """
    connections: SharedConnections = request.app.state.connections
    settings: Settings = request.app.state.settings
    timeout = settings.store_ping_timeout_seconds

    (redis_ok, redis_status), (mongo_ok, mongo_status) = await asyncio.gather(
        connections.check_store_client(timeout),
        connections.check_data_source(timeout),
    )

    core_ok = redis_ok and mongo_ok
    response_body = {
        "status": "ok" if core_ok else "degraded",
        "components": {
            "redis": redis_status,
            "mongo": mongo_status,
        },
    }

    if not core_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
