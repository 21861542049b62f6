"""Allow-list origin policy and the ASGI gate that enforces it."""

import logging
from collections.abc import Iterable
from enum import Enum

from fastapi import FastAPI
from starlette.datastructures import Headers
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from gateway.app.errors import OriginNotAllowedError
from gateway.app.utils.metrics import cors_decisions_total

logger = logging.getLogger(__name__)

# RFC 6455 close code for a policy violation
WS_POLICY_VIOLATION = 1008


class OriginDecision(str, Enum):
    """Outcome of evaluating a request origin."""

    ALLOW = "allow"
    DENY = "deny"


class CorsPolicy:
    """Immutable origin allow-list.

    Requests with a missing or empty Origin header (curl, mobile apps,
    server-to-server) are allowed. Browser origins must match an entry exactly.
    """

    def __init__(self, allow_list: Iterable[str]) -> None:
        self._allow_list = tuple(allow_list)
        self._allowed = frozenset(self._allow_list)

    @property
    def allow_list(self) -> tuple[str, ...]:
        return self._allow_list

    def evaluate(self, origin: str | None) -> OriginDecision:
        """Decide whether a request from ``origin`` may proceed.

        Args:
            origin: Origin header value; None or empty when absent

        Returns:
            OriginDecision.ALLOW or OriginDecision.DENY
        """
        if not origin:
            return OriginDecision.ALLOW
        if origin in self._allowed:
            return OriginDecision.ALLOW
        return OriginDecision.DENY

    def check(self, origin: str | None) -> None:
        """Raise OriginNotAllowedError when ``origin`` is denied."""
        if self.evaluate(origin) is OriginDecision.DENY:
            raise OriginNotAllowedError(str(origin))


class OriginGateMiddleware:
    """Rejects requests from disallowed origins before any route runs.

    HTTP requests get a 403 with a JSON ``detail``; websocket handshakes
    are closed with a policy-violation code.
    """

    def __init__(self, app: ASGIApp, policy: CorsPolicy) -> None:
        self.app = app
        self._policy = policy

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        origin = Headers(scope=scope).get("origin")
        try:
            self._policy.check(origin)
        except OriginNotAllowedError as exc:
            cors_decisions_total.labels(decision=OriginDecision.DENY.value).inc()
            logger.info(
                "Rejected cross-origin request",
                extra={"structured": {"origin": exc.origin, "path": scope.get("path")}},
            )
            if scope["type"] == "websocket":
                await send({"type": "websocket.close", "code": WS_POLICY_VIOLATION})
                return
            response = JSONResponse({"detail": str(exc)}, status_code=403)
            await response(scope, receive, send)
            return

        cors_decisions_total.labels(decision=OriginDecision.ALLOW.value).inc()
        await self.app(scope, receive, send)


def install_cors(app: FastAPI, policy: CorsPolicy) -> None:
    """Install the origin gate and CORS response headers on ``app``.

    The gate is added last so it wraps everything else, including
    Starlette's CORSMiddleware which handles preflights and headers for
    allowed origins.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(policy.allow_list),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(OriginGateMiddleware, policy=policy)
