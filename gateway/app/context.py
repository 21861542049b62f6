"""Per-request GraphQL context."""

from dataclasses import dataclass
from typing import Any

from fastapi import Request
from strawberry.fastapi import BaseContext

from gateway.app.stores import SharedConnections
from gateway.app.utils.metrics import request_contexts_total


@dataclass(eq=False)
class RequestContext(BaseContext):
    """Context handed to every resolver.

    Built fresh for each GraphQL operation and dropped with the response.
    The store handles are references to the process-wide connections, not
    copies. Resolvers depend on these field names.
    """

    store_client: Any
    data_source: Any
    raw_request: Request
    user: Any | None = None


class ContextFactory:
    """Builds a RequestContext per request from the shared connections."""

    def __init__(self, connections: SharedConnections) -> None:
        self._connections = connections

    def build(self, request: Request) -> RequestContext:
        """Create the context for one request.

        Performs no I/O. ``user`` is whatever an upstream layer stored on
        ``request.state.user``; authentication does not happen here.

        Args:
            request: Inbound transport request

        Returns:
            New RequestContext
        """
        request_contexts_total.inc()
        return RequestContext(
            store_client=self._connections.store_client,
            data_source=self._connections.data_source,
            raw_request=request,
            user=getattr(request.state, "user", None),
        )

    async def get_context(self, request: Request) -> RequestContext:
        """FastAPI dependency used as the GraphQL context getter."""
        return self.build(request)
