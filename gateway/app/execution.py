"""GraphQL execution layer (strawberry) and its startup probe."""

import logging

import strawberry
from fastapi import FastAPI
from strawberry.fastapi import GraphQLRouter

from gateway.app.context import ContextFactory
from gateway.app.errors import GatewayStateError, StartupError

logger = logging.getLogger(__name__)

PROBE_QUERY = "query GatewayStartupProbe { __typename }"


class ExecutionLayer:
    """Wraps a strawberry schema and mounts it on the app once initialized.

    ``start`` must complete before ``mount``; the gateway only binds its
    socket after both.
    """

    def __init__(self, schema: strawberry.Schema, *, graphql_ide: str | None = "graphiql") -> None:
        self._schema = schema
        self._graphql_ide = graphql_ide
        self._started = False

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Initialize the layer by executing a probe query against the schema.

        Raises:
            StartupError: If the schema cannot execute the probe
        """
        result = await self._schema.execute(PROBE_QUERY)
        if result.errors:
            raise StartupError(
                f"GraphQL schema failed startup probe: {result.errors[0].message}"
            ) from result.errors[0]
        self._started = True
        logger.info("GraphQL execution layer initialized")

    def mount(self, app: FastAPI, path: str, context_factory: ContextFactory) -> None:
        """Mount the GraphQL endpoint at ``path``.

        Args:
            app: Application to mount on
            path: Endpoint path (e.g. "/graphql")
            context_factory: Builds the per-request context

        Raises:
            GatewayStateError: If called before ``start``
        """
        if not self._started:
            raise GatewayStateError("Execution layer must be started before mounting")

        router: GraphQLRouter = GraphQLRouter(
            self._schema,
            context_getter=context_factory.get_context,
            graphql_ide=self._graphql_ide,
        )
        app.include_router(router, prefix=path, tags=["graphql"])
