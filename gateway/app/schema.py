"""Default GraphQL schema.

Small on purpose: it shows resolvers reaching the stores through the
request context. Deployments pass their own schema to the execution layer.
"""

import strawberry
from strawberry.types import Info

from gateway.app.context import RequestContext


@strawberry.type
class Query:
    @strawberry.field
    def ping(self) -> str:
        return "pong"

    @strawberry.field
    def viewer(self, info: Info[RequestContext, None]) -> str | None:
        """Identity attached upstream, if any."""
        user = info.context.user
        return None if user is None else str(user)

    @strawberry.field
    async def cached_value(self, info: Info[RequestContext, None], key: str) -> str | None:
        """Read a value from the key-value store."""
        return await info.context.store_client.get(key)

    @strawberry.field
    async def databases(self, info: Info[RequestContext, None]) -> list[str]:
        """List database names on the document store."""
        return await info.context.data_source.list_database_names()


schema = strawberry.Schema(query=Query)
