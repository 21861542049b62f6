"""FastAPI application assembly.

Installation order matters: the origin gate goes in first, then the
initialized GraphQL layer, then the REST routes, so no route is reachable
without passing the gate.
"""

from fastapi import FastAPI

from gateway.app.api.router import setup_routes
from gateway.app.config import Settings
from gateway.app.context import ContextFactory
from gateway.app.execution import ExecutionLayer
from gateway.app.middleware.cors import CorsPolicy, install_cors
from gateway.app.stores import SharedConnections

APP_TITLE = "GraphQL Gateway"
APP_VERSION = "0.1.0"


async def assemble_app(
    settings: Settings,
    connections: SharedConnections,
    execution_layer: ExecutionLayer,
) -> FastAPI:
    """Build the application around already-opened shared connections.

    Args:
        settings: Application settings
        connections: Shared store handles
        execution_layer: GraphQL layer; started here if it is not yet

    Returns:
        Configured FastAPI app, not yet listening
    """
    app = FastAPI(title=APP_TITLE, version=APP_VERSION)
    app.state.settings = settings
    app.state.connections = connections

    install_cors(app, CorsPolicy(settings.cors_origins))

    if not execution_layer.started:
        await execution_layer.start()
    execution_layer.mount(app, settings.graphql_path, ContextFactory(connections))

    setup_routes(app)
    return app
