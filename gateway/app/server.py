"""Gateway lifecycle: startup ordering, listening and drain.

States move strictly forward:

    UNSTARTED -> STARTING -> LISTENING -> DRAINING -> STOPPED

STARTING covers app assembly and execution-layer initialization; the socket
is bound only after both. DRAINING closes the listener and waits, without a
deadline, for in-flight responses before the store connections are closed.
A failed startup goes straight from STARTING to STOPPED.
"""

import asyncio
import logging
import socket
from enum import Enum
from types import FrameType

import uvicorn
from fastapi import FastAPI

from gateway.app.config import Settings
from gateway.app.errors import GatewayStateError, StartupError
from gateway.app.execution import ExecutionLayer
from gateway.app.main import assemble_app
from gateway.app.stores import SharedConnections
from gateway.app.utils.metrics import gateway_state

logger = logging.getLogger(__name__)

STARTED_POLL_INTERVAL_S = 0.01


class GatewayState(str, Enum):
    """Lifecycle states of the gateway process."""

    UNSTARTED = "unstarted"
    STARTING = "starting"
    LISTENING = "listening"
    DRAINING = "draining"
    STOPPED = "stopped"


_TRANSITIONS: dict[GatewayState, frozenset[GatewayState]] = {
    GatewayState.UNSTARTED: frozenset({GatewayState.STARTING}),
    GatewayState.STARTING: frozenset({GatewayState.LISTENING, GatewayState.STOPPED}),
    GatewayState.LISTENING: frozenset({GatewayState.DRAINING}),
    GatewayState.DRAINING: frozenset({GatewayState.STOPPED}),
    GatewayState.STOPPED: frozenset(),
}


class _DrainingServer(uvicorn.Server):
    """uvicorn server that reports captured shutdown signals to the gateway."""

    def __init__(self, config: uvicorn.Config, gateway: "Gateway") -> None:
        super().__init__(config)
        self._gateway = gateway

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        self._gateway._begin_drain()
        super().handle_exit(sig, frame)


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind the listening socket.

    Args:
        host: Interface address
        port: TCP port (0 for an ephemeral port)

    Returns:
        Bound, non-listening socket

    Raises:
        StartupError: If the address cannot be bound
    """
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        raise StartupError(f"Cannot bind {host}:{port}: {e.strerror or e}") from e
    return sock


class Gateway:
    """Owns the listener, the shared connections and their shutdown order.

    Args:
        settings: Application settings
        execution_layer: GraphQL execution layer to initialize and mount
        connections: Shared store handles; opened from settings when omitted
    """

    def __init__(
        self,
        settings: Settings,
        execution_layer: ExecutionLayer,
        connections: SharedConnections | None = None,
    ) -> None:
        self._settings = settings
        self._execution_layer = execution_layer
        self._connections = connections
        self._state = GatewayState.UNSTARTED
        self._app: FastAPI | None = None
        self._server: _DrainingServer | None = None
        self._serve_task: asyncio.Task[None] | None = None
        self._address: tuple[str, int] | None = None
        self._stop_requested = False
        self._connections_closed = False
        gateway_state.set(0)

    @property
    def state(self) -> GatewayState:
        return self._state

    @property
    def address(self) -> tuple[str, int] | None:
        """Bound (host, port), available from LISTENING on."""
        return self._address

    @property
    def app(self) -> FastAPI | None:
        return self._app

    @property
    def connections(self) -> SharedConnections | None:
        return self._connections

    @property
    def graphql_url(self) -> str:
        if self._address is None:
            raise GatewayStateError("Gateway is not listening")
        host, port = self._address
        if ":" in host:
            host = f"[{host}]"
        return f"http://{host}:{port}{self._settings.graphql_path}"

    def _transition(self, target: GatewayState) -> None:
        if target not in _TRANSITIONS[self._state]:
            raise GatewayStateError(f"Illegal transition {self._state.value} -> {target.value}")
        logger.info(
            "Gateway state change",
            extra={"structured": {"from": self._state.value, "to": target.value}},
        )
        self._state = target
        gateway_state.set(list(GatewayState).index(target))

    async def start(self) -> None:
        """Run STARTING and return once the socket is accepting connections.

        Raises:
            StartupError: If the execution layer, the optional store check or
                the socket bind fails. The gateway is STOPPED afterwards.
            GatewayStateError: If the gateway was already started
        """
        self._transition(GatewayState.STARTING)
        sock: socket.socket | None = None
        try:
            if self._connections is None:
                self._connections = SharedConnections.open(self._settings)
            if self._settings.require_stores_on_startup:
                await self._connections.verify(self._settings.store_ping_timeout_seconds)

            self._app = await assemble_app(
                self._settings, self._connections, self._execution_layer
            )
            sock = bind_socket(self._settings.host, self._settings.port)

            config = uvicorn.Config(self._app, lifespan="off", log_config=None)
            self._server = _DrainingServer(config, self)
            self._serve_task = asyncio.create_task(self._server.serve(sockets=[sock]))
            while not self._server.started:
                if self._serve_task.done():
                    raise StartupError("HTTP server exited during startup") from (
                        self._serve_task.exception()
                    )
                await asyncio.sleep(STARTED_POLL_INTERVAL_S)
        except StartupError as e:
            await self._abort_startup(sock, e)
            raise
        except Exception as e:
            await self._abort_startup(sock, e)
            raise StartupError(f"Gateway startup failed: {e}") from e
        except BaseException as e:
            await self._abort_startup(sock, e)
            raise

        host, port = sock.getsockname()[:2]
        self._address = (host, port)
        self._transition(GatewayState.LISTENING)
        logger.info("Server ready at %s", self.graphql_url)

        if self._stop_requested:
            self.request_stop()

    async def _abort_startup(self, sock: socket.socket | None, error: BaseException) -> None:
        logger.error("Gateway startup failed: %s", error)
        if self._serve_task is not None and not self._serve_task.done():
            self._serve_task.cancel()
            await asyncio.gather(self._serve_task, return_exceptions=True)
        if sock is not None:
            sock.close()
        self._transition(GatewayState.STOPPED)
        await self._close_connections()

    def _begin_drain(self) -> None:
        if self._state is GatewayState.LISTENING:
            self._transition(GatewayState.DRAINING)

    def request_stop(self) -> None:
        """Ask the gateway to drain without waiting for it.

        Safe to call from a signal handler. A request made during STARTING
        takes effect as soon as the gateway is listening.
        """
        if self._state is GatewayState.STARTING:
            self._stop_requested = True
            return
        if self._state is not GatewayState.LISTENING or self._server is None:
            return
        self._begin_drain()
        self._server.should_exit = True

    async def stop(self) -> None:
        """Drain in-flight requests, close the listener and the stores.

        Returns once every in-flight response has been delivered.

        Raises:
            GatewayStateError: If the gateway never reached LISTENING
        """
        if self._state is GatewayState.STOPPED:
            return
        if self._state in (GatewayState.UNSTARTED, GatewayState.STARTING):
            raise GatewayStateError(f"Cannot stop a gateway in state {self._state.value}")
        self.request_stop()
        await self.wait_stopped()

    async def wait_stopped(self) -> None:
        """Block until the server has shut down, then release the stores."""
        if self._serve_task is None:
            raise GatewayStateError("Gateway was never started")
        try:
            await self._serve_task
        finally:
            if self._state is not GatewayState.STOPPED:
                self._begin_drain()
                self._transition(GatewayState.STOPPED)
                await self._close_connections()
                logger.info("Gateway stopped")

    async def _close_connections(self) -> None:
        if self._connections is None or self._connections_closed:
            return
        self._connections_closed = True
        await self._connections.close()
