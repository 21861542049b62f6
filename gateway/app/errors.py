"""Gateway error taxonomy.

Only two failure classes are decided locally: the origin policy (a caller
error) and startup faults (operator errors). Everything raised by store
clients during a request is left to resolvers.
"""


class GatewayError(Exception):
    """Base class for gateway errors."""


class OriginNotAllowedError(GatewayError):
    """Raised when a cross-origin request comes from an origin outside the allow-list."""

    MESSAGE = (
        "The CORS policy for this site does not allow access from the specified Origin."
    )

    def __init__(self, origin: str) -> None:
        super().__init__(self.MESSAGE)
        self.origin = origin


class StartupError(GatewayError):
    """Raised when the gateway cannot reach the listening state.

    Startup errors are fatal: the process must exit non-zero instead of
    retrying or serving partially.
    """


class GatewayStateError(GatewayError):
    """Raised on an illegal lifecycle transition (e.g. stopping before starting)."""
