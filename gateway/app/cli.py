"""Process entrypoint: ``gateway`` console script."""

import asyncio
import logging
import signal
import sys

from gateway.app.config import Settings, get_settings
from gateway.app.errors import StartupError
from gateway.app.execution import ExecutionLayer
from gateway.app.schema import schema
from gateway.app.server import Gateway
from gateway.app.utils.logging import configure_logging

logger = logging.getLogger(__name__)


async def run_gateway(settings: Settings) -> None:
    """Start the gateway and serve until SIGINT/SIGTERM has drained it."""
    gateway = Gateway(settings, ExecutionLayer(schema))

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, gateway.request_stop)

    await gateway.start()
    await gateway.wait_stopped()


def main() -> None:
    """Run the gateway; exit 1 on a startup fault."""
    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        asyncio.run(run_gateway(settings))
    except StartupError as e:
        logger.error("Gateway failed to start: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
