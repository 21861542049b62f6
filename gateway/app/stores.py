"""Process-scoped backing-store connections.

The gateway opens one Redis client and one MongoDB client at bootstrap and
hands the same two handles to every request. Neither client connects on
construction; the first command does.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import redis.asyncio as redis
from pymongo import AsyncMongoClient

from gateway.app.config import Settings
from gateway.app.errors import StartupError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SharedConnections:
    """The key-value and document store handles shared by all requests.

    Requests only borrow these references. The gateway closes them once,
    after the listener has drained.
    """

    store_client: Any
    data_source: Any

    @classmethod
    def open(cls, settings: Settings) -> "SharedConnections":
        """Create both store clients without waiting for connectivity.

        Args:
            settings: Application settings with the connection strings

        Returns:
            SharedConnections holding the new clients
        """
        store_client = redis.from_url(settings.redis_url, decode_responses=True)
        data_source: AsyncMongoClient[dict[str, Any]] = AsyncMongoClient(
            settings.mongo_url, connect=False
        )
        logger.info("Opened shared store connections")
        return cls(store_client=store_client, data_source=data_source)

    async def check_store_client(self, timeout: float) -> tuple[bool, str]:
        """Check key-value store connectivity.

        Returns:
            (is_ok, status_message)
        """
        try:
            await asyncio.wait_for(self.store_client.ping(), timeout)
            return (True, "ok")
        except Exception as e:
            return (False, f"error: {type(e).__name__}")

    async def check_data_source(self, timeout: float) -> tuple[bool, str]:
        """Check document store connectivity.

        Returns:
            (is_ok, status_message)
        """
        try:
            await asyncio.wait_for(self.data_source.admin.command("ping"), timeout)
            return (True, "ok")
        except Exception as e:
            return (False, f"error: {type(e).__name__}")

    async def verify(self, timeout: float) -> None:
        """Confirm both stores answer a ping.

        Raises:
            StartupError: If either store is unreachable
        """
        (store_ok, store_status), (ds_ok, ds_status) = await asyncio.gather(
            self.check_store_client(timeout), self.check_data_source(timeout)
        )
        if not (store_ok and ds_ok):
            raise StartupError(
                f"Backing stores unreachable (redis: {store_status}, mongo: {ds_status})"
            )

    async def close(self) -> None:
        """Close both clients."""
        await self.store_client.aclose()
        await self.data_source.close()
        logger.info("Closed shared store connections")
