"""Temporal client configuration and connection management.

Services and the worker share a single lazily created connection.
"""

from typing import Optional

from temporalio.client import Client as TemporalClient

from app.core.config import settings
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class TemporalClientManager:
    """Manages Temporal client connection.

    Lazily creates a Temporal client and keeps it around for reuse.
    """

    _client: Optional[TemporalClient] = None

    async def get_client(self) -> TemporalClient:
        """Get or create Temporal client instance.

        Returns:
            TemporalClient: Connected Temporal client
        """
        if self._client is None:
            target = f"{settings.temporal_host}:{settings.temporal_port}"
            LOGGER.info(
                "Connecting to Temporal server",
                extra={"target": target, "namespace": settings.temporal_namespace},
            )
            self._client = await TemporalClient.connect(
                target,
                namespace=settings.temporal_namespace,
            )
        return self._client


# Global Temporal client manager instance
_temporal_manager = TemporalClientManager()


async def get_temporal_client() -> TemporalClient:
    """Get Temporal client instance.

    Returns:
        TemporalClient: Connected Temporal client
    """
    return await _temporal_manager.get_client()

