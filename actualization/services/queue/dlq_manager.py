"""Dead letter stream for facts that could not be applied."""

from __future__ import annotations

import logging

from actualization.config import settings
from actualization.services.queue.redis_stream import RedisStreamService

logger = logging.getLogger(__name__)


class DLQManager:
    """Parks failed facts together with the error that rejected them."""

    def __init__(self, redis_service: RedisStreamService, dlq_stream: str | None = None):
        self.redis_service = redis_service
        self.dlq_stream = dlq_stream or settings.DLQ_STREAM_KEY

    async def send_to_dlq(
        self,
        entry_id: str,
        payload: str,
        error: Exception,
        original_stream: str | None = None,
    ) -> None:
        """Park a fact that could not be applied, with the error that rejected it."""
        try:
            await self.redis_service.add_to_stream(
                fields={
                    "payload": payload,
                    "error": str(error),
                    "error_type": type(error).__name__,
                    "entry_id": entry_id,
                    "original_stream": original_stream or self.redis_service.stream_key,
                },
                stream_key=self.dlq_stream,
            )
            logger.warning(
                "Fact sent to DLQ",
                extra={
                    "entry_id": entry_id,
                    "dlq_stream": self.dlq_stream,
                    "error": str(error),
                },
            )
        except Exception as dlq_error:
            logger.error(
                "Failed to send fact to DLQ: %s",
                dlq_error,
                extra={"entry_id": entry_id, "original_error": str(error)},
                exc_info=True,
            )


def create_dlq_manager(redis_service: RedisStreamService) -> DLQManager:
    """Factory function to create a DLQ manager."""
    return DLQManager(redis_service)
