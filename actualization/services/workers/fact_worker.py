"""Worker that drains the fact stream into the document store."""

from __future__ import annotations

import asyncio
import logging

from actualization.config import settings
from actualization.models.facts import CatalogFact
from actualization.services.cache.recovery_cache import RecoveryCache
from actualization.services.catalog.service import CatalogService
from actualization.services.queue.dlq_manager import DLQManager, create_dlq_manager
from actualization.services.queue.redis_stream import (
    RedisStreamService,
    StreamEntries,
    create_redis_stream_service,
)
from actualization.services.storage.document_store import CatalogDocumentStore
from actualization.services.workers.base import BaseWorker

logger = logging.getLogger(__name__)


class FactWorker(BaseWorker):
    """Applies catalog facts in stream order, one batch at a time."""

    def __init__(
        self,
        *,
        redis_service: RedisStreamService,
        catalog_service: CatalogService,
        dlq_manager: DLQManager,
        consumer_name: str | None = None,
    ) -> None:
        super().__init__(consumer_name)
        self.redis_service = redis_service
        self.catalog_service = catalog_service
        self.dlq_manager = dlq_manager
        self.batch_size = settings.BATCH_MAX_MESSAGES
        self.block_ms = settings.BATCH_MAX_WAIT_MS

    async def run_forever(self) -> None:
        await self.redis_service.ensure_consumer_group()

        logger.info(
            "Fact worker started",
            extra={
                "stream": self.redis_service.stream_key,
                "group": self.redis_service.group_name,
                "consumer": self.consumer_name,
            },
        )

        try:
            while not self.is_shutdown_requested():
                try:
                    entries = await self.redis_service.read_batch(
                        consumer_name=self.consumer_name,
                        count=self.batch_size,
                        block_ms=self.block_ms,
                    )
                except Exception as exc:
                    logger.error(
                        "Failed to read from Redis stream: %s", exc, exc_info=True
                    )
                    await asyncio.sleep(1)
                    continue

                if not entries:
                    continue

                await self.process_entries(entries)
        except asyncio.CancelledError:
            logger.info("Fact worker %s cancelled", self.consumer_name)
            raise

    async def process_entries(self, entries: StreamEntries) -> None:
        ack_ids: list[str] = []

        for _stream, messages in entries:
            for message_id, data in messages:
                payload = data.get("payload")
                if payload is None:
                    logger.warning("Missing payload for entry %s", message_id)
                    ack_ids.append(message_id)
                    continue

                try:
                    fact = CatalogFact.model_validate_json(payload)
                    await self.handle_fact(fact)
                except Exception as exc:
                    logger.exception("Failed to apply fact %s", message_id)
                    await self.dlq_manager.send_to_dlq(message_id, payload, exc)
                ack_ids.append(message_id)

        try:
            await self.redis_service.acknowledge_messages(ack_ids)
            await self.redis_service.delete_messages(ack_ids)
        except Exception as ack_exc:
            logger.error("Failed to ack/delete messages %s: %s", ack_ids, ack_exc)

    async def handle_fact(self, fact: CatalogFact) -> None:
        product = await self.catalog_service.apply_fact(fact)
        logger.info(
            "Fact applied",
            extra={
                "kind": fact.kind,
                "op": fact.op,
                "item_id": fact.item_id,
                "product_id": product.product_id if product else None,
                "trace_id": fact.trace_id,
            },
        )


def create_fact_worker() -> FactWorker:
    """Factory function to create a fact worker with all dependencies."""
    redis_service = create_redis_stream_service()
    catalog_service = CatalogService(
        CatalogDocumentStore(redis_service.client),
        RecoveryCache(redis_service.client),
    )
    return FactWorker(
        redis_service=redis_service,
        catalog_service=catalog_service,
        dlq_manager=create_dlq_manager(redis_service),
    )


async def run_worker(concurrency: int | None = None) -> None:
    """Run one or more fact workers."""
    worker_count = concurrency or max(1, settings.WORKER_CONCURRENCY)
    workers = [create_fact_worker() for _ in range(worker_count)]

    tasks = [asyncio.create_task(worker.run_forever()) for worker in workers]
    await asyncio.gather(*tasks, return_exceptions=True)


def main() -> None:
    """CLI entry point."""
    try:
        asyncio.run(run_worker())
    except KeyboardInterrupt:
        logger.info("Fact worker interrupted, shutting down")


if __name__ == "__main__":
    main()
