"""Routes responsible for ingesting upstream catalog facts."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from actualization.models.facts import CatalogFactBatch, FactEnqueueResponse
from actualization.services.queue.fact_queue import FactQueue, get_fact_queue

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/facts", tags=["facts"])

QueueDependency = Annotated[FactQueue, Depends(get_fact_queue)]


@router.post(
    "",
    summary="Enqueue catalog facts for the fact workers",
    status_code=status.HTTP_202_ACCEPTED,
)
async def enqueue_facts(
    batch: CatalogFactBatch, queue: QueueDependency
) -> FactEnqueueResponse:
    """Accept partial updates from the product, price and inventory sources.

    Facts are applied asynchronously in stream order. A fact for an item whose
    metadata has not arrived yet is kept until the metadata shows up.
    """
    try:
        queued = await queue.enqueue(batch.items)
    except Exception:
        logger.exception("Failed to enqueue catalog facts")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Fact queue unavailable",
        )
    return FactEnqueueResponse(queued=queued)
