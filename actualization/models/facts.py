"""Models for inbound upstream facts and the ingestion API."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from actualization.config import settings

FactKind = Literal[
    "product_item",
    "price",
    "inventory",
    "stock_balance",
    "backorder_availability",
]


class CatalogFact(BaseModel):
    """A single partial update about one catalog item from one upstream source."""

    kind: FactKind
    item_id: str = Field(..., min_length=1)
    op: Literal["upsert", "delete"] = Field(
        default="upsert",
        description="Delete clears the slot of the given kind on the item",
    )
    payload: dict[str, Any] | None = Field(
        default=None,
        description="Source record; required for upserts",
    )
    trace_id: str | None = Field(
        default=None,
        description="Optional trace identifier propagated from the source system",
    )

    @model_validator(mode="after")
    def _require_payload_for_upsert(self) -> CatalogFact:
        if self.op == "upsert" and self.payload is None:
            raise ValueError("Upsert facts must carry a payload")
        return self


class CatalogFactBatch(BaseModel):
    """Request body for POST /v1/facts."""

    items: list[CatalogFact] = Field(..., min_length=1)

    @field_validator("items")
    @classmethod
    def _limit_items(cls, values: list[CatalogFact]) -> list[CatalogFact]:
        if len(values) > settings.FACTS_MAX_BATCH_SIZE:
            raise ValueError(
                f"Batch size must be <= {settings.FACTS_MAX_BATCH_SIZE} items"
            )
        return values


class FactEnqueueResponse(BaseModel):
    """Response body for fact ingestion request."""

    queued: int = Field(..., ge=0)
