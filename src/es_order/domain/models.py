"""Order domain models: pure dataclasses, decoded from actor payloads.

The client never mutates an Order or Chunk: every fetch produces a new
snapshot that wholly replaces the previous one.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.es_common.enums import (
    CANCELLABLE_ORDER_STATUSES,
    ChunkStatus,
    OrderStatus,
)


@dataclass(frozen=True)
class Order:
    id: int
    amount_usd: Decimal  # nominal size, fees excluded
    max_bsv_price: Decimal  # ceiling price per BSV
    status: OrderStatus
    deposit_principal: str
    deposit_sub_id: str
    allow_partial_fill: bool = False
    funded_at: datetime | None = None  # set by backend on confirmed deposit
    activation_fee_usd: Decimal | None = None
    filler_incentive_reserved: Decimal | None = None
    total_deposited_usd: Decimal | None = None  # backend view, stale until confirm
    total_filled_usd: Decimal = Decimal("0")
    total_locked_usd: Decimal = Decimal("0")
    total_idle_usd: Decimal = Decimal("0")
    total_refunded_usd: Decimal | None = None
    refund_count: int = 0
    created_at: datetime | None = None

    @property
    def is_funded(self) -> bool:
        return self.funded_at is not None

    @property
    def is_cancellable_status(self) -> bool:
        return self.status in CANCELLABLE_ORDER_STATUSES


@dataclass(frozen=True)
class Chunk:
    id: int
    order_id: int
    amount_usd: Decimal
    status: ChunkStatus
    locked_by: int | None = None  # trade id while Locked
    filled_at: datetime | None = None


@dataclass(frozen=True)
class MutationResult:
    """Ok / Err(message) answer of a mutating actor call."""

    ok: bool
    error: str | None = None


@dataclass(frozen=True)
class OrderSnapshot:
    """One consistent fetch of an order and its chunks."""

    order: Order
    chunks: tuple[Chunk, ...]
    sequence: int  # monotonically increasing per fetch
    fetched_at: datetime | None = None
