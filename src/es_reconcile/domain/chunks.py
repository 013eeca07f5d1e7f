"""Chunk aggregation and classification.

Locked and Filled chunks have a trade price agreed with a filler and are
never editable or refundable. Only Available and Idle chunks are.
"""
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from src.es_common.enums import UNLOCKED_CHUNK_STATUSES, ChunkStatus
from src.es_common.errors import PayloadDecodeError
from src.es_order.domain.models import Chunk, Order


@dataclass(frozen=True)
class ChunkCounts:
    filled: int = 0
    locked: int = 0
    available: int = 0
    idle: int = 0
    refunding: int = 0
    refunded: int = 0

    @property
    def total(self) -> int:
        return (
            self.filled + self.locked + self.available
            + self.idle + self.refunding + self.refunded
        )


@dataclass(frozen=True)
class ChunkClassification:
    counts: ChunkCounts
    editable: tuple[Chunk, ...]
    refundable: tuple[Chunk, ...]
    locked: tuple[Chunk, ...]
    locked_amount: Decimal  # principal held for counterparties, incentive excluded


def count_chunks(chunks: Sequence[Chunk]) -> ChunkCounts:
    by_status = Counter(c.status for c in chunks)
    return ChunkCounts(
        filled=by_status[ChunkStatus.FILLED],
        locked=by_status[ChunkStatus.LOCKED],
        available=by_status[ChunkStatus.AVAILABLE],
        idle=by_status[ChunkStatus.IDLE],
        refunding=by_status[ChunkStatus.REFUNDING],
        refunded=by_status[ChunkStatus.REFUNDED],
    )


def unlocked_chunks(chunks: Sequence[Chunk]) -> tuple[Chunk, ...]:
    return tuple(c for c in chunks if c.status in UNLOCKED_CHUNK_STATUSES)


def classify_chunks(chunks: Sequence[Chunk]) -> ChunkClassification:
    unlocked = unlocked_chunks(chunks)
    locked = tuple(c for c in chunks if c.status is ChunkStatus.LOCKED)
    return ChunkClassification(
        counts=count_chunks(chunks),
        editable=unlocked,
        refundable=unlocked,
        locked=locked,
        locked_amount=sum((c.amount_usd for c in locked), Decimal("0")),
    )


def verify_chunk_partition(order: Order, chunks: Sequence[Chunk]) -> None:
    """Chunks belong to the order and never add up to more than its amount."""
    for chunk in chunks:
        if chunk.order_id != order.id:
            raise PayloadDecodeError(
                f"chunk {chunk.id} belongs to order {chunk.order_id}, not {order.id}"
            )
    total = sum((c.amount_usd for c in chunks), Decimal("0"))
    if total > order.amount_usd:
        raise PayloadDecodeError(
            f"chunks of order {order.id} total {total} > order amount {order.amount_usd}"
        )
