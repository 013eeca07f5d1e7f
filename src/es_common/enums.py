"""Global enums: must match the backend actor's variant names exactly.

The actor encodes variants as single-key objects, e.g. ``{"Active": null}``.
Only these names are accepted; anything else is a decoding error.
"""

from enum import Enum


class OrderStatus(str, Enum):
    AWAITING_DEPOSIT = "AwaitingDeposit"
    ACTIVE = "Active"
    IDLE = "Idle"
    PARTIALLY_FILLED = "PartiallyFilled"
    FILLED = "Filled"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


class ChunkStatus(str, Enum):
    AVAILABLE = "Available"
    LOCKED = "Locked"
    FILLED = "Filled"
    IDLE = "Idle"
    REFUNDING = "Refunding"
    REFUNDED = "Refunded"


# Statuses from which the maker may still cancel
CANCELLABLE_ORDER_STATUSES: frozenset[OrderStatus] = frozenset({
    OrderStatus.AWAITING_DEPOSIT,
    OrderStatus.ACTIVE,
    OrderStatus.IDLE,
    OrderStatus.PARTIALLY_FILLED,
})

# Statuses for which the order deposit balance is worth querying
BALANCE_WATCHED_ORDER_STATUSES: frozenset[OrderStatus] = CANCELLABLE_ORDER_STATUSES

# Chunks with no trade price agreed yet: editable and refundable
UNLOCKED_CHUNK_STATUSES: frozenset[ChunkStatus] = frozenset({
    ChunkStatus.AVAILABLE,
    ChunkStatus.IDLE,
})
