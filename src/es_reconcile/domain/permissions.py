"""Which maker actions are legal for the current snapshot."""
from dataclasses import dataclass

from src.es_common.enums import OrderStatus
from src.es_order.domain.models import Order
from src.es_reconcile.domain.chunks import ChunkClassification
from src.es_reconcile.domain.refund import RefundBreakdown


@dataclass(frozen=True)
class PermittedActions:
    can_cancel: bool
    can_edit_price: bool
    cancel_enabled: bool  # can_cancel and the refund is not blocked
    price_edit_warning: str | None  # set when some chunks keep their old price
    show_funding_stepper: bool
    can_activate: bool  # manual activate button


def can_cancel(order: Order, classification: ChunkClassification) -> bool:
    return bool(classification.refundable) and order.is_cancellable_status


def can_edit_price(order: Order, classification: ChunkClassification) -> bool:
    return order.is_funded and bool(classification.editable)


def price_edit_warning(classification: ChunkClassification) -> str | None:
    locked = classification.counts.locked
    if locked == 0:
        return None
    noun = "chunk keeps its" if locked == 1 else "chunks keep their"
    return f"{locked} locked {noun} agreed price; only Available/Idle chunks are updated"


def derive_permissions(
    order: Order,
    classification: ChunkClassification,
    refund: RefundBreakdown | None,
    fully_funded: bool,
) -> PermittedActions:
    cancellable = can_cancel(order, classification)
    blocked = refund is not None and refund.refund_blocked
    awaiting = order.status is OrderStatus.AWAITING_DEPOSIT and not order.is_funded
    return PermittedActions(
        can_cancel=cancellable,
        can_edit_price=can_edit_price(order, classification),
        cancel_enabled=cancellable and not blocked,
        price_edit_warning=price_edit_warning(classification),
        show_funding_stepper=awaiting,
        can_activate=awaiting and fully_funded,
    )
