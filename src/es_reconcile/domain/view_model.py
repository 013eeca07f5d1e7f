"""Order details view-model: the single pure entry point of the engine.

derive_view_model() takes one snapshot plus the two balances and returns
everything the UI needs. It never performs I/O and never mutates its inputs;
callers re-derive from the latest snapshot instead of patching old output.
"""
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal

from config.settings import settings
from src.es_account.domain.models import OrderDepositBalance, WalletBalance
from src.es_common.enums import OrderStatus
from src.es_order.domain.models import Chunk, Order
from src.es_reconcile.domain.chunks import ChunkCounts, classify_chunks
from src.es_reconcile.domain.fees import FeeSchedule
from src.es_reconcile.domain.funding import compute_funding, should_auto_activate
from src.es_reconcile.domain.permissions import PermittedActions, derive_permissions
from src.es_reconcile.domain.refund import RefundBreakdown, compute_refund


@dataclass(frozen=True)
class OrderViewModel:
    order_id: int
    status: OrderStatus
    is_funded: bool
    total_cost: Decimal
    actual_maker_fee: Decimal
    balance_known: bool
    order_deposit_balance: Decimal | None
    wallet_balance: Decimal | None
    has_shortfall: bool
    shortfall_amount: Decimal | None
    amount_needed_with_fee: Decimal | None
    fully_funded: bool
    chunk_counts: ChunkCounts
    refund_breakdown: RefundBreakdown | None
    actions: PermittedActions
    should_auto_activate: bool

    @property
    def can_cancel(self) -> bool:
        return self.actions.can_cancel

    @property
    def can_edit_price(self) -> bool:
        return self.actions.can_edit_price


def derive_view_model(
    order: Order,
    chunks: Sequence[Chunk],
    order_deposit: OrderDepositBalance | None,
    wallet: WalletBalance | None,
    fees: FeeSchedule | None = None,
) -> OrderViewModel:
    fees = fees or FeeSchedule.from_settings(settings)
    funding = compute_funding(order, order_deposit, fees)
    classification = classify_chunks(chunks)
    refund = compute_refund(order, classification, order_deposit, fees)
    actions = derive_permissions(order, classification, refund, funding.fully_funded)
    return OrderViewModel(
        order_id=order.id,
        status=order.status,
        is_funded=order.is_funded,
        total_cost=funding.total_cost,
        actual_maker_fee=funding.actual_maker_fee,
        balance_known=funding.balance_known,
        order_deposit_balance=funding.order_deposit_amount,
        wallet_balance=wallet.amount if wallet is not None else None,
        has_shortfall=funding.has_shortfall,
        shortfall_amount=funding.shortfall_amount,
        amount_needed_with_fee=funding.amount_needed_with_fee,
        fully_funded=funding.fully_funded,
        chunk_counts=classification.counts,
        refund_breakdown=refund,
        actions=actions,
        should_auto_activate=should_auto_activate(order, order_deposit, funding.total_cost),
    )
