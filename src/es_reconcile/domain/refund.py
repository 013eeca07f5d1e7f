"""Cancellation refund computation.

For a backend-funded order the deposit location holds:
    remaining principal + filler incentive  (activation fee already left for treasury)
Locked chunks are being claimed by a filler, so their principal plus the
filler incentive on it must stay put:
    locked_with_incentive = L * (1 + filler_incentive% / 100)
    refundable            = max(0, B - locked_with_incentive)

For an order that was never activated nothing can be locked, so the whole
deposit goes back. The ledger transfer fee is shown as a deduction for
information only; it does not change what the backend moves.

With nothing deposited, cancelling just removes the order.
"""
from dataclasses import dataclass
from decimal import Decimal

from src.es_account.domain.models import OrderDepositBalance
from src.es_common.usd import ZERO, percent_of, with_percent
from src.es_order.domain.models import Order
from src.es_reconcile.domain.chunks import ChunkClassification
from src.es_reconcile.domain.fees import FeeSchedule


@dataclass(frozen=True)
class RefundBreakdown:
    order_deposit_amount: Decimal
    locked_amount: Decimal
    locked_chunk_count: int
    locked_with_incentive: Decimal
    activation_fee: Decimal  # non-refundable, display only; 0 when unfunded
    refundable: Decimal
    transfer_fee: Decimal  # display-only deduction, unfunded deposits only
    net_refund_estimate: Decimal
    is_funded: bool
    refund_blocked: bool  # funded and nothing left after locked reservations

    @property
    def has_funds_deposited(self) -> bool:
        return self.order_deposit_amount > ZERO

    @property
    def is_simple_removal(self) -> bool:
        """No funds to move; cancelling only removes the order."""
        return not self.has_funds_deposited


def refundable_amount(
    balance: Decimal, locked_with_incentive: Decimal, is_funded: bool
) -> Decimal:
    if balance <= ZERO:
        return ZERO
    if is_funded:
        return max(ZERO, balance - locked_with_incentive)
    return balance


def compute_refund(
    order: Order,
    classification: ChunkClassification,
    deposit: OrderDepositBalance | None,
    fees: FeeSchedule,
) -> RefundBreakdown | None:
    """None when the deposit balance is unknown: no figure would be definite."""
    if deposit is None:
        return None
    if deposit.order_id != order.id:
        raise ValueError(
            f"Deposit balance for order {deposit.order_id} applied to order {order.id}"
        )

    funded = order.is_funded
    balance = deposit.amount
    locked_amount = classification.locked_amount
    locked_with_incentive = with_percent(locked_amount, fees.filler_incentive_percent)
    refundable = refundable_amount(balance, locked_with_incentive, funded)

    transfer_fee = fees.transfer_fee_usd if not funded and balance > ZERO else ZERO
    return RefundBreakdown(
        order_deposit_amount=balance,
        locked_amount=locked_amount,
        locked_chunk_count=len(classification.locked),
        locked_with_incentive=locked_with_incentive,
        activation_fee=(
            percent_of(order.amount_usd, fees.activation_fee_percent) if funded else ZERO
        ),
        refundable=refundable,
        transfer_fee=transfer_fee,
        net_refund_estimate=max(ZERO, refundable - transfer_fee),
        is_funded=funded,
        refund_blocked=funded and refundable <= ZERO,
    )
