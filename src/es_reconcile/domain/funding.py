"""Funding and shortfall computation.

Everything here reads the ORDER DEPOSIT balance. An unobserved balance
(None) is not zero: it suppresses every shortfall/sufficiency figure.
"""
from dataclasses import dataclass
from decimal import Decimal

from src.es_account.domain.models import OrderDepositBalance
from src.es_common.usd import ZERO, percent_of
from src.es_order.domain.models import Order
from src.es_reconcile.domain.fees import FeeSchedule


@dataclass(frozen=True)
class FundingStatus:
    total_cost: Decimal  # amount + estimated maker fee
    actual_maker_fee: Decimal
    balance_known: bool
    order_deposit_amount: Decimal | None
    has_shortfall: bool
    shortfall_amount: Decimal | None  # None when balance unknown
    amount_needed_with_fee: Decimal | None  # shortfall + one transfer fee
    fully_funded: bool  # deposit covers total_cost; False when unknown


def total_cost(order: Order, fees: FeeSchedule) -> Decimal:
    return order.amount_usd + percent_of(order.amount_usd, fees.maker_fee_percent)


def actual_maker_fee(order: Order, fees: FeeSchedule) -> Decimal:
    """Recorded activation fee + filler incentive, else the flat estimate.

    The recorded pair is used only when both parts are present and non-zero.
    """
    activation = order.activation_fee_usd
    incentive = order.filler_incentive_reserved
    if activation and incentive:
        return activation + incentive
    return percent_of(order.amount_usd, fees.maker_fee_percent)


def has_shortfall(deposit: OrderDepositBalance | None, cost: Decimal) -> bool:
    if deposit is None:
        return False
    return ZERO < deposit.amount < cost


def should_auto_activate(
    order: Order, deposit: OrderDepositBalance | None, cost: Decimal
) -> bool:
    """Balance covers the cost but the backend has not confirmed funding yet."""
    if deposit is None or order.is_funded:
        return False
    return deposit.amount >= cost


def compute_funding(
    order: Order, deposit: OrderDepositBalance | None, fees: FeeSchedule
) -> FundingStatus:
    if deposit is not None and deposit.order_id != order.id:
        raise ValueError(
            f"Deposit balance for order {deposit.order_id} applied to order {order.id}"
        )
    cost = total_cost(order, fees)
    shortfall: Decimal | None = None
    needed: Decimal | None = None
    if deposit is not None:
        shortfall = max(ZERO, cost - deposit.amount)
        needed = shortfall + fees.transfer_fee_usd if shortfall > ZERO else ZERO
    return FundingStatus(
        total_cost=cost,
        actual_maker_fee=actual_maker_fee(order, fees),
        balance_known=deposit is not None,
        order_deposit_amount=deposit.amount if deposit is not None else None,
        has_shortfall=has_shortfall(deposit, cost),
        shortfall_amount=shortfall,
        amount_needed_with_fee=needed,
        fully_funded=deposit is not None and deposit.amount >= cost,
    )
