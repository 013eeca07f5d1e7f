from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

import pytest

from src.es_account.domain.models import OrderDepositBalance
from src.es_common.enums import OrderStatus
from src.es_order.domain.models import Order
from src.es_reconcile.domain.fees import FeeSchedule
from src.es_reconcile.domain.funding import (
    actual_maker_fee,
    compute_funding,
    has_shortfall,
    should_auto_activate,
    total_cost,
)

FEES = FeeSchedule(
    activation_fee_percent=Decimal("2.5"),
    filler_incentive_percent=Decimal("4.5"),
    transfer_fee_usd=Decimal("0.01"),
)


def _make_order(**kwargs: Any) -> Order:
    defaults: dict[str, Any] = dict(
        id=1,
        amount_usd=Decimal("90"),
        max_bsv_price=Decimal("55"),
        status=OrderStatus.AWAITING_DEPOSIT,
        deposit_principal="canister",
        deposit_sub_id="00ab",
    )
    defaults.update(kwargs)
    return Order(**defaults)


def _deposit(amount: str, order_id: int = 1) -> OrderDepositBalance:
    return OrderDepositBalance(order_id=order_id, amount=Decimal(amount))


class TestTotalCost:
    def test_maker_fee_is_sum_of_parts(self) -> None:
        assert FEES.maker_fee_percent == Decimal("7.0")

    def test_ninety_dollar_order(self) -> None:
        assert total_cost(_make_order(), FEES) == Decimal("96.30")


class TestActualMakerFee:
    def test_recorded_pair_preferred(self) -> None:
        order = _make_order(
            activation_fee_usd=Decimal("2.25"), filler_incentive_reserved=Decimal("4.05")
        )
        assert actual_maker_fee(order, FEES) == Decimal("6.30")

    def test_recorded_pair_may_diverge_from_estimate(self) -> None:
        order = _make_order(
            activation_fee_usd=Decimal("1.35"), filler_incentive_reserved=Decimal("1.80")
        )
        assert actual_maker_fee(order, FEES) == Decimal("3.15")

    def test_estimate_when_nothing_recorded(self) -> None:
        assert actual_maker_fee(_make_order(), FEES) == Decimal("6.3")

    def test_estimate_when_only_one_part_recorded(self) -> None:
        order = _make_order(activation_fee_usd=Decimal("2.25"))
        assert actual_maker_fee(order, FEES) == Decimal("6.3")

    def test_estimate_when_a_part_is_zero(self) -> None:
        order = _make_order(
            activation_fee_usd=Decimal("0"), filler_incentive_reserved=Decimal("4.05")
        )
        assert actual_maker_fee(order, FEES) == Decimal("6.3")


class TestShortfall:
    def test_unobserved_balance_is_not_a_shortfall(self) -> None:
        assert has_shortfall(None, Decimal("96.30")) is False

    def test_zero_balance_is_not_a_shortfall(self) -> None:
        assert has_shortfall(_deposit("0"), Decimal("96.30")) is False

    def test_partial_deposit(self) -> None:
        assert has_shortfall(_deposit("50"), Decimal("96.30")) is True

    def test_exact_deposit(self) -> None:
        assert has_shortfall(_deposit("96.30"), Decimal("96.30")) is False


class TestShouldAutoActivate:
    def test_scenario_sufficient_unfunded(self) -> None:
        assert should_auto_activate(_make_order(), _deposit("96.30"), Decimal("96.30")) is True

    def test_already_funded(self) -> None:
        order = _make_order(status=OrderStatus.ACTIVE, funded_at=datetime.now(UTC))
        assert should_auto_activate(order, _deposit("200"), Decimal("96.30")) is False

    def test_insufficient(self) -> None:
        assert should_auto_activate(_make_order(), _deposit("96.29"), Decimal("96.30")) is False

    def test_unknown_balance(self) -> None:
        assert should_auto_activate(_make_order(), None, Decimal("96.30")) is False


class TestComputeFunding:
    def test_scenario_partial_deposit(self) -> None:
        status = compute_funding(_make_order(), _deposit("50"), FEES)
        assert status.total_cost == Decimal("96.30")
        assert status.has_shortfall is True
        assert status.shortfall_amount == Decimal("46.30")
        assert status.amount_needed_with_fee == Decimal("46.31")
        assert status.fully_funded is False

    def test_fully_funded(self) -> None:
        status = compute_funding(_make_order(), _deposit("100"), FEES)
        assert status.has_shortfall is False
        assert status.shortfall_amount == Decimal("0")
        assert status.amount_needed_with_fee == Decimal("0")
        assert status.fully_funded is True

    def test_unknown_balance_suppresses_figures(self) -> None:
        status = compute_funding(_make_order(), None, FEES)
        assert status.balance_known is False
        assert status.has_shortfall is False
        assert status.shortfall_amount is None
        assert status.amount_needed_with_fee is None
        assert status.fully_funded is False

    def test_nothing_deposited_needs_full_cost(self) -> None:
        status = compute_funding(_make_order(), _deposit("0"), FEES)
        assert status.has_shortfall is False
        assert status.shortfall_amount == Decimal("96.30")

    def test_balance_of_another_order_rejected(self) -> None:
        with pytest.raises(ValueError):
            compute_funding(_make_order(id=1), _deposit("50", order_id=2), FEES)
