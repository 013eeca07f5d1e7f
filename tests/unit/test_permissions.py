from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from src.es_account.domain.models import OrderDepositBalance
from src.es_common.enums import ChunkStatus, OrderStatus
from src.es_order.domain.models import Chunk, Order
from src.es_reconcile.domain.chunks import classify_chunks
from src.es_reconcile.domain.fees import FeeSchedule
from src.es_reconcile.domain.permissions import (
    can_cancel,
    can_edit_price,
    derive_permissions,
    price_edit_warning,
)
from src.es_reconcile.domain.refund import compute_refund

FEES = FeeSchedule(Decimal("2.5"), Decimal("4.5"), Decimal("0.01"))


def _make_order(**kwargs: Any) -> Order:
    defaults: dict[str, Any] = dict(
        id=1,
        amount_usd=Decimal("90"),
        max_bsv_price=Decimal("55"),
        status=OrderStatus.ACTIVE,
        deposit_principal="canister",
        deposit_sub_id="00ab",
        funded_at=datetime.now(UTC),
    )
    defaults.update(kwargs)
    return Order(**defaults)


def _chunks(*statuses: ChunkStatus) -> list[Chunk]:
    return [
        Chunk(id=i, order_id=1, amount_usd=Decimal("10"), status=s)
        for i, s in enumerate(statuses, start=1)
    ]


class TestCanCancel:
    def test_active_with_available_chunk(self) -> None:
        c = classify_chunks(_chunks(ChunkStatus.AVAILABLE))
        assert can_cancel(_make_order(), c) is True

    def test_only_locked_and_filled(self) -> None:
        c = classify_chunks(_chunks(ChunkStatus.LOCKED, ChunkStatus.FILLED))
        assert can_cancel(_make_order(), c) is False

    def test_terminal_status(self) -> None:
        c = classify_chunks(_chunks(ChunkStatus.AVAILABLE))
        for status in (OrderStatus.FILLED, OrderStatus.CANCELLED, OrderStatus.REFUNDED):
            assert can_cancel(_make_order(status=status), c) is False

    def test_idle_chunk_is_enough(self) -> None:
        c = classify_chunks(_chunks(ChunkStatus.IDLE))
        assert can_cancel(_make_order(status=OrderStatus.IDLE), c) is True


class TestCanEditPrice:
    def test_funded_with_available(self) -> None:
        c = classify_chunks(_chunks(ChunkStatus.AVAILABLE, ChunkStatus.LOCKED))
        assert can_edit_price(_make_order(), c) is True

    def test_unfunded(self) -> None:
        c = classify_chunks(_chunks(ChunkStatus.AVAILABLE))
        order = _make_order(status=OrderStatus.AWAITING_DEPOSIT, funded_at=None)
        assert can_edit_price(order, c) is False

    def test_nothing_editable(self) -> None:
        c = classify_chunks(_chunks(ChunkStatus.LOCKED))
        assert can_edit_price(_make_order(), c) is False


class TestPriceEditWarning:
    def test_no_locked_chunks(self) -> None:
        assert price_edit_warning(classify_chunks(_chunks(ChunkStatus.AVAILABLE))) is None

    def test_one_locked(self) -> None:
        warning = price_edit_warning(
            classify_chunks(_chunks(ChunkStatus.AVAILABLE, ChunkStatus.LOCKED))
        )
        assert warning is not None
        assert warning.startswith("1 locked chunk keeps its")

    def test_several_locked(self) -> None:
        warning = price_edit_warning(
            classify_chunks(_chunks(ChunkStatus.LOCKED, ChunkStatus.LOCKED, ChunkStatus.IDLE))
        )
        assert warning is not None
        assert warning.startswith("2 locked chunks keep their")


class TestDerivePermissions:
    def test_blocked_refund_disables_cancel(self) -> None:
        order = _make_order()
        c = classify_chunks(
            [
                Chunk(id=1, order_id=1, amount_usd=Decimal("20"), status=ChunkStatus.LOCKED),
                Chunk(id=2, order_id=1, amount_usd=Decimal("10"), status=ChunkStatus.AVAILABLE),
            ]
        )
        refund = compute_refund(
            order, c, OrderDepositBalance(order_id=1, amount=Decimal("20.9")), FEES
        )
        actions = derive_permissions(order, c, refund, fully_funded=False)
        assert actions.can_cancel is True
        assert actions.cancel_enabled is False

    def test_unknown_refund_does_not_disable(self) -> None:
        c = classify_chunks(_chunks(ChunkStatus.AVAILABLE))
        actions = derive_permissions(_make_order(), c, None, fully_funded=False)
        assert actions.cancel_enabled is True

    def test_awaiting_deposit_shows_stepper(self) -> None:
        order = _make_order(status=OrderStatus.AWAITING_DEPOSIT, funded_at=None)
        c = classify_chunks(_chunks(ChunkStatus.AVAILABLE))
        actions = derive_permissions(order, c, None, fully_funded=False)
        assert actions.show_funding_stepper is True
        assert actions.can_activate is False

    def test_fully_funded_awaiting_can_activate(self) -> None:
        order = _make_order(status=OrderStatus.AWAITING_DEPOSIT, funded_at=None)
        c = classify_chunks(_chunks(ChunkStatus.AVAILABLE))
        actions = derive_permissions(order, c, None, fully_funded=True)
        assert actions.can_activate is True

    def test_funded_order_hides_stepper(self) -> None:
        c = classify_chunks(_chunks(ChunkStatus.AVAILABLE))
        actions = derive_permissions(_make_order(), c, None, fully_funded=True)
        assert actions.show_funding_stepper is False
        assert actions.can_activate is False
