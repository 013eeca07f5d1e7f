# src/es_reconcile/application/schemas.py
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.es_common.usd import usd_to_display
from src.es_order.domain.models import Order
from src.es_reconcile.domain.chunks import ChunkCounts
from src.es_reconcile.domain.refund import RefundBreakdown
from src.es_reconcile.domain.view_model import OrderViewModel

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class MaxPriceRequest(BaseModel):
    # Kept loose here; check_max_price() owns the finite/positive rule so the
    # API and the service reject the same inputs with the same error code.
    max_bsv_price: str | float


class QuoteRequest(BaseModel):
    amount_usd: Decimal = Field(..., description="Order size in USD, fees excluded")
    market_bsv_price: Decimal | None = Field(None, gt=0)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ChunkCountsResponse(BaseModel):
    filled: int
    locked: int
    available: int
    idle: int
    refunding: int
    refunded: int
    total: int

    @classmethod
    def from_domain(cls, counts: ChunkCounts) -> "ChunkCountsResponse":
        return cls(
            filled=counts.filled,
            locked=counts.locked,
            available=counts.available,
            idle=counts.idle,
            refunding=counts.refunding,
            refunded=counts.refunded,
            total=counts.total,
        )


class RefundBreakdownResponse(BaseModel):
    order_deposit_balance: Decimal
    locked_amount: Decimal
    locked_chunk_count: int
    locked_with_incentive: Decimal
    activation_fee: Decimal
    refundable: Decimal
    refundable_display: str
    transfer_fee: Decimal
    net_refund_estimate: Decimal
    has_funds_deposited: bool
    is_simple_removal: bool
    refund_blocked: bool

    @classmethod
    def from_domain(cls, refund: RefundBreakdown) -> "RefundBreakdownResponse":
        return cls(
            order_deposit_balance=refund.order_deposit_amount,
            locked_amount=refund.locked_amount,
            locked_chunk_count=refund.locked_chunk_count,
            locked_with_incentive=refund.locked_with_incentive,
            activation_fee=refund.activation_fee,
            refundable=refund.refundable,
            refundable_display=usd_to_display(refund.refundable),
            transfer_fee=refund.transfer_fee,
            net_refund_estimate=refund.net_refund_estimate,
            has_funds_deposited=refund.has_funds_deposited,
            is_simple_removal=refund.is_simple_removal,
            refund_blocked=refund.refund_blocked,
        )


class ActivationOutcome(BaseModel):
    attempted: bool
    success: bool | None = None
    message: str | None = None


class OrderDetailsResponse(BaseModel):
    order_id: int
    status: str
    is_funded: bool
    funded_at: datetime | None
    amount_usd: Decimal
    max_bsv_price: Decimal
    allow_partial_fill: bool
    total_filled_usd: Decimal
    total_locked_usd: Decimal
    total_idle_usd: Decimal
    refund_count: int
    # funding
    total_cost: Decimal
    total_cost_display: str
    actual_maker_fee: Decimal
    balance_known: bool
    order_deposit_balance: Decimal | None
    wallet_balance: Decimal | None
    has_shortfall: bool
    shortfall_amount: Decimal | None
    amount_needed_with_fee: Decimal | None
    fully_funded: bool
    should_auto_activate: bool
    # chunks & actions
    chunk_counts: ChunkCountsResponse
    can_cancel: bool
    cancel_enabled: bool
    can_edit_price: bool
    price_edit_warning: str | None
    show_funding_stepper: bool
    can_activate: bool
    refund_breakdown: RefundBreakdownResponse | None
    # bookkeeping
    activation: ActivationOutcome | None = None
    balance_failures: list[str] = Field(default_factory=list)
    snapshot_sequence: int

    @classmethod
    def from_view(
        cls,
        order: Order,
        view: OrderViewModel,
        snapshot_sequence: int,
        activation: ActivationOutcome | None = None,
        balance_failures: tuple[str, ...] = (),
    ) -> "OrderDetailsResponse":
        refund = view.refund_breakdown
        return cls(
            order_id=order.id,
            status=order.status.value,
            is_funded=view.is_funded,
            funded_at=order.funded_at,
            amount_usd=order.amount_usd,
            max_bsv_price=order.max_bsv_price,
            allow_partial_fill=order.allow_partial_fill,
            total_filled_usd=order.total_filled_usd,
            total_locked_usd=order.total_locked_usd,
            total_idle_usd=order.total_idle_usd,
            refund_count=order.refund_count,
            total_cost=view.total_cost,
            total_cost_display=usd_to_display(view.total_cost),
            actual_maker_fee=view.actual_maker_fee,
            balance_known=view.balance_known,
            order_deposit_balance=view.order_deposit_balance,
            wallet_balance=view.wallet_balance,
            has_shortfall=view.has_shortfall,
            shortfall_amount=view.shortfall_amount,
            amount_needed_with_fee=view.amount_needed_with_fee,
            fully_funded=view.fully_funded,
            should_auto_activate=view.should_auto_activate,
            chunk_counts=ChunkCountsResponse.from_domain(view.chunk_counts),
            can_cancel=view.actions.can_cancel,
            cancel_enabled=view.actions.cancel_enabled,
            can_edit_price=view.actions.can_edit_price,
            price_edit_warning=view.actions.price_edit_warning,
            show_funding_stepper=view.actions.show_funding_stepper,
            can_activate=view.actions.can_activate,
            refund_breakdown=RefundBreakdownResponse.from_domain(refund) if refund else None,
            activation=activation,
            balance_failures=list(balance_failures),
            snapshot_sequence=snapshot_sequence,
        )


class ActionResponse(BaseModel):
    order_id: int
    action: str
    message: str
    warning: str | None = None
    details: OrderDetailsResponse | None = None


class CancelOrderResponse(BaseModel):
    order_id: int
    simple_removal: bool
    refund_breakdown: RefundBreakdownResponse
    details: OrderDetailsResponse | None = None


class QuoteResponse(BaseModel):
    amount_usd: Decimal
    chunk_count: int
    maker_fee: Decimal
    total_cost: Decimal
    total_cost_display: str
    required_wallet_funds: Decimal
    suggested_max_bsv_price: Decimal | None
