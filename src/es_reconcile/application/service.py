"""OrderDetailsService: sequences actor + ledger calls around the engine.

State kept per order is limited to the latest snapshot and the latest balance
observation; both are replaced whole, never merged. Every view is derived
afresh from them, so a slow call completing late cannot leave a patched,
half-stale view behind.

Call failures are handled uniformly: a raised exception and an Err answer are
both logged, surfaced to the caller and leave local state untouched. Nothing
is retried automatically.
"""
import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable

from src.es_account.application.service import BalanceService
from src.es_account.domain.models import BalanceObservation
from src.es_common.datetime_utils import utc_now
from src.es_common.enums import BALANCE_WATCHED_ORDER_STATUSES
from src.es_common.errors import (
    ActivationInFlightError,
    AppError,
    BalanceUnavailableError,
    MutationRejectedError,
    OrderNotCancellableError,
    OrderNotFoundError,
    PriceNotEditableError,
    RefundBlockedError,
    TransientFetchFailureError,
)
from src.es_common.usd import percent_of, usd_to_display
from src.es_order.domain.models import MutationResult, Order, OrderSnapshot
from src.es_order.domain.repository import OrderRepositoryProtocol
from src.es_reconcile.application.schemas import (
    ActionResponse,
    ActivationOutcome,
    CancelOrderResponse,
    OrderDetailsResponse,
    QuoteRequest,
    QuoteResponse,
    RefundBreakdownResponse,
)
from src.es_reconcile.domain.chunks import verify_chunk_partition
from src.es_reconcile.domain.fees import FeeSchedule
from src.es_reconcile.domain.view_model import OrderViewModel, derive_view_model
from src.es_reconcile.engine.activation import ActivationGateRegistry
from src.es_risk.rules.order_amount import (
    buffered_max_price,
    check_order_amount,
    chunk_count_for,
    required_wallet_funds,
)
from src.es_risk.rules.price_ceiling import check_max_price

logger = logging.getLogger(__name__)


class OrderDetailsService:
    def __init__(
        self,
        repo: OrderRepositoryProtocol,
        balances: BalanceService,
        fees: FeeSchedule,
        gates: ActivationGateRegistry | None = None,
    ) -> None:
        self._repo = repo
        self._balances = balances
        self._fees = fees
        self._gates = gates or ActivationGateRegistry()
        self._snapshots: dict[int, OrderSnapshot] = {}
        self._observations: dict[int, BalanceObservation] = {}
        self._fetch_sequence = itertools.count(1)

    # ------------------------------------------------------------------
    # Snapshot handling
    # ------------------------------------------------------------------

    def latest_snapshot(self, order_id: int) -> OrderSnapshot | None:
        return self._snapshots.get(order_id)

    async def load_snapshot(self, order_id: int) -> OrderSnapshot:
        """Fetch order + chunks together and store them unless a newer fetch won."""
        sequence = next(self._fetch_sequence)
        try:
            order, chunks = await asyncio.gather(
                self._repo.get_order(order_id), self._repo.get_chunks(order_id)
            )
        except AppError:
            raise
        except Exception as exc:
            logger.warning("Fetching order=%d failed: %s", order_id, exc)
            raise TransientFetchFailureError("Fetching order") from exc
        if order is None:
            raise OrderNotFoundError(order_id)
        verify_chunk_partition(order, chunks)
        snapshot = OrderSnapshot(
            order=order, chunks=tuple(chunks), sequence=sequence, fetched_at=utc_now()
        )
        return self._store_snapshot(snapshot)

    def _store_snapshot(self, snapshot: OrderSnapshot) -> OrderSnapshot:
        order_id = snapshot.order.id
        current = self._snapshots.get(order_id)
        if current is not None and current.sequence > snapshot.sequence:
            logger.info(
                "Discarding stale snapshot #%d for order=%d (have #%d)",
                snapshot.sequence, order_id, current.sequence,
            )
            return current
        self._snapshots[order_id] = snapshot
        return snapshot

    async def _observe(self, order: Order) -> BalanceObservation:
        observation = await self._balances.observe(order)
        current = self._observations.get(order.id)
        if current is None or current.sequence < observation.sequence:
            self._observations[order.id] = observation
        return self._observations[order.id]

    def _derive(self, order_id: int) -> tuple[OrderSnapshot, OrderViewModel]:
        snapshot = self._snapshots[order_id]
        observation = self._observations.get(order_id)
        view = derive_view_model(
            snapshot.order,
            snapshot.chunks,
            observation.order_deposit if observation else None,
            observation.wallet if observation else None,
            self._fees,
        )
        return snapshot, view

    def _details(
        self, order_id: int, activation: ActivationOutcome | None = None
    ) -> OrderDetailsResponse:
        snapshot, view = self._derive(order_id)
        observation = self._observations.get(order_id)
        return OrderDetailsResponse.from_view(
            snapshot.order,
            view,
            snapshot.sequence,
            activation=activation,
            balance_failures=observation.failures if observation else (),
        )

    @staticmethod
    def _wants_balance(order: Order) -> bool:
        return order.is_funded or order.status in BALANCE_WATCHED_ORDER_STATUSES

    # ------------------------------------------------------------------
    # Refresh + auto-activation
    # ------------------------------------------------------------------

    async def refresh(self, order_id: int) -> OrderDetailsResponse:
        """Fetch, observe balances, auto-activate when due, return the derived view."""
        snapshot = await self.load_snapshot(order_id)
        activation: ActivationOutcome | None = None
        if self._wants_balance(snapshot.order):
            gate = self._gates.get(order_id)
            async with gate.balance_check.hold() as held:
                if held:
                    observation = await self._observe(snapshot.order)
                    activation = await self.auto_activate_if_due(order_id, observation)
                else:
                    logger.info("Balance check already running for order=%d", order_id)
        else:
            # a reading taken against an earlier snapshot is not shown as current
            self._observations.pop(order_id, None)
        return self._details(order_id, activation)

    async def auto_activate_if_due(
        self, order_id: int, observation: BalanceObservation
    ) -> ActivationOutcome | None:
        """Issue at most one confirm-funding call for this observation.

        Returns None when activation is not due, otherwise what happened.
        """
        snapshot = self._snapshots[order_id]
        view = derive_view_model(
            snapshot.order, snapshot.chunks, observation.order_deposit, observation.wallet,
            self._fees,
        )
        if not view.should_auto_activate:
            return None

        gate = self._gates.get(order_id)
        if observation.sequence <= gate.last_attempted_observation:
            return None
        async with gate.attempt(observation) as held:
            if not held:
                return ActivationOutcome(attempted=False, message="Activation already in progress")
            logger.info(
                "Order deposit %s covers total cost %s, auto-activating order=%d",
                observation.order_deposit_amount, view.total_cost, order_id,
            )
            try:
                result = await self._repo.confirm_funding(order_id)
            except Exception:
                logger.exception("Auto-activation call failed for order=%d", order_id)
                return ActivationOutcome(
                    attempted=True, success=False, message="Activation failed, refresh to retry"
                )
            if not result.ok:
                logger.warning("Auto-activation rejected for order=%d: %s", order_id, result.error)
                return ActivationOutcome(attempted=True, success=False, message=result.error)

            # still holding the slot so nobody activates off the pre-funding snapshot
            try:
                await self.load_snapshot(order_id)
            except AppError as exc:
                logger.warning(
                    "Re-fetch after activation failed for order=%d: %s", order_id, exc.message
                )
        return ActivationOutcome(attempted=True, success=True, message="Deposit confirmed")

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    async def _mutate(
        self,
        operation: str,
        order_id: int,
        call: Callable[[], Awaitable[MutationResult]],
    ) -> None:
        try:
            result = await call()
        except AppError:
            raise
        except Exception as exc:
            logger.exception("%s failed for order=%d", operation, order_id)
            raise TransientFetchFailureError(operation) from exc
        if not result.ok:
            logger.warning("%s rejected for order=%d: %s", operation, order_id, result.error)
            raise MutationRejectedError(operation, result.error or f"{operation} rejected")

    async def _refresh_after_mutation(self, order_id: int) -> OrderDetailsResponse | None:
        try:
            return await self.refresh(order_id)
        except AppError as exc:
            logger.warning("Re-fetch after mutation failed for order=%d: %s", order_id, exc.message)
            return None

    async def confirm_funding(self, order_id: int) -> ActionResponse:
        """Manual "activate now"; shares the in-flight slot with auto-activation."""
        gate = self._gates.get(order_id)
        async with gate.manual() as held:
            if not held:
                raise ActivationInFlightError(order_id)
            await self._mutate(
                "Activation", order_id, lambda: self._repo.confirm_funding(order_id)
            )
        details = await self._refresh_after_mutation(order_id)
        return ActionResponse(
            order_id=order_id, action="activate", message="Order activated", details=details
        )

    async def cancel(self, order_id: int) -> CancelOrderResponse:
        """Cancel, gated on freshly fetched order state and deposit balance."""
        snapshot = await self.load_snapshot(order_id)
        observation = await self._observe(snapshot.order)
        if observation.order_deposit is None:
            raise BalanceUnavailableError(order_id)
        _, view = self._derive(order_id)
        if not view.can_cancel:
            raise OrderNotCancellableError(order_id, snapshot.order.status.value)
        refund = view.refund_breakdown
        if refund is None:
            raise BalanceUnavailableError(order_id)
        if refund.refund_blocked:
            raise RefundBlockedError(order_id)

        logger.info(
            "Cancelling order=%d refundable=%s locked_reserved=%s",
            order_id, refund.refundable, refund.locked_with_incentive,
        )
        await self._mutate("Cancellation", order_id, lambda: self._repo.cancel_order(order_id))
        self._gates.discard(order_id)
        details = await self._refresh_after_mutation(order_id)
        return CancelOrderResponse(
            order_id=order_id,
            simple_removal=refund.is_simple_removal,
            refund_breakdown=RefundBreakdownResponse.from_domain(refund),
            details=details,
        )

    async def update_max_price(self, order_id: int, raw_value: object) -> ActionResponse:
        price = check_max_price(raw_value)
        snapshot = await self.load_snapshot(order_id)
        _, view = self._derive(order_id)
        if not snapshot.order.is_funded:
            raise PriceNotEditableError(order_id, "order is not funded yet")
        if not view.can_edit_price:
            raise PriceNotEditableError(order_id)
        warning = view.actions.price_edit_warning

        await self._mutate(
            "Price update", order_id, lambda: self._repo.update_max_price(order_id, price)
        )
        details = await self._refresh_after_mutation(order_id)
        return ActionResponse(
            order_id=order_id,
            action="update_max_price",
            message=f"Max BSV price updated to {price}",
            warning=warning,
            details=details,
        )


def quote_order(req: QuoteRequest, fees: FeeSchedule) -> QuoteResponse:
    """Pre-flight for a new order: validate the size and price what the maker must hold."""
    check_order_amount(req.amount_usd)
    maker_fee = percent_of(req.amount_usd, fees.maker_fee_percent)
    cost = req.amount_usd + maker_fee
    return QuoteResponse(
        amount_usd=req.amount_usd,
        chunk_count=chunk_count_for(req.amount_usd),
        maker_fee=maker_fee,
        total_cost=cost,
        total_cost_display=usd_to_display(cost),
        required_wallet_funds=required_wallet_funds(req.amount_usd, fees),
        suggested_max_bsv_price=(
            buffered_max_price(req.market_bsv_price) if req.market_bsv_price else None
        ),
    )
