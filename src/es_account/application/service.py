"""BalanceService: wraps the resolver's two call shapes in typed results.

The two lookups are independent: one failing leaves only that side unknown
(None) and is recorded in ``BalanceObservation.failures``. An unknown side is
never reported as zero.
"""

import itertools
import logging

from src.es_account.domain.models import BalanceObservation, OrderDepositBalance, WalletBalance
from src.es_account.domain.repository import BalanceResolverProtocol
from src.es_common.datetime_utils import utc_now
from src.es_common.errors import BalanceUnavailableError
from src.es_order.domain.models import Order

logger = logging.getLogger(__name__)


class BalanceService:
    def __init__(self, resolver: BalanceResolverProtocol, caller_principal: str = "") -> None:
        self._resolver = resolver
        self._caller = caller_principal
        self._sequence = itertools.count(1)

    async def order_deposit_balance(self, order: Order) -> OrderDepositBalance:
        # an empty owner or sub-id would fall through to the caller's wallet shape
        if not order.deposit_principal or not order.deposit_sub_id:
            raise BalanceUnavailableError(order.id)
        amount = await self._resolver.get_balance(order.deposit_principal, order.deposit_sub_id)
        return OrderDepositBalance(order_id=order.id, amount=amount)

    async def wallet_balance(self) -> WalletBalance:
        amount = await self._resolver.get_balance()
        return WalletBalance(owner=self._caller, amount=amount)

    async def observe(self, order: Order) -> BalanceObservation:
        failures: list[str] = []
        deposit: OrderDepositBalance | None = None
        wallet: WalletBalance | None = None
        try:
            deposit = await self.order_deposit_balance(order)
        except Exception:
            logger.exception("Order deposit balance lookup failed: order=%d", order.id)
            failures.append("order_deposit_balance")
        try:
            wallet = await self.wallet_balance()
        except Exception:
            logger.exception("Wallet balance lookup failed")
            failures.append("wallet_balance")

        observation = BalanceObservation(
            sequence=next(self._sequence),
            order_deposit=deposit,
            wallet=wallet,
            observed_at=utc_now(),
            failures=tuple(failures),
        )
        logger.info(
            "Balance observation #%d order=%d deposit=%s wallet=%s",
            observation.sequence,
            order.id,
            deposit.amount if deposit else "unknown",
            wallet.amount if wallet else "unknown",
        )
        return observation
