"""Balance types for es_account: pure dataclasses.

There are two different ckUSDC balances in play and they are distinct types
on purpose:

- OrderDepositBalance: funds already sitting at the order's dedicated deposit
  location (deposit principal + order sub-id). Activation, shortfall and
  refund decisions read this one only.
- WalletBalance: the caller's own default-subaccount funds, still under the
  caller's control. Informational only.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class OrderDepositBalance:
    order_id: int
    amount: Decimal  # USD


@dataclass(frozen=True)
class WalletBalance:
    owner: str
    amount: Decimal  # USD


@dataclass(frozen=True)
class BalanceObservation:
    """One completed balance check. Each check gets a fresh sequence number."""

    sequence: int
    order_deposit: OrderDepositBalance | None
    wallet: WalletBalance | None
    observed_at: datetime | None = None
    failures: tuple[str, ...] = ()  # names of the lookups that raised

    @property
    def order_deposit_amount(self) -> Decimal | None:
        return self.order_deposit.amount if self.order_deposit is not None else None
