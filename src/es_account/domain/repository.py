"""Balance resolver Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the ledger-backed implementation.
"""

from decimal import Decimal
from typing import Protocol


class BalanceResolverProtocol(Protocol):
    async def get_balance(
        self, owner: str | None = None, sub_id: str | None = None
    ) -> Decimal:
        """USD balance of (owner, sub_id).

        owner=None means the caller; sub_id=None means the default subaccount.
        """
        ...
