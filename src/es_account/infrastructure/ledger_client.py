"""Balance resolver backed by the ckUSDC ledger HTTP bridge.

``POST {LEDGER_URL}/icrc1_balance_of`` with body
``{"args": [{"owner": "<principal>", "subaccount": ["<hex>"] | []}]}``
answers the balance in e6s as a JSON integer.
"""

import logging
from decimal import Decimal

import httpx

from src.es_common.usd import e6s_to_usd

logger = logging.getLogger(__name__)


class LedgerBalanceResolver:
    def __init__(
        self, client: httpx.AsyncClient, base_url: str, caller_principal: str
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._caller = caller_principal

    async def get_balance(
        self, owner: str | None = None, sub_id: str | None = None
    ) -> Decimal:
        account = {
            "owner": owner or self._caller,
            "subaccount": [sub_id] if sub_id else [],
        }
        resp = await self._client.post(
            f"{self._base_url}/icrc1_balance_of", json={"args": [account]}
        )
        resp.raise_for_status()
        balance = e6s_to_usd(int(resp.json()))
        logger.debug(
            "Balance owner=%s sub=%s -> %s", account["owner"], sub_id or "-", balance
        )
        return balance
