"""OrderRepository backed by the actor HTTP bridge.

Each actor method is exposed as ``POST {ACTOR_URL}/{method}`` with body
``{"args": [...]}``; the response body is the method's return value in the
actor's JSON encoding (see ``src.es_order.domain.decoder``).

Transport failures propagate as httpx exceptions; the orchestrator maps them
to TransientFetchFailureError.
"""
import logging
from decimal import Decimal
from typing import Any

import httpx

from src.es_order.domain.decoder import decode_chunk, decode_opt, decode_order, decode_result
from src.es_order.domain.models import Chunk, MutationResult, Order

logger = logging.getLogger(__name__)


class ActorOrderRepository:
    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def _call(self, method: str, *args: Any) -> Any:
        resp = await self._client.post(f"{self._base_url}/{method}", json={"args": list(args)})
        resp.raise_for_status()
        return resp.json()

    async def get_order(self, order_id: int) -> Order | None:
        raw = decode_opt(await self._call("get_order", order_id))
        if raw is None:
            return None
        return decode_order(raw)

    async def get_chunks(self, order_id: int) -> list[Chunk]:
        raw = await self._call("get_order_chunks", order_id)
        return [decode_chunk(item) for item in raw]

    async def confirm_funding(self, order_id: int) -> MutationResult:
        result = decode_result(await self._call("confirm_deposit", order_id))
        logger.info("confirm_deposit order=%d ok=%s", order_id, result.ok)
        return result

    async def cancel_order(self, order_id: int) -> MutationResult:
        result = decode_result(await self._call("cancel_order", order_id))
        logger.info("cancel_order order=%d ok=%s", order_id, result.ok)
        return result

    async def update_max_price(self, order_id: int, value: Decimal) -> MutationResult:
        # actor takes an f64
        result = decode_result(await self._call("update_max_bsv_price", order_id, float(value)))
        logger.info("update_max_bsv_price order=%d value=%s ok=%s", order_id, value, result.ok)
        return result
