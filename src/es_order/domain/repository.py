# src/es_order/domain/repository.py
"""OrderRepository Protocol: interface contract for the backend actor."""
from decimal import Decimal
from typing import Protocol

from src.es_order.domain.models import Chunk, MutationResult, Order


class OrderRepositoryProtocol(Protocol):
    async def get_order(self, order_id: int) -> Order | None: ...

    async def get_chunks(self, order_id: int) -> list[Chunk]: ...

    async def confirm_funding(self, order_id: int) -> MutationResult: ...

    async def cancel_order(self, order_id: int) -> MutationResult: ...

    async def update_max_price(self, order_id: int, value: Decimal) -> MutationResult: ...
