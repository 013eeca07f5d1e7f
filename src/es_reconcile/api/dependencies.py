# src/es_reconcile/api/dependencies.py
import httpx

from config.settings import settings
from src.es_account.application.service import BalanceService
from src.es_account.infrastructure.ledger_client import LedgerBalanceResolver
from src.es_order.infrastructure.actor_client import ActorOrderRepository
from src.es_reconcile.application.service import OrderDetailsService
from src.es_reconcile.domain.fees import FeeSchedule

_http_client: httpx.AsyncClient | None = None
_service: OrderDetailsService | None = None


def get_http_client() -> httpx.AsyncClient:
    global _http_client  # noqa: PLW0603
    if _http_client is None:
        _http_client = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT_SECONDS)
    return _http_client


async def close_http_client() -> None:
    global _http_client, _service  # noqa: PLW0603
    if _http_client is not None:
        await _http_client.aclose()
    _http_client = None
    _service = None


def get_fee_schedule() -> FeeSchedule:
    return FeeSchedule.from_settings(settings)


def get_order_details_service() -> OrderDetailsService:
    global _service  # noqa: PLW0603
    if _service is None:
        client = get_http_client()
        _service = OrderDetailsService(
            repo=ActorOrderRepository(client, settings.ACTOR_URL),
            balances=BalanceService(
                LedgerBalanceResolver(client, settings.LEDGER_URL, settings.CALLER_PRINCIPAL),
                caller_principal=settings.CALLER_PRINCIPAL,
            ),
            fees=get_fee_schedule(),
        )
    return _service
