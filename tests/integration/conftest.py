"""Integration-test fixtures.

The app runs unmodified except for the order details service, which is
rebuilt over the real actor and ledger clients talking to an in-memory
bridge through httpx.MockTransport. Everything from HTTP routing down to
wire decoding is exercised.
"""

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fake_bridge import CALLER, FakeBridge
from httpx import ASGITransport, AsyncClient

from src.es_account.application.service import BalanceService
from src.es_account.infrastructure.ledger_client import LedgerBalanceResolver
from src.es_order.infrastructure.actor_client import ActorOrderRepository
from src.es_reconcile.api.dependencies import get_fee_schedule, get_order_details_service
from src.es_reconcile.application.service import OrderDetailsService
from src.main import app

ACTOR_URL = "http://bridge/actor"
LEDGER_URL = "http://bridge/ledger"


@pytest.fixture
def bridge() -> FakeBridge:
    return FakeBridge()


@pytest_asyncio.fixture
async def client(bridge: FakeBridge) -> AsyncIterator[AsyncClient]:
    """App client whose order service talks to ``bridge``."""
    bridge_client = httpx.AsyncClient(transport=httpx.MockTransport(bridge.handle))
    service = OrderDetailsService(
        repo=ActorOrderRepository(bridge_client, ACTOR_URL),
        balances=BalanceService(
            LedgerBalanceResolver(bridge_client, LEDGER_URL, CALLER), caller_principal=CALLER
        ),
        fees=get_fee_schedule(),
    )
    app.dependency_overrides[get_order_details_service] = lambda: service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    await bridge_client.aclose()
