"""In-flight guards for the "check balance -> maybe auto-activate" sequence.

A guard is a single-slot token: whoever holds it proceeds, everyone else is
turned away immediately instead of queueing behind it. Holding is taken
with an uncontended asyncio.Lock acquire, which completes without yielding to
the event loop, so check-and-take cannot interleave with another task.
"""
import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from src.es_account.domain.models import BalanceObservation

logger = logging.getLogger(__name__)


class InFlightGuard:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[bool]:
        """Yield True while holding the token, False if someone else has it."""
        if self._lock.locked():
            yield False
            return
        async with self._lock:
            yield True


class ActivationGate:
    """Allows at most one activation attempt per balance observation.

    Re-presenting an observation that already produced an attempt is a no-op,
    and a newer observation arriving while an attempt is pending is turned
    away rather than issuing a second call.
    """

    def __init__(self) -> None:
        self.balance_check = InFlightGuard()
        self._activation = InFlightGuard()
        self._last_attempted = 0

    @property
    def activation_pending(self) -> bool:
        return self._activation.busy

    @property
    def last_attempted_observation(self) -> int:
        return self._last_attempted

    @asynccontextmanager
    async def manual(self) -> AsyncIterator[bool]:
        """User-triggered activation: shares the slot, no observation bookkeeping."""
        async with self._activation.hold() as held:
            yield held

    @asynccontextmanager
    async def attempt(self, observation: BalanceObservation) -> AsyncIterator[bool]:
        if observation.sequence <= self._last_attempted:
            logger.debug("Observation #%d already attempted", observation.sequence)
            yield False
            return
        async with self._activation.hold() as held:
            if held:
                self._last_attempted = observation.sequence
            else:
                logger.info(
                    "Activation already in flight; observation #%d skipped",
                    observation.sequence,
                )
            yield held


class ActivationGateRegistry:
    def __init__(self) -> None:
        self._gates: dict[int, ActivationGate] = defaultdict(ActivationGate)

    def get(self, order_id: int) -> ActivationGate:
        return self._gates[order_id]

    def discard(self, order_id: int) -> None:
        gate = self._gates.get(order_id)
        if gate is not None and not gate.activation_pending and not gate.balance_check.busy:
            del self._gates[order_id]
