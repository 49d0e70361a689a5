"""Egg Service: the hosting shell that serializes calls and wires the core to its ports.

Invariants:
    - Every ledger read-check-mutate step runs under one asyncio.Lock: no two
      operations interleave their checks and mutations
    - perform_upkeep holds the lock for its readiness check only; the oracle
      round trip runs outside it, so a slow coordinator never stalls the ledger
    - Pure core checks run before any port call; a failing check mutates nothing
    - give: the payment is forwarded only after every check passed, and the
      ledger is mutated only after the payment succeeded (all-or-nothing)
    - Events are published and the snapshot saved only after a successful mutation;
      a failed snapshot save never suppresses the events, nor the reverse
    - Operations that leave the ledger unchanged (upkeep, fulfillment) save no snapshot
    - Read-only queries never mutate and return copies

Design Decisions:
    - Impureim sandwich per operation: pure checks -> awaited port -> pure mutation
    - Snapshot/event-log failures are logged, not raised: the domain result
      already happened and the log is observability only
"""

import asyncio
import logging
import time
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import AsyncIterator

from eastereggs.core.answer_picker import fulfill_random_words
from eastereggs.core.domain_types import (
    Address, ANSWER_FUNDS, ContractState, EDIT_INTERVAL, NUM_ANSWERS,
    NUM_WORDS, REQUEST_CONFIRMATIONS, RequestId,
)
from eastereggs.core.egg_ledger import Egg, EggLedger
from eastereggs.core.egg_ledger_snapshot import ledger_to_snapshot
from eastereggs.core.egg_registry import (
    apply_give, edit_egg, generate_egg, get_egg_index, prepare_give, send_egg,
)
from eastereggs.core.enforce_access import close_contract
from eastereggs.core.errors import EasterEggsError, ErrorContext, TransferError
from eastereggs.core.events import AnswerPerformed, ContractEvent
from eastereggs.core.repository_protocols import (
    EventSink, LedgerRepository, PaymentRail, RandomnessCoordinator,
)
from eastereggs.core.upkeep import VrfConfig, check_upkeep, prepare_upkeep

logger = logging.getLogger(__name__)


def unix_now() -> int:
    return int(time.time())


class EggService:
    """AccessController, EggRegistry, UpkeepScheduler and callback handler behind one lock."""

    def __init__(
        self,
        ledger: EggLedger,
        coordinator: RandomnessCoordinator,
        coordinator_address: Address,
        vrf_config: VrfConfig,
        payment_rail: PaymentRail,
        event_sink: EventSink,
        ledger_repository: LedgerRepository | None = None,
        clock: Callable[[], int] = unix_now,
    ):
        self._ledger = ledger
        self._coordinator = coordinator
        self._coordinator_address = coordinator_address
        self._vrf_config = vrf_config
        self._payment_rail = payment_rail
        self._event_sink = event_sink
        self._ledger_repository = ledger_repository
        self._clock = clock
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def _rejections_logged(self, operation: str, actor: Address) -> AsyncIterator[None]:
        try:
            yield
        except EasterEggsError as e:
            logger.warning(
                f"{operation} rejected: {e.message}",
                extra={
                    "actor": actor, "operation": operation,
                    "error_code": e.code,
                },
            )
            raise

    @asynccontextmanager
    async def _serialized(self, operation: str, actor: Address) -> AsyncIterator[None]:
        async with self._lock:
            async with self._rejections_logged(operation, actor):
                yield

    async def _commit(
        self, events: list[ContractEvent], ledger_changed: bool = True,
    ) -> None:
        if ledger_changed and self._ledger_repository is not None:
            try:
                await self._ledger_repository.save(ledger_to_snapshot(self._ledger))
            except Exception as e:
                logger.error(f"Failed to record ledger state: {e}", exc_info=True)
        for event in events:
            try:
                await self._event_sink.publish(event)
            except Exception as e:
                logger.error(
                    f"Failed to publish {event.name.value}: {e}",
                    exc_info=True, extra={"event_name": event.name.value},
                )

    # ─── Access ─────────────────────────────────────────────────

    @property
    def owner(self) -> Address:
        return self._ledger.owner

    @property
    def state(self) -> ContractState:
        return self._ledger.state

    async def close(self, actor: Address) -> None:
        async with self._serialized("close", actor):
            close_contract(self._ledger, actor)
            logger.info("Contract closed", extra={"actor": actor})
            await self._commit([])

    # ─── Registry ───────────────────────────────────────────────

    async def generate(self, actor: Address, wish: str, colour: str) -> Egg:
        async with self._serialized("generate", actor):
            egg, event = generate_egg(self._ledger, actor, wish, colour, self._clock())
            logger.info("Egg generated", extra={"actor": actor})
            await self._commit([event])
            return egg

    async def send(self, actor: Address, receiver: Address, descriptor: Egg) -> Egg:
        async with self._serialized("send", actor):
            egg, event = send_egg(
                self._ledger, actor, receiver, descriptor, self._clock(),
            )
            logger.info("Egg sent", extra={"actor": actor, "receiver": receiver})
            await self._commit([event])
            return egg

    async def edit(
        self, actor: Address, new_wish: str, new_colour: str, descriptor: Egg,
    ) -> Egg:
        async with self._serialized("edit", actor):
            egg, event = edit_egg(
                self._ledger, actor, new_wish, new_colour, descriptor, self._clock(),
            )
            logger.info("Egg edited", extra={"actor": actor})
            await self._commit([event])
            return egg

    async def give(self, actor: Address, payment: int, descriptor: Egg) -> None:
        """Surrender one egg, forwarding the whole payment to the owner first."""
        async with self._serialized("give", actor):
            index = prepare_give(self._ledger, actor, payment, descriptor)
            forwarded = await self._payment_rail.forward(self._ledger.owner, payment)
            if not forwarded:
                raise TransferError(
                    self._ledger.owner, payment,
                    ErrorContext(actor=actor, operation="give"),
                )
            _, event = apply_give(self._ledger, actor, index)
            logger.info("Egg given", extra={"actor": actor, "amount": payment})
            await self._commit([event])

    # ─── Upkeep ─────────────────────────────────────────────────

    def check_upkeep(self, actor: Address) -> bool:
        return check_upkeep(self._ledger, actor)

    async def perform_upkeep(self, actor: Address) -> RequestId:
        async with self._serialized("perform_upkeep", actor):
            request = prepare_upkeep(self._ledger, actor, self._vrf_config)
        async with self._rejections_logged("perform_upkeep", actor):
            request_id = await self._coordinator.request_random_words(request)
        logger.info(
            "Upkeep performed",
            extra={"actor": actor, "request_id": request_id},
        )
        async with self._lock:
            await self._commit(
                [AnswerPerformed(request_id=request_id)], ledger_changed=False,
            )
        return request_id

    # ─── Randomness callback ────────────────────────────────────

    async def fulfill_random_words(
        self, caller: Address, request_id: RequestId, random_words: list[int],
    ) -> int:
        async with self._serialized("fulfill", caller):
            event = fulfill_random_words(
                caller, self._coordinator_address, request_id, random_words,
            )
            logger.info(
                "Answer picked",
                extra={"request_id": request_id, "answer_index": event.answer_index},
            )
            await self._commit([event], ledger_changed=False)
            return event.answer_index

    # ─── Queries ────────────────────────────────────────────────

    def eggs_of(self, address: Address) -> list[Egg]:
        return self._ledger.eggs_of(address)

    def eggs_count(self, address: Address) -> int:
        return self._ledger.get_account(address).eggs_count

    def eggs_given(self, address: Address) -> int:
        return self._ledger.get_account(address).eggs_given

    def egg_index(self, owner: Address, descriptor: Egg) -> int:
        return get_egg_index(self._ledger, owner, descriptor)

    async def recent_events(self, limit: int = 50) -> list[dict]:
        return await self._event_sink.recent(limit)

    def constants(self) -> dict:
        return {
            "answer_funds": ANSWER_FUNDS,
            "edit_interval": EDIT_INTERVAL,
            "request_confirmations": REQUEST_CONFIRMATIONS,
            "num_words": NUM_WORDS,
            "num_answers": NUM_ANSWERS,
            "gas_lane": self._vrf_config.gas_lane,
            "subscription_id": self._vrf_config.subscription_id,
            "callback_gas_limit": self._vrf_config.callback_gas_limit,
        }
