"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell; dependency arrows point inward only
    - All IO (oracle, payment rail, persistence, event log) goes through these types
    - Implementations provided by the shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but the core functions that surround these calls are never async themselves;
      the service shell orchestrates the awaits around the pure logic
"""

from typing import Protocol

from eastereggs.core.domain_types import Address, RequestId
from eastereggs.core.events import ContractEvent
from eastereggs.core.upkeep import RandomnessRequest


class RandomnessCoordinator(Protocol):
    """Oracle collaborator. Returns an opaque request id; fulfills later."""
    async def request_random_words(self, request: RandomnessRequest) -> RequestId: ...


class PaymentRail(Protocol):
    """Value-transfer rail. True on success, False on failure (never raises)."""
    async def forward(self, recipient: Address, amount: int) -> bool: ...


class LedgerRepository(Protocol):
    """Contract for ledger snapshot persistence."""
    async def load_latest(self) -> dict | None: ...
    async def save(self, snapshot: dict) -> None: ...


class EventSink(Protocol):
    """Receives every event emitted by a successful operation."""
    async def publish(self, event: ContractEvent) -> None: ...
    async def recent(self, limit: int = 50) -> list[dict]: ...


class FulfillmentConsumer(Protocol):
    """Whatever the coordinator calls back with random words."""
    async def fulfill_random_words(
        self, caller: Address, request_id: RequestId, random_words: list[int],
    ) -> int: ...
