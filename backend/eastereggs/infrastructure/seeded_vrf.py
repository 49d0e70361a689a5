"""Seeded VRF Coordinator: deterministic in-process randomness coordinator.

Invariants:
    - Requests must name an existing subscription, else OracleError("invalid subscription")
    - Request ids are sequential, starting at 1
    - A request can be fulfilled exactly once; unknown or already-fulfilled ids
      raise OracleError("nonexistent request")
    - Words for a request depend only on (seed, request_id) unless supplied

Design Decisions:
    - Mirrors the mock coordinator used on development chains: subscriptions
      are created and funded explicitly before requests are accepted
    - The coordinator calls the consumer as its own identity, so the consumer's
      coordinator check passes exactly as it would for the real collaborator
"""

import logging
import random
from dataclasses import dataclass

from eastereggs.core.domain_types import Address, RequestId
from eastereggs.core.errors import OracleError
from eastereggs.core.repository_protocols import FulfillmentConsumer
from eastereggs.core.upkeep import RandomnessRequest

logger = logging.getLogger(__name__)


@dataclass
class Subscription:
    balance: int = 0


class SeededVrfCoordinator:
    """Deterministic coordinator with explicit, caller-driven fulfillment."""

    def __init__(self, address: Address, seed: int = 0):
        self.address = address
        self.seed = seed
        self.subscriptions: dict[int, Subscription] = {}
        self.pending: dict[RequestId, RandomnessRequest] = {}
        self._next_subscription_id = 1
        self._next_request_id = 1

    def create_subscription(self) -> int:
        sub_id = self._next_subscription_id
        self._next_subscription_id += 1
        self.subscriptions[sub_id] = Subscription()
        logger.info(f"Created VRF subscription {sub_id}")
        return sub_id

    def fund_subscription(self, sub_id: int, amount: int) -> None:
        self._subscription(sub_id).balance += amount

    def ensure_subscription(self, sub_id: int) -> int:
        """Register an externally chosen subscription id if it is unknown."""
        self.subscriptions.setdefault(sub_id, Subscription())
        self._next_subscription_id = max(self._next_subscription_id, sub_id + 1)
        return sub_id

    async def request_random_words(self, request: RandomnessRequest) -> RequestId:
        self._subscription(request.subscription_id)
        request_id = RequestId(self._next_request_id)
        self._next_request_id += 1
        self.pending[request_id] = request
        logger.info("Randomness requested", extra={"request_id": request_id})
        return request_id

    def words_for(self, request_id: int, num_words: int) -> list[int]:
        rng = random.Random(self.seed * 1_000_003 + request_id)
        return [rng.getrandbits(256) for _ in range(num_words)]

    async def fulfill_random_words(
        self,
        request_id: int,
        consumer: FulfillmentConsumer,
        words: list[int] | None = None,
    ) -> int:
        """Deliver words for a pending request to the consumer."""
        request = self.pending.pop(RequestId(request_id), None)
        if request is None:
            raise OracleError(
                f"request {request_id} does not exist", "nonexistent request",
                http_status=404,
            )
        if words is None:
            words = self.words_for(request_id, request.num_words)
        return await consumer.fulfill_random_words(
            self.address, RequestId(request_id), words,
        )

    def _subscription(self, sub_id: int) -> Subscription:
        subscription = self.subscriptions.get(sub_id)
        if subscription is None:
            raise OracleError(
                f"subscription {sub_id} does not exist", "invalid subscription",
                http_status=400,
            )
        return subscription
