"""Payment Rails: PaymentRail adapters (HTTP transfer service and in-memory balances).

Invariants:
    - forward() never raises: success is True, any failure is False
    - A False result means no value moved (the service then aborts the surrender)
    - No retries: a transfer is attempted exactly once per call
"""

import logging
from collections import defaultdict

import httpx

from eastereggs.core.domain_types import Address

logger = logging.getLogger(__name__)


class HttpPaymentRail:
    """Forwards payments through an external transfer service over HTTP."""

    def __init__(
        self, base_url: str, timeout_seconds: int = 30,
        client: httpx.AsyncClient | None = None,
    ):
        self._client = client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds,
        )

    async def forward(self, recipient: Address, amount: int) -> bool:
        try:
            response = await self._client.post(
                "/transfers", json={"recipient": recipient, "amount": str(amount)},
            )
        except httpx.HTTPError as e:
            logger.error(
                f"Payment rail unreachable: {e}",
                extra={"receiver": recipient, "amount": amount},
            )
            return False
        if response.is_success:
            logger.info(
                "Payment forwarded",
                extra={"receiver": recipient, "amount": amount},
            )
            return True
        logger.warning(
            f"Payment rail rejected transfer: HTTP {response.status_code}",
            extra={"receiver": recipient, "amount": amount},
        )
        return False

    async def aclose(self) -> None:
        await self._client.aclose()


class InMemoryPaymentRail:
    """Credits balances in a dict. `reject=True` makes every forward fail."""

    def __init__(self, reject: bool = False):
        self.balances: defaultdict[str, int] = defaultdict(int)
        self.reject = reject

    async def forward(self, recipient: Address, amount: int) -> bool:
        if self.reject:
            logger.warning(
                "In-memory rail rejecting transfer",
                extra={"receiver": recipient, "amount": amount},
            )
            return False
        self.balances[recipient] += amount
        return True

    def balance_of(self, address: Address) -> int:
        return self.balances.get(address, 0)
