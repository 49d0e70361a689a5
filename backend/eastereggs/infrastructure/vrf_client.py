"""Resilient VRF Client: requests random words from an HTTP randomness coordinator.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - No single wait exceeds max_delay_ms, whatever Retry-After asks for
    - Transient errors (5xx, connection, timeout): max_retries with exponential backoff
    - Client errors (4xx except 429): immediate failure, no retry
    - All failures mapped to OracleError (core/errors.py)

Design Decisions:
    - Retries only cover the submission of a request; fulfillment arrives later
      through the callback route and is never polled from here
    - +-25% jitter on backoff: spreads retries from concurrent upkeeps
"""

import asyncio
import logging
import random

import httpx

from eastereggs.core.domain_types import RequestId
from eastereggs.core.errors import ErrorContext, OracleError
from eastereggs.core.upkeep import RandomnessRequest

logger = logging.getLogger(__name__)

_RATE_LIMITED = 429


class HttpVrfCoordinator:
    """Submits randomness requests with retry logic, timeouts, and error mapping."""

    def __init__(
        self,
        base_url: str,
        max_retries: int = 3,
        base_delay_ms: int = 500,
        max_delay_ms: int = 10_000,
        timeout_seconds: int = 30,
        client: httpx.AsyncClient | None = None,
    ):
        self._client = client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def request_random_words(self, request: RandomnessRequest) -> RequestId:
        """Submit one request; return the coordinator's request id."""
        body = {
            "key_hash": request.gas_lane,
            "sub_id": request.subscription_id,
            "minimum_request_confirmations": request.request_confirmations,
            "callback_gas_limit": request.callback_gas_limit,
            "num_words": request.num_words,
        }
        for attempt in range(self.max_retries + 1):
            try:
                response = await self._client.post("/requests", json=body)
            except (httpx.ConnectError, httpx.TimeoutException) as e:
                await self._backoff_or_raise(attempt, f"transport: {e}", "transient")
                continue
            except httpx.HTTPError as e:
                raise OracleError(str(e), "transport")

            if response.status_code == _RATE_LIMITED:
                retry_after_ms = _retry_after_ms(response)
                await self._backoff_or_raise(
                    attempt, "rate limited", "rate_limit", retry_after_ms,
                )
                continue
            if response.status_code >= 500:
                await self._backoff_or_raise(
                    attempt, f"HTTP {response.status_code}", "transient",
                )
                continue
            if response.status_code >= 400:
                raise OracleError(
                    f"HTTP {response.status_code}: {response.text[:200]}",
                    "client_error",
                )
            return self._parse_request_id(response)

        raise OracleError("retries exhausted", "transient")

    def _parse_request_id(self, response: httpx.Response) -> RequestId:
        try:
            request_id = RequestId(int(response.json()["request_id"]))
        except (ValueError, KeyError, TypeError) as e:
            raise OracleError(f"malformed response: {e}", "bad_response")
        logger.info("Randomness requested", extra={"request_id": request_id})
        return request_id

    async def _backoff_or_raise(
        self, attempt: int, message: str, reason: str,
        retry_after_ms: int | None = None,
    ) -> None:
        if attempt >= self.max_retries:
            raise OracleError(
                message, reason, retry_after_ms=retry_after_ms,
                context=ErrorContext(operation="perform_upkeep"),
            )
        delay = min(retry_after_ms or self._backoff_delay(attempt), self.max_delay_ms)
        logger.warning(
            f"Coordinator {reason}, retrying in {delay}ms",
            extra={"attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff_delay(self, attempt: int) -> int:
        delay = min(self.base_delay_ms * (2 ** attempt), self.max_delay_ms)
        jitter = delay * 0.25 * (2 * random.random() - 1)
        return int(delay + jitter)

    async def aclose(self) -> None:
        await self._client.aclose()


def _retry_after_ms(response: httpx.Response) -> int | None:
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return int(float(value) * 1000)
    except ValueError:
        return None
