"""
Outbound HTTP plumbing shared by the backend relay and the similarity scorer.

Both upstreams are plain JSON-over-POST services. Calls go through one
retry loop driven by a RetryPolicy, so transient gateway failures are
retried the same way everywhere.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import httpx

from storylens.core.config import settings
from storylens.core.error_handling import request_id_var

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try a request and how long to wait in between."""

    attempts: int = 1
    backoff_seconds: float = 2.0
    retry_statuses: Tuple[int, ...] = (429, 500, 502, 503, 504)

    @classmethod
    def from_settings(cls, attempts: Optional[int] = None) -> "RetryPolicy":
        return cls(
            attempts=max(1, attempts or settings.HTTP_RETRY_ATTEMPTS),
            backoff_seconds=settings.HTTP_RETRY_BACKOFF_SECONDS,
            retry_statuses=tuple(settings.HTTP_RETRY_STATUSES),
        )

    def should_retry(self, response: httpx.Response) -> bool:
        return response.status_code in self.retry_statuses

    def delay_for(self, attempt: int, response: Optional[httpx.Response] = None) -> float:
        """Retry-After wins when the upstream sends one; otherwise exponential backoff."""
        if response is not None:
            retry_after = _retry_after_seconds(response)
            if retry_after is not None:
                return retry_after
        return self.backoff_seconds * (2 ** (attempt - 1))


def _retry_after_seconds(response: httpx.Response) -> Optional[float]:
    value = response.headers.get("Retry-After")
    if not value:
        return None
    try:
        return max(0.0, float(value))
    except ValueError:
        return None


def get_async_client(timeout: Optional[float] = None) -> httpx.AsyncClient:
    """AsyncClient with the connection limits from settings."""
    return httpx.AsyncClient(
        timeout=timeout or settings.HTTP_CLIENT_TIMEOUT,
        limits=httpx.Limits(
            max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE_CONNECTIONS,
            max_connections=settings.HTTP_MAX_CONNECTIONS,
        ),
    )


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    payload: Any,
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    policy: Optional[RetryPolicy] = None,
) -> httpx.Response:
    """
    POST a JSON payload, retrying connection errors and retryable statuses.

    The last response is returned once the policy is exhausted, whatever its
    status; callers turn non-200 answers into their own errors. A connection
    error on the final attempt propagates as httpx.HTTPError.
    """
    policy = policy or RetryPolicy.from_settings()
    req_id = request_id_var.get()

    for attempt in range(1, policy.attempts + 1):
        last_attempt = attempt == policy.attempts
        try:
            response = await client.post(
                url,
                headers=headers,
                json=payload,
                timeout=timeout or settings.HTTP_CLIENT_TIMEOUT,
            )
        except httpx.HTTPError as exc:
            if last_attempt:
                logger.error(f"[{req_id}] POST {url} failed after {policy.attempts} attempt(s): {exc}")
                raise
            delay = policy.delay_for(attempt)
            logger.warning(
                f"[{req_id}] POST {url} attempt {attempt}/{policy.attempts} failed: {exc}; "
                f"retrying in {delay:.2f}s"
            )
            await asyncio.sleep(delay)
            continue

        if last_attempt or not policy.should_retry(response):
            return response

        delay = policy.delay_for(attempt, response)
        logger.warning(
            f"[{req_id}] POST {url} returned {response.status_code} on attempt "
            f"{attempt}/{policy.attempts}; retrying in {delay:.2f}s"
        )
        await asyncio.sleep(delay)

    raise RuntimeError("post_json exhausted its retry policy")


@asynccontextmanager
async def get_managed_client(
    persistent_client: Optional[httpx.AsyncClient] = None,
    timeout: Optional[float] = None
):
    """
    Yield the persistent client when one is open, else a temporary client
    that is closed on exit.

    Example:
        async with get_managed_client(self._client, self.timeout) as client:
            response = await post_json(client, url, payload)
    """
    if persistent_client is not None:
        yield persistent_client
        return

    client = get_async_client(timeout=timeout)
    try:
        yield client
    finally:
        await client.aclose()
