"""
Retrying HTTP transport.

Wraps any httpx async transport and replays a request when it fails for a
transient reason: a connection-level error (reset, refused, timeout) or a
5xx answer from the server. Everything else goes straight back to the caller.
"""

from __future__ import annotations

from typing import Optional

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger()


# Connection-level failures worth replaying; configuration errors such as
# UnsupportedProtocol or InvalidURL are not in this list.
TRANSIENT_ERRORS = (httpx.NetworkError, httpx.TimeoutException, httpx.RemoteProtocolError)


def _is_server_error(response: httpx.Response) -> bool:
    return response.status_code >= 500


def _log_retry(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    if outcome is not None and outcome.failed:
        reason = repr(outcome.exception())
    elif outcome is not None:
        reason = f"status {outcome.result().status_code}"
    else:
        reason = "unknown"
    logger.warning(
        "retrying_request",
        attempt=retry_state.attempt_number,
        reason=reason,
        wait_seconds=retry_state.next_action.sleep if retry_state.next_action else 0,
    )


def _last_outcome(retry_state: RetryCallState) -> httpx.Response:
    # Re-raises the final exception, or hands back the final 5xx response
    return retry_state.outcome.result()


class RetryTransport(httpx.AsyncBaseTransport):
    """Async transport that retries transient failures with exponential backoff."""

    def __init__(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        *,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
        backoff_max: float = 8.0,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self.max_retries = max_retries
        self.backoff_factor = backoff_factor
        self.backoff_max = backoff_max

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception_type(TRANSIENT_ERRORS) | retry_if_result(_is_server_error),
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.backoff_factor, max=self.backoff_max),
            before_sleep=_log_retry,
            retry_error_callback=_last_outcome,
        )

    async def _send_once(self, request: httpx.Request) -> httpx.Response:
        response = await self._transport.handle_async_request(request)
        if _is_server_error(response):
            # Buffer the body so the connection is released even if we retry
            await response.aread()
            await response.aclose()
        return response

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        return await self._retrying()(self._send_once, request)

    async def aclose(self) -> None:
        await self._transport.aclose()
