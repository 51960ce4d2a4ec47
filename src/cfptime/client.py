"""
CFPTime API client.

Read-only client for https://api.cfptime.org/api/ (docs at
https://api.cfptime.org/api/docs). Every operation is a coroutine that
issues one GET, lets the transport retry transient failures, and decodes
the JSON answer into Conference records.

    async with CFPTime() as cfptime:
        for conf in await cfptime.get_cfps():
            print(conf.name, conf.cfp_deadline)
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

import httpx
import structlog

from .config import ClientConfig
from .errors import DecodeError, StatusError, TransportError
from .models import Conference, conferences_from_json
from .transport import RetryTransport

logger = structlog.get_logger()

DEFAULT_HEADERS = {"Content-Type": "application/json; charset=utf-8"}
BODYLESS_METHODS = ("GET", "DELETE")


class CFPTime:
    """Entrypoint for the CFPTime API.

    The handle holds one pooled httpx.AsyncClient and no other state, so a
    single instance can serve any number of concurrent tasks.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            config: Endpoint, timeout and retry policy. Defaults to the
                production API with three retries.
            transport: Inner transport the retry policy wraps. Tests pass an
                httpx.MockTransport here; defaults to a real HTTP transport.
        """
        self.config = config or ClientConfig()
        self.config.validate()
        self.base_url = httpx.URL(self.config.normalized_base_url)
        self._client = httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            timeout=self.config.timeout,
            transport=RetryTransport(
                transport,
                max_retries=self.config.max_retries,
                backoff_factor=self.config.backoff_factor,
                backoff_max=self.config.backoff_max,
            ),
        )

    async def __aenter__(self) -> "CFPTime":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the pooled connections."""
        await self._client.aclose()

    # ------------------------------ Requests -------------------------------

    def _url(self, path: str) -> httpx.URL:
        try:
            return self.base_url.join(path.lstrip("/"))
        except httpx.InvalidURL as exc:
            raise TransportError(f"Cannot build URL for {path!r}: {exc}") from exc

    def _request(self, method: str, path: str, body: Any = None) -> httpx.Request:
        method = method.upper()
        url = self._url(path)
        if method in BODYLESS_METHODS:
            return self._client.build_request(method, url)
        return self._client.build_request(method, url, json=body)

    async def _get_json(self, path: str) -> Tuple[Any, str]:
        """GET `path` and return the decoded payload with the raw body text."""
        request = self._request("GET", path)
        logger.debug("api_request", method=request.method, url=str(request.url))
        try:
            response = await self._client.send(request)
        except httpx.HTTPError as exc:
            raise TransportError(f"GET {request.url} failed: {exc!r}") from exc

        if response.status_code != 200:
            logger.warning("api_error_status", url=str(request.url), status=response.status_code)
            raise StatusError(response.status_code, response.text)

        try:
            return response.json(), response.text
        except ValueError as exc:
            logger.warning("api_decode_failed", url=str(request.url), error=str(exc))
            raise DecodeError(f"Invalid JSON from {request.url}: {exc}", response.text) from exc

    async def _get_one(self, path: str) -> Conference:
        payload, body = await self._get_json(path)
        try:
            return Conference.from_dict(payload)
        except ValueError as exc:
            logger.warning("api_decode_failed", path=path, error=str(exc))
            raise DecodeError(f"Unexpected conference shape from {path}: {exc}", body) from exc

    async def _get_many(self, path: str) -> List[Conference]:
        payload, body = await self._get_json(path)
        try:
            return conferences_from_json(payload)
        except ValueError as exc:
            logger.warning("api_decode_failed", path=path, error=str(exc))
            raise DecodeError(f"Unexpected conference list shape from {path}: {exc}", body) from exc

    # ----------------------------- Endpoints -------------------------------

    async def get_cfps(self) -> List[Conference]:
        """Get all open Call for Papers."""
        return await self._get_many("cfps")

    async def get_cfp(self, cfp_id: int) -> Conference:
        """Get one Call for Papers by id."""
        return await self._get_one(f"cfps/{int(cfp_id)}/")

    async def get_conferences(self) -> List[Conference]:
        """Get all conferences."""
        return await self._get_many("conferences")

    async def get_conference(self, conference_id: int) -> Conference:
        """Get one conference by id."""
        return await self._get_one(f"conferences/{int(conference_id)}/")

    async def get_upcoming(self) -> List[Conference]:
        """Get upcoming conferences (filtered by the server)."""
        return await self._get_many("upcoming")
