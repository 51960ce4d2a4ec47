from __future__ import annotations

from dataclasses import dataclass

import httpx

DEFAULT_BASE_URL = "https://api.cfptime.org/api/"


@dataclass(frozen=True)
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0  # seconds, per request
    max_retries: int = 3  # retries after the first attempt
    backoff_factor: float = 0.5
    backoff_max: float = 8.0

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot produce a working client."""
        try:
            url = httpx.URL(self.base_url)
        except httpx.InvalidURL as exc:
            raise ValueError(f"Invalid base_url {self.base_url!r}: {exc}") from exc
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"base_url must be an absolute http(s) URL, got {self.base_url!r}")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")
        if self.max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        if self.backoff_factor < 0 or self.backoff_max < 0:
            raise ValueError("backoff values cannot be negative")

    @property
    def normalized_base_url(self) -> str:
        # Relative joins only keep the last path segment when the base ends with "/"
        return self.base_url if self.base_url.endswith("/") else self.base_url + "/"
