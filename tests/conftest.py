from __future__ import annotations

from typing import Callable

import httpx
import pytest
import structlog

from cfptime.client import CFPTime
from cfptime.config import ClientConfig

BASE_URL = "https://api.cfptime.org/api/"


def conference_row(**overrides) -> dict:
    row = {
        "id": 1729,
        "name": "PyCon Test",
        "cfp_deadline": "2024-03-01",
        "conf_start_date": "2024-05-15",
        "city": "Pittsburgh",
        "province": "PA",
        "country": "USA",
        "twitter": "@pycon",
        "website": "https://us.pycon.org",
        "cfp_details": "Talks, tutorials and posters",
        "speaker_benefits": "Free ticket and travel grant",
        "code_of_conduct": "https://pycon.org/coc",
        "created_at": "2023-12-01T10:00:00Z",
        "number_of_days": 3,
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_api() -> Callable[..., CFPTime]:
    """Build a client whose network is a MockTransport around `handler`."""

    def factory(handler, **config) -> CFPTime:
        config.setdefault("backoff_factor", 0)
        return CFPTime(ClientConfig(**config), transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
