import pytest

from cfptime.config import DEFAULT_BASE_URL, ClientConfig


def test_defaults_point_at_production_api():
    config = ClientConfig()
    config.validate()
    assert config.base_url == DEFAULT_BASE_URL == "https://api.cfptime.org/api/"
    assert config.max_retries == 3


def test_base_url_gets_a_trailing_slash():
    assert ClientConfig(base_url="http://localhost:8000/api").normalized_base_url == "http://localhost:8000/api/"
    assert ClientConfig(base_url="http://localhost:8000/api/").normalized_base_url == "http://localhost:8000/api/"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_url": "ftp://example.com/api/"},
        {"base_url": "/api/"},
        {"timeout": 0},
        {"timeout": -1.5},
        {"max_retries": -1},
        {"backoff_factor": -0.1},
    ],
)
def test_validate_rejects_bad_values(kwargs):
    with pytest.raises(ValueError):
        ClientConfig(**kwargs).validate()
