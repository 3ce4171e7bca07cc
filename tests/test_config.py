"""Tests for environment-driven client settings."""

import httpx
import pytest
from pydantic import ValidationError

from config import Settings
from executor import RequestExecutor, default_client_factory


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Defaults target loopback with no transport timeout."""
    for name in ("BBS_API_HOST", "BBS_HTTP_TIMEOUT", "BBS_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings()
    assert settings.api_host == "127.0.0.1"
    assert settings.http_timeout is None
    assert settings.debug is False


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """BBS_-prefixed variables override the defaults."""
    monkeypatch.setenv("BBS_API_HOST", "localhost")
    monkeypatch.setenv("BBS_HTTP_TIMEOUT", "2.5")
    monkeypatch.setenv("BBS_DEBUG", "yes")
    settings = Settings()
    assert settings.api_host == "localhost"
    assert settings.http_timeout == 2.5
    assert settings.debug is True
    assert RequestExecutor(settings=settings).api_url(9000, "get_posts") == (
        "http://localhost:9000/api/get_posts"
    )


def test_zero_timeout_means_no_limit() -> None:
    """A zero timeout disables the transport-level limit."""
    assert Settings(http_timeout="0").http_timeout is None


@pytest.mark.parametrize(
    "field,value",
    [
        ("http_timeout", "0.01"),
        ("http_timeout", "soon"),
        ("http_timeout", "-1"),
        ("api_host", 7410),
    ],
)
def test_invalid_values_rejected(field: str, value: str) -> None:
    """Malformed settings fail validation."""
    with pytest.raises(ValidationError):
        Settings(**{field: value})


@pytest.mark.asyncio
async def test_default_client_factory_applies_timeout() -> None:
    """The default client carries the configured timeout."""
    client = default_client_factory(Settings(http_timeout=3))
    async with client:
        assert isinstance(client, httpx.AsyncClient)
        assert client.timeout.read == 3

    unbounded = default_client_factory(Settings(http_timeout=None))
    async with unbounded:
        assert unbounded.timeout.read is None


def test_unset_connection_limits_are_not_settings() -> None:
    """Clients are single-use, so pool sizes are not configurable."""
    assert "max_connections" not in Settings.model_fields
    assert "max_keepalive_connections" not in Settings.model_fields
