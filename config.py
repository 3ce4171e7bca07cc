"""Configuration for the bulletin-board node client."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import model_validator, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from constants import DEFAULT_API_HOST, ENV_PREFIX


class Settings(BaseSettings):
    """Client configuration loaded from environment variables.

    All environment variables are expected to be prefixed with ``BBS_``.
    For example, ``BBS_HTTP_TIMEOUT=30`` bounds every HTTP exchange at the
    transport level in addition to the caller's cancellation handle.
    """

    model_config = SettingsConfigDict(
        extra="ignore",
        env_prefix=ENV_PREFIX,
    )

    api_host: str = DEFAULT_API_HOST

    # No transport-level timeout by default; the cancellation handle passed
    # to each client function is the only time bound.
    http_timeout: Optional[float] = None
    debug: bool = False

    @field_validator("api_host", mode="before")
    @classmethod
    def _normalize_api_host(cls, value: Any) -> str:
        if value is None or value == "":
            return DEFAULT_API_HOST
        if not isinstance(value, str):
            raise ValueError("API_HOST must be a string")
        return value.strip()

    @field_validator("http_timeout", mode="before")
    @classmethod
    def _validate_timeout(cls, value: Any) -> Optional[float]:
        if value is None or value == "":
            return None
        try:
            parsed = float(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("HTTP_TIMEOUT must be a number") from exc
        if parsed == 0:
            return None
        if parsed < 0.1:
            raise ValueError("HTTP_TIMEOUT must be >= 0.1 or 0 for no limit")
        return parsed

    @field_validator("debug", mode="before")
    @classmethod
    def _parse_debug(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        if isinstance(value, (int, float)):
            return bool(value)
        if isinstance(value, str):
            return value.strip().lower() in {"1", "true", "yes", "y", "on"}
        return False

    @model_validator(mode="after")
    def _check_host(self) -> "Settings":
        if not self.api_host:
            raise ValueError("BBS_API_HOST must not be blank")
        return self
