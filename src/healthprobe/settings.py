"""Probe settings loaded from environment variables."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Addresses that are valid for binding but not as a client target
WILDCARD_HOSTS = ("0.0.0.0", "::")  # noqa: S104
LOOPBACK_HOST = "127.0.0.1"


class ProbeSettings(BaseSettings):
    """Healthcheck probe configuration.

    Each field is read from its own environment variable, for example
    HEALTH_CHECK_TIMEOUT=500 sets timeout_ms=500. Empty variables fall back to the
    defaults. Fields can also be passed by name.
    Invalid numeric input raises a ValidationError instead of falling back silently.
    """

    model_config = SettingsConfigDict(
        frozen=True, populate_by_name=True, env_ignore_empty=True
    )

    host: str = Field(default="localhost", validation_alias="HEALTH_CHECK_HOST")
    port: int = Field(default=3000, ge=1, le=65535, validation_alias="PORT")
    path: str = Field(default="/health", validation_alias="HEALTH_CHECK_PATH")
    timeout_ms: int = Field(default=3000, gt=0, validation_alias="HEALTH_CHECK_TIMEOUT")

    @field_validator("host")
    @classmethod
    def _client_host(cls, value: str) -> str:
        value = value.strip()
        if value in WILDCARD_HOSTS:
            return LOOPBACK_HOST
        return value

    @field_validator("path")
    @classmethod
    def _leading_slash(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"

    @property
    def url(self) -> str:
        """Full URL of the health endpoint."""
        return f"http://{self.host}:{self.port}{self.path}"

    @property
    def target(self) -> str:
        """Host, port and path for log messages."""
        return f"{self.host}:{self.port}{self.path}"

    @property
    def timeout_seconds(self) -> float:
        """Request timeout in seconds."""
        return self.timeout_ms / 1000


def load_settings() -> ProbeSettings:
    """Read the probe settings from the environment.

    Returns
    -------
    ProbeSettings
        Immutable settings for a single probe run

    Raises
    ------
    pydantic.ValidationError
        If PORT or HEALTH_CHECK_TIMEOUT is not a valid integer in range

    """
    return ProbeSettings()
