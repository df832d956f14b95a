"""Runtime settings for jsonwebkey."""

from typing import Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "JSONWEBKEY_"


class Settings(BaseSettings):
    """
    Process-wide settings. Environment variables use the ``JSONWEBKEY_`` prefix:
      JSONWEBKEY_REVEAL_KEY_MATERIAL=true
      JSONWEBKEY_HTTP_TIMEOUT=2.5
    """

    reveal_key_material: bool = Field(
        default=False,
        description="Show base64 key bytes in repr() output (debugging only)",
    )
    http_timeout: float = Field(
        default=10.0, gt=0, description="Timeout in seconds for key set downloads"
    )

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        case_sensitive=False,
        extra="ignore",
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Return the active settings, loading them from the environment once."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(**overrides: Any) -> Settings:
    """Replace individual settings for the rest of the process.

    Example:
        configure(reveal_key_material=True)
    """
    global _settings
    _settings = Settings(**{**get_settings().model_dump(), **overrides})
    return _settings


def reset_settings() -> None:
    """Forget overrides; the environment is read again on next access."""
    global _settings
    _settings = None
