"""Pydantic models for bot configuration."""

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

REQUIRED_SETTINGS = ("host", "nick", "channels")


class BotConfig(BaseModel):
    """Connection settings the bot is constructed with.

    Immutable once built. ``host``, ``nick`` and ``channels`` are
    required and must be non-empty; ``port`` and ``realname`` are only
    passed through to the transport.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    host: str = Field(..., min_length=1, description="IRC server hostname")
    nick: str = Field(..., min_length=1, description="Nickname the bot answers to")
    channels: List[str] = Field(..., min_length=1, description="Channels to join, in order")
    port: int = Field(default=6667, ge=1, le=65535)
    realname: Optional[str] = None

    @field_validator("channels")
    @classmethod
    def _no_blank_channels(cls, channels: List[str]) -> List[str]:
        if any(not channel for channel in channels):
            raise ValueError("channel names must be non-empty")
        return channels

    @classmethod
    def from_settings(cls, settings: Optional[Mapping[str, Any]]) -> "BotConfig":
        """Build a BotConfig from a plain mapping.

        Raises:
            ConfigurationError: If settings are missing, or any of
                host, nick and channels is absent or empty.
        """
        if not settings:
            raise ConfigurationError(
                "config is required and must have host, nick, and channels"
            )
        try:
            return cls.model_validate(dict(settings))
        except ValidationError as e:
            first = e.errors()[0]
            setting = str(first["loc"][0]) if first.get("loc") else None
            raise ConfigurationError(
                "config is required and must have host, nick, and channels",
                setting_name=setting,
                reason=first.get("msg", ""),
            ) from e
