"""Configuration management for ircbot.

Loads YAML settings (settings.yaml) and environment variables (.env)
into a Config object. Connection settings can be overridden from the
environment; everything else comes from settings.yaml with defaults.

Key classes:
    Config: Central configuration manager.

Key functions:
    get_config: Singleton accessor for the global Config instance.
"""

import os
from pathlib import Path
from typing import List, Optional

import structlog
import yaml
from dotenv import load_dotenv

logger = structlog.get_logger("ircbot.bot")

DEFAULT_PORT = 6667
_CHANNEL_PREFIXES = ("#", "&", "+", "!")


class Config:
    """Central configuration manager for ircbot.

    Loads settings.yaml and .env from the config directory. Read-only
    after __init__.

    Args:
        config_dir: Path to the config directory. Defaults to
            ``<repo_root>/config/``.
    """

    def __init__(self, config_dir: Optional[Path] = None):
        if config_dir is None:
            config_dir = Path(__file__).parent.parent / "config"
        self.config_dir = Path(config_dir)

        env_file = self.config_dir / ".env"
        if env_file.exists():
            load_dotenv(env_file)

        self.settings = self._load_yaml("settings.yaml")

    def _load_yaml(self, filename: str) -> dict:
        """Load a YAML configuration file."""
        filepath = self.config_dir / filename
        if filepath.exists():
            with open(filepath, "r") as f:
                return yaml.safe_load(f) or {}
        return {}

    @property
    def host(self) -> str:
        """IRC server hostname. Env var IRCBOT_HOST takes precedence."""
        return os.environ.get("IRCBOT_HOST") or self.settings.get("host", "")

    @property
    def port(self) -> int:
        """IRC server port (default 6667). Env var IRCBOT_PORT takes precedence."""
        configured = os.environ.get("IRCBOT_PORT") or self.settings.get("port", DEFAULT_PORT)
        try:
            return int(configured)
        except (TypeError, ValueError):
            logger.error("config_invalid_value", key="port", value=configured)
            return DEFAULT_PORT

    @property
    def nick(self) -> str:
        """Bot nickname. Env var IRCBOT_NICK takes precedence."""
        return os.environ.get("IRCBOT_NICK") or self.settings.get("nick", "")

    @property
    def realname(self) -> Optional[str]:
        """IRC real name (defaults to the nick at connect time)."""
        return self.settings.get("realname")

    @property
    def channels(self) -> List[str]:
        """Channels to join, in order.

        Env var IRCBOT_CHANNELS (comma separated) takes precedence over
        the ``channels`` list in settings.yaml.
        """
        from_env = os.environ.get("IRCBOT_CHANNELS")
        if from_env:
            return [c.strip() for c in from_env.split(",") if c.strip()]
        channels = self.settings.get("channels", [])
        if not isinstance(channels, list):
            logger.error("channels_invalid_type", type=type(channels).__name__)
            return []
        return channels

    def bot_settings(self) -> dict:
        """Connection settings in the shape Bot() accepts."""
        return {
            "host": self.host,
            "nick": self.nick,
            "channels": self.channels,
            "port": self.port,
            "realname": self.realname,
        }

    def validate(self):
        """Validate connection settings at startup.

        Logs warnings/errors but does not raise -- Bot() is what refuses
        to start without host, nick and channels.
        """
        for key in ("host", "nick"):
            if not getattr(self, key):
                logger.error("config_missing_setting", key=key)
        channels = self.channels
        if not channels:
            logger.error("config_missing_setting", key="channels")
        for channel in channels:
            if not isinstance(channel, str) or not channel.startswith(_CHANNEL_PREFIXES):
                logger.warning("config_unusual_channel_name", channel=channel)

    @property
    def log_dir(self) -> Path:
        """Get log directory path."""
        configured = self.settings.get("log_dir")
        if configured:
            return Path(configured).expanduser()
        return Path(__file__).parent.parent / "logs"

    @property
    def logging_level(self) -> str:
        """Global log level (default INFO). Controls console and combined file."""
        log_config = self.settings.get("logging", {})
        return log_config.get("level", "INFO")

    @property
    def logging_subsystem_levels(self) -> dict:
        """Per-subsystem log level overrides. E.g. {"transport": "DEBUG"}."""
        log_config = self.settings.get("logging", {})
        return log_config.get("subsystem_levels", {})

    @property
    def logging_max_file_size_mb(self) -> int:
        """Max size per log file in MB before rotation (default 10)."""
        log_config = self.settings.get("logging", {})
        return log_config.get("max_file_size_mb", 10)

    @property
    def logging_backup_count(self) -> int:
        """Number of rotated log files to keep (default 5)."""
        log_config = self.settings.get("logging", {})
        return log_config.get("backup_count", 5)


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config
