"""Logging setup for ircbot.

Every module logs through structlog with an event name and key-value
pairs; records are handed to stdlib logging and rendered there by a
ProcessorFormatter, so the irc library's own stdlib records share the
same format.

Where records end up:
    stderr             every record at the configured level
    <log_dir>/ircbot.log       everything under the "ircbot" logger
    <log_dir>/<subsystem>.log  one file per module logger:
        ircbot.bot        lifecycle and transport error events
        ircbot.commands   registration, help and dispatch
        ircbot.transport  connect, join and raw IRC events

setup_logging() runs twice from main: once before the config exists
(stderr only, loggers not cached) and once with the loaded Config.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Dict, NamedTuple, Optional

import structlog

LOGGER_PREFIX = "ircbot"

# Suffixes of the module loggers ("ircbot.bot" etc.)
SUBSYSTEMS = ("bot", "commands", "transport")

_PRE_CHAIN = [
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
]


class _LogSettings(NamedTuple):
    log_dir: Optional[Path]
    level: int
    subsystem_levels: Dict[str, int]
    max_bytes: int
    backup_count: int
    cache_loggers: bool


def _level(name: str, default: int) -> int:
    return getattr(logging, name.upper(), default) if name else default


def _settings_from(config) -> _LogSettings:
    if config is None:
        return _LogSettings(None, logging.INFO, {}, 0, 0, False)
    level = _level(config.logging_level, logging.INFO)
    return _LogSettings(
        log_dir=Path(config.log_dir),
        level=level,
        subsystem_levels={
            name: _level(value, level)
            for name, value in config.logging_subsystem_levels.items()
        },
        max_bytes=config.logging_max_file_size_mb * 1024 * 1024,
        backup_count=config.logging_backup_count,
        cache_loggers=True,
    )


def _formatter(colors: bool) -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_PRE_CHAIN,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=colors),
        ],
    )


def _rotating_handler(path: Path, level: int, settings: _LogSettings) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=settings.max_bytes,
        backupCount=settings.backup_count,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(_formatter(colors=False))
    return handler


def _reset(name: str, level: int) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.propagate = True
    return logger


def setup_logging(config=None) -> None:
    """Configure structlog and the stdlib handlers behind it.

    Args:
        config: The loaded Config, or None for the early stderr-only
            phase. With a config, log files are written to
            ``config.log_dir`` unless that directory cannot be created.
    """
    settings = _settings_from(config)

    dir_error = None
    log_dir = settings.log_dir
    if log_dir is not None:
        try:
            log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            dir_error, log_dir = exc, None

    root = _reset("", logging.DEBUG)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(settings.level)
    console.setFormatter(_formatter(colors=sys.stderr.isatty()))
    root.addHandler(console)

    package_logger = _reset(LOGGER_PREFIX, logging.DEBUG)
    if log_dir is not None:
        package_logger.addHandler(
            _rotating_handler(log_dir / f"{LOGGER_PREFIX}.log", settings.level, settings)
        )

    for subsystem in SUBSYSTEMS:
        level = settings.subsystem_levels.get(subsystem, settings.level)
        sub_logger = _reset(f"{LOGGER_PREFIX}.{subsystem}", level)
        if log_dir is not None:
            sub_logger.addHandler(_rotating_handler(log_dir / f"{subsystem}.log", level, settings))

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_PRE_CHAIN,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=settings.cache_loggers,
    )

    if dir_error is not None:
        structlog.get_logger(LOGGER_PREFIX).warning(
            "log_dir_unavailable",
            log_dir=str(settings.log_dir),
            error=str(dir_error),
            fallback="console only",
        )
