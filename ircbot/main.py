"""Main entry point for ircbot.

Initializes logging in two phases (defaults then config-driven),
builds the Bot with the standard help command, and runs the IRC
reactor until interrupted.

Key functions:
    main: Sets up logging and config, then runs the bot.
    run: Console-script wrapper that maps failures to exit codes.
"""

import sys

import structlog

from .logging_config import setup_logging


def main() -> int:
    """Main entry point. Returns a process exit code."""
    # Phase 1: defaults, cache_logger_on_first_use=False
    setup_logging()
    logger = structlog.get_logger("ircbot")

    logger.info("ircbot_starting", version="0.1.0")

    # Import here to ensure logging is configured first
    from .bot import Bot
    from .config import get_config
    from .exceptions import ConfigurationError, TransportError

    config = get_config()
    config.validate()

    # Phase 2: reconfigure with real config, cache_logger_on_first_use=True
    setup_logging(config)

    try:
        bot = Bot(config.bot_settings())
    except ConfigurationError as e:
        logger.error("config_error", setting=e.setting_name, **e.log_fields())
        return 1

    bot.add_standard_help_command()

    try:
        bot.run()
    except TransportError as e:
        logger.error("transport_error", **e.log_fields())
        return 1
    finally:
        logger.info("ircbot_stopped")
    return 0


def run():
    """Synchronous entry point for the ``ircbot`` console script."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
