"""Exceptions raised by ircbot.

Two things can go wrong outside a command handler: the settings are
unusable (ConfigurationError, fatal at construction) or the IRC
connection fails (TransportError, logged and never retried here).
Both carry a category and free-form context so log lines can say what
kind of failure it was without inspecting the exception type.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(str, Enum):
    """What kind of failure an error represents."""
    TRANSIENT = "transient"            # Network trouble; a later connect may work
    PERMANENT = "permanent"            # Same input fails the same way
    INFRASTRUCTURE = "infrastructure"  # Settings or environment need fixing


class IrcBotError(Exception):
    """Base exception for ircbot.

    Attributes:
        message: Human-readable error description.
        category: Failure classification.
        module: Subsystem that raised it ("config", "transport").
        context: Extra key-value pairs for log lines.
    """

    def __init__(
        self,
        message: str = "",
        *,
        category: ErrorCategory = ErrorCategory.PERMANENT,
        module: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.message = message
        self.category = category
        self.module = module
        self.context = context
        super().__init__(message)

    def log_fields(self) -> Dict[str, Any]:
        """Keyword arguments for a structlog call describing this error."""
        return {
            "error": self.message or type(self).__name__,
            "category": self.category.value,
            "module": self.module,
            **self.context,
        }

    def __str__(self) -> str:
        text = self.message or type(self).__name__
        if self.context:
            details = ", ".join(f"{k}={v}" for k, v in self.context.items())
            text = f"{text} ({details})"
        return text


class ConfigurationError(IrcBotError):
    """Settings are missing or unusable.

    Attributes:
        setting_name: The offending setting (e.g. "nick"), if known.
    """

    def __init__(
        self,
        message: str = "",
        *,
        setting_name: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.setting_name = setting_name
        super().__init__(
            message,
            category=ErrorCategory.INFRASTRUCTURE,
            module="config",
            **context,
        )


class TransportError(IrcBotError):
    """The IRC connection failed or the server reported an error.

    Attributes:
        host: Server the transport was talking to (if known).
    """

    def __init__(
        self,
        message: str = "",
        *,
        host: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.host = host
        super().__init__(
            message,
            category=ErrorCategory.TRANSIENT,
            module="transport",
            host=host,
            **context,
        )
