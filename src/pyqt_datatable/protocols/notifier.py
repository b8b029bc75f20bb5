"""Notification hook for user-facing toasts.

The table never presents notices itself. Hosts register a notifier that
shows them (status bar, toast overlay, message box); the default one logs.
"""

import logging
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Protocol for presenting short user-facing notices."""

    def info(self, message: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Fallback notifier that routes notices to the log."""

    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)

    def error(self, message: str) -> None:
        logger.error(message)


_notifier: Optional[Notifier] = None


def register_notifier(notifier: Optional[Notifier]) -> None:
    """Register the global notifier. Pass None to restore the logging fallback."""
    global _notifier
    _notifier = notifier


def get_notifier() -> Notifier:
    """Get the registered notifier, or a LoggingNotifier if none is set."""
    if _notifier is None:
        return LoggingNotifier()
    return _notifier
