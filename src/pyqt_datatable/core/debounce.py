"""Trailing debounce timer and debounced value holder."""

import logging
from typing import Any, Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

logger = logging.getLogger(__name__)


class DebounceTimer:
    """
    Trailing debounce around one single-shot QTimer.

    Every ``trigger`` restarts the countdown, so ``handler`` runs once,
    ``delay_ms`` after the last trigger of a burst.
    """

    def __init__(self, delay_ms: int, handler: Callable[[], None]):
        self._handler = handler
        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.setInterval(delay_ms)
        self._timer.timeout.connect(handler)

    @property
    def delay_ms(self) -> int:
        return self._timer.interval()

    @property
    def is_pending(self) -> bool:
        return self._timer.isActive()

    def trigger(self):
        self._timer.start()

    def cancel(self):
        self._timer.stop()

    def force(self):
        """Run the handler now, dropping the pending countdown."""
        self._timer.stop()
        self._handler()


class DebouncedValue(QObject):
    """
    Value that follows its input only after the input has been stable.

    Each ``set`` supersedes the previous pending value; when ``delay_ms``
    passes without another ``set``, the last value becomes current and
    ``value_changed`` is emitted (only if it actually differs).

    Usage:
        self._search = DebouncedValue("", delay_ms=500)
        self._search.value_changed.connect(self._refresh)
        search_input.textChanged.connect(self._search.set)
    """

    value_changed = pyqtSignal(object)

    def __init__(self, initial: Any = None, delay_ms: int = 500, parent=None):
        super().__init__(parent)
        self._value = initial
        self._pending = initial
        self._timer = DebounceTimer(delay_ms, self._apply)

    @property
    def value(self) -> Any:
        return self._value

    @property
    def is_pending(self) -> bool:
        return self._timer.is_pending

    def set(self, value: Any):
        """Schedule ``value`` to become current after the quiet period."""
        self._pending = value
        if value == self._value:
            # Reverting to the current value needs no propagation
            self._timer.cancel()
            return
        self._timer.trigger()

    def flush(self):
        """Apply a pending value now."""
        if self._timer.is_pending:
            self._timer.force()

    def reset(self, value: Any):
        """Set the value immediately, dropping anything pending."""
        self._timer.cancel()
        self._pending = value
        self._apply()

    def _apply(self):
        if self._pending == self._value:
            return
        self._value = self._pending
        logger.debug(f"Debounced value settled: {self._value!r}")
        self.value_changed.emit(self._value)
