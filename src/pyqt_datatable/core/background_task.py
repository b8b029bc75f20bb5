"""Worker-thread execution for bulk-action handlers."""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from PyQt6.QtCore import QThread, pyqtSignal
from PyQt6.QtWidgets import QPushButton

logger = logging.getLogger(__name__)

# --- Module-level constants ---
SHUTDOWN_WAIT_MS = 200     # Grace period for a running handler when the table closes


class HandlerThread(QThread):
    """
    Runs one callable off the GUI thread.

    ``succeeded`` carries the return value and ``failed`` the raised
    exception object; both are delivered to the GUI thread through queued
    connections. After ``discard`` neither is emitted.
    """

    succeeded = pyqtSignal(object)
    failed = pyqtSignal(Exception)

    def __init__(self, target: Callable[..., Any], args: Tuple = (), kwargs: Optional[Dict] = None, parent=None):
        super().__init__(parent)
        self._call = (target, args, kwargs or {})
        self.discarded = False

    def run(self):
        target, args, kwargs = self._call
        try:
            value = target(*args, **kwargs)
        except Exception as e:
            if not self.discarded:
                self.failed.emit(e)
            return
        if not self.discarded:
            self.succeeded.emit(value)

    def discard(self):
        self.discarded = True


class SingleTaskRunner:
    """
    At most one HandlerThread per widget.

    A ``start`` while a thread is running is refused (returns None); it
    never cancels the running one. An optional button is locked with a
    busy label for the duration and unlocked before callbacks run.

    Usage in widget:
        self._runner = SingleTaskRunner()

        def on_action_clicked(self):
            self._runner.start(run_handler, args=(action, rows),
                               on_success=self._on_done, on_error=self._on_failed,
                               button=self.action_button)

        def closeEvent(self, event):
            self._runner.shutdown()
            super().closeEvent(event)
    """

    def __init__(self):
        self._thread: Optional[HandlerThread] = None

    @property
    def busy(self) -> bool:
        return self._thread is not None and self._thread.isRunning()

    def start(
        self,
        target: Callable[..., Any],
        args: Tuple = (),
        kwargs: Optional[Dict] = None,
        on_success: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        button: Optional[QPushButton] = None,
        busy_text: Optional[str] = None,
    ) -> Optional[HandlerThread]:
        """
        Start ``target`` on a worker thread.

        Returns:
            The started thread, or None when another one is still running
        """
        if self.busy:
            logger.warning("Refusing to start a handler while another is running")
            return None

        unlock = self._lock(button, busy_text)

        def done(value):
            unlock()
            if on_success is not None:
                on_success(value)

        def crashed(error):
            unlock()
            if on_error is not None:
                on_error(error)

        thread = HandlerThread(target, args, kwargs)
        thread.succeeded.connect(done)
        thread.failed.connect(crashed)
        self._thread = thread
        thread.start()
        return thread

    def wait(self, timeout_ms: int = -1) -> bool:
        """Block until the running handler returns. False on timeout."""
        if self._thread is None:
            return True
        return self._thread.wait() if timeout_ms < 0 else self._thread.wait(timeout_ms)

    def shutdown(self):
        """Discard the running handler's outcome and drop the thread."""
        if self.busy:
            self._thread.discard()
            self._thread.wait(SHUTDOWN_WAIT_MS)
        self._thread = None

    @staticmethod
    def _lock(button: Optional[QPushButton], busy_text: Optional[str]) -> Callable[[], None]:
        if button is None:
            return lambda: None
        label = button.text()
        button.setEnabled(False)
        button.setText(busy_text or f"{label}...")

        def unlock():
            button.setEnabled(True)
            button.setText(label)
        return unlock
