"""pytest configuration and fixtures for pyqt-datatable tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication

from pyqt_datatable.protocols import register_notifier, set_table_config


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def reset_globals():
    """Restore the global notifier and table config after each test."""
    yield
    register_notifier(None)
    set_table_config(None)


class RecordingNotifier:
    """Notifier that remembers every notice."""

    def __init__(self):
        self.notices = []

    def info(self, message: str) -> None:
        self.notices.append(("info", message))

    def warning(self, message: str) -> None:
        self.notices.append(("warning", message))

    def error(self, message: str) -> None:
        self.notices.append(("error", message))

    def messages(self, level: str):
        return [message for notice_level, message in self.notices if notice_level == level]


@pytest.fixture
def notifier():
    return RecordingNotifier()


def _make_rows(count: int, start: int = 1):
    return [{"_id": f"row-{i}", "name": f"Item {i}", "price": i * 10} for i in range(start, start + count)]


@pytest.fixture
def make_rows():
    """Factory for dict rows keyed by ``_id``."""
    return _make_rows


@pytest.fixture
def rows():
    return _make_rows(5)
