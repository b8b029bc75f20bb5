"""
Core PyQt6 utilities.

Timer and thread helpers with no table-specific logic.
"""

from .debounce import DebounceTimer, DebouncedValue
from .background_task import HandlerThread, SingleTaskRunner

__all__ = [
    "DebounceTimer",
    "DebouncedValue",
    "HandlerThread",
    "SingleTaskRunner",
]
