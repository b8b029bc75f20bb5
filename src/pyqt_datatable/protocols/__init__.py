"""
Widget protocol definitions and host integration hooks.

ABC-based widget contracts for filter controls, plus the registries a host
application uses to plug in notifications and table defaults.
"""

from .widget_protocols import (
    ValueGettable,
    ValueSettable,
    ChangeSignalEmitter,
)
from .notifier import Notifier, LoggingNotifier, register_notifier, get_notifier
from .table_config import TableConfig, set_table_config, get_table_config

__all__ = [
    "ValueGettable",
    "ValueSettable",
    "ChangeSignalEmitter",
    "Notifier",
    "LoggingNotifier",
    "register_notifier",
    "get_notifier",
    "TableConfig",
    "set_table_config",
    "get_table_config",
]
