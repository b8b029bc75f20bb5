"""
Widget ABC contracts for table filter controls.

Every filter kind (select, boolean, text, date) is rendered by a different Qt
widget with its own API (currentData vs isChecked vs text vs date). The
header talks to all of them through these contracts instead of sniffing for
attributes. A missing method fails at instantiation, not at first use.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable


class ValueGettable(ABC):
    """ABC for controls that can report the filter value they hold."""

    @abstractmethod
    def get_value(self) -> Any:
        """
        Get the current filter value from the control.

        Returns:
            The control's value in the filter's semantic type. None if unset.
        """
        pass


class ValueSettable(ABC):
    """ABC for controls that can display a filter value pushed from the store."""

    @abstractmethod
    def set_value(self, value: Any) -> None:
        """
        Set the control's value without emitting a change.

        Args:
            value: The value to display. None resets the control.
        """
        pass


class ChangeSignalEmitter(ABC):
    """
    ABC for controls that report user edits.

    Hides the difference between textChanged, stateChanged, dateChanged and
    currentIndexChanged behind one callback contract.
    """

    @abstractmethod
    def connect_change_signal(self, callback: Callable[[Any], None]) -> None:
        """
        Connect callback to the control's change signal.

        Args:
            callback: Called with the new value whenever the user edits it.
        """
        pass
