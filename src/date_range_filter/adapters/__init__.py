"""Adapter interfaces between the reconciler and its three representations.

Each representation (date inputs, preset selector, persisted state) is wrapped
by an adapter implementing one of the protocols below. Writes made by the
reconciler use the ``silent`` variants so they never come back as user events.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import date
from typing import Any, Protocol, runtime_checkable

ChangeListener = Callable[[], None]
SelectListener = Callable[[int], None]
StateListener = Callable[[dict[str, Any]], None]


class AdapterUnavailableError(RuntimeError):
    """An adapter cannot serve a read (e.g. the control is not rendered)."""


class DateOutOfRangeError(ValueError):
    """A user pick outside the control's selectable years."""


class UnknownPresetError(ValueError):
    """A user pick of an index outside the preset list."""


@runtime_checkable
class InputAdapter(Protocol):
    """Protocol for a single date-entry control ("from" or "to")."""

    def get_value(self) -> str:
        """Current value in query form (``YYYY-MM-DD``), or "" when empty."""
        ...

    def get_display_value(self) -> str:
        """Text the control currently shows.

        Raises:
            AdapterUnavailableError: If the control cannot be read
        """
        ...

    def set_value(self, value: date, silent: bool = True) -> None:
        """Show ``value``; ``silent`` suppresses the change notification."""
        ...

    def reset(self, silent: bool = False) -> None:
        """Clear the control."""
        ...

    def on_change(self, listener: ChangeListener) -> None:
        """Register the user-change listener."""
        ...


@runtime_checkable
class PresetAdapter(Protocol):
    """Protocol for the quick-select control."""

    def get_selected_index(self) -> int:
        """Highlighted preset index, or UNSET."""
        ...

    def set_selected_index(self, index: int) -> None:
        """Highlight ``index`` without notifying."""
        ...

    def reset(self, silent: bool = False) -> None:
        """Clear the highlight."""
        ...

    def is_valid(self, index: int) -> bool:
        """Check that ``index`` names a known preset."""
        ...

    def resolve_range(self, index: int) -> tuple[date, date]:
        """Concrete inclusive ``(from, to)`` dates of a preset."""
        ...

    def on_select(self, listener: SelectListener) -> None:
        """Register the user-selection listener."""
        ...


@runtime_checkable
class PersistenceAdapter(Protocol):
    """Protocol for the persisted, shareable selection."""

    def get(self) -> dict[str, Any]:
        """Current serialized selection."""
        ...

    def set(self, value: dict[str, Any], silent: bool = False) -> None:
        """Store ``value``; ``silent`` skips this adapter's own subscriber."""
        ...

    def subscribe(self, listener: StateListener) -> None:
        """Register a listener fired on every change of the stored value."""
        ...


class BaseInputAdapter(ABC):
    """Listener bookkeeping shared by input controls."""

    def __init__(self) -> None:
        self._listeners: list[ChangeListener] = []

    def on_change(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    @abstractmethod
    def get_value(self) -> str:
        pass

    @abstractmethod
    def get_display_value(self) -> str:
        pass

    @abstractmethod
    def set_value(self, value: date, silent: bool = True) -> None:
        pass

    @abstractmethod
    def reset(self, silent: bool = False) -> None:
        pass


class BasePresetAdapter(ABC):
    """Listener bookkeeping shared by preset controls."""

    def __init__(self) -> None:
        self._listeners: list[SelectListener] = []

    def on_select(self, listener: SelectListener) -> None:
        self._listeners.append(listener)

    def _notify(self, index: int) -> None:
        for listener in list(self._listeners):
            listener(index)

    @abstractmethod
    def get_selected_index(self) -> int:
        pass

    @abstractmethod
    def set_selected_index(self, index: int) -> None:
        pass

    @abstractmethod
    def reset(self, silent: bool = False) -> None:
        pass

    @abstractmethod
    def is_valid(self, index: int) -> bool:
        pass

    @abstractmethod
    def resolve_range(self, index: int) -> tuple[date, date]:
        pass


# Re-export adapter implementations
from .date_input import DateInput
from .persistence import PersistedRange
from .presets import Preset, PresetSelector, default_presets

__all__ = [
    "AdapterUnavailableError",
    "DateOutOfRangeError",
    "UnknownPresetError",
    "InputAdapter",
    "PresetAdapter",
    "PersistenceAdapter",
    "BaseInputAdapter",
    "BasePresetAdapter",
    "DateInput",
    "PersistedRange",
    "Preset",
    "PresetSelector",
    "default_presets",
]
