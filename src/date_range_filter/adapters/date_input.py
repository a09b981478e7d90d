"""In-memory date-entry control.

Models the state a calendar input keeps: the picked date, a "was reset" flag
(a cleared control reports no value even though the calendar may still hold
its last date) and the selectable year window.
"""

from collections.abc import Callable
from datetime import date

from ..dates import format_display
from ..logging import get_logger
from . import AdapterUnavailableError, BaseInputAdapter, DateOutOfRangeError

logger = get_logger(__name__)


class DateInput(BaseInputAdapter):
    """One bound of the range ("from" or "to")."""

    def __init__(
        self,
        name: str,
        *,
        display_format: str = "YYYY-MM-DD",
        placeholder: str = "",
        years_back: int = 100,
        years_ahead: int = 0,
        today: Callable[[], date] = date.today,
        rendered: bool = True,
    ):
        """Initialize the control.

        Args:
            name: Element id, e.g. "@sysdate-start"
            display_format: Moment-style format of the shown text
            placeholder: Text shown while empty
            years_back: Selectable years before the current one
            years_ahead: Selectable years after the current one
            today: Clock used for the selectable year window
            rendered: Whether the control is mounted and readable
        """
        super().__init__()
        self.name = name
        self.display_format = display_format
        self.placeholder = placeholder
        self.years_back = abs(years_back)
        self.years_ahead = abs(years_ahead)
        self.rendered = rendered
        self._today = today
        self._date: date | None = None
        self._was_reset = True

    @property
    def year_range(self) -> tuple[int, int]:
        year = self._today().year
        return year - self.years_back, year + self.years_ahead

    @property
    def selected_date(self) -> date | None:
        """Picked date, or None if the control was reset."""
        return None if self._was_reset else self._date

    def get_value(self) -> str:
        current = self.selected_date
        return current.isoformat() if current else ""

    def get_display_value(self) -> str:
        if not self.rendered:
            raise AdapterUnavailableError(f"input {self.name!r} is not rendered")
        current = self.selected_date
        return format_display(current, self.display_format) if current else ""

    def set_value(self, value: date, silent: bool = True) -> None:
        self._date = value
        self._was_reset = False
        if not silent:
            self._notify()

    def check_selectable(self, value: date) -> None:
        """Raise DateOutOfRangeError if the calendar cannot offer ``value``."""
        low, high = self.year_range
        if not low <= value.year <= high:
            raise DateOutOfRangeError(
                f"{value.isoformat()} is outside the selectable years {low}-{high}"
            )

    def select(self, value: date) -> None:
        """User pick from the calendar.

        Raises:
            DateOutOfRangeError: If the year is outside the selectable window
        """
        self.check_selectable(value)
        logger.debug("input_selected", input=self.name, value=value.isoformat())
        self.set_value(value, silent=False)

    def clear(self) -> None:
        """User cleared the field."""
        self.reset(silent=False)

    def reset(self, silent: bool = False) -> None:
        self._date = None
        self._was_reset = True
        if not silent:
            self._notify()
