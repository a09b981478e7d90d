"""Quick-select presets (Today, This Week, Last Week, This Month).

Presets are mutually exclusive. Picking one resolves it to a concrete
inclusive date range relative to "today"; after that the index only drives
which button is highlighted.
"""

import calendar
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from ..dates import UNSET
from ..logging import get_logger
from . import BasePresetAdapter, UnknownPresetError

logger = get_logger(__name__)

RangeResolver = Callable[[date, int], tuple[date, date]]


@dataclass(frozen=True)
class Preset:
    """A named quick-select option."""

    key: str
    caption: str
    resolve: RangeResolver


def _week_start(today: date, first_day: int) -> date:
    # first_day follows the calendar widget convention: 0 = Sunday
    sunday_based = (today.weekday() + 1) % 7
    return today - timedelta(days=(sunday_based - first_day) % 7)


def resolve_today(today: date, first_day: int) -> tuple[date, date]:
    return today, today


def resolve_this_week(today: date, first_day: int) -> tuple[date, date]:
    start = _week_start(today, first_day)
    return start, start + timedelta(days=6)


def resolve_last_week(today: date, first_day: int) -> tuple[date, date]:
    start = _week_start(today, first_day) - timedelta(days=7)
    return start, start + timedelta(days=6)


def resolve_this_month(today: date, first_day: int) -> tuple[date, date]:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def default_presets(captions: Sequence[str] | None = None) -> list[Preset]:
    """Build the standard presets, optionally with localized captions."""
    today_caption, this_week, last_week, this_month = captions or (
        "Today",
        "This Week",
        "Last Week",
        "This Month",
    )
    return [
        Preset("today", today_caption, resolve_today),
        Preset("thisweek", this_week, resolve_this_week),
        Preset("lastweek", last_week, resolve_last_week),
        Preset("thismonth", this_month, resolve_this_month),
    ]


class PresetSelector(BasePresetAdapter):
    """Mutually-exclusive preset buttons."""

    def __init__(
        self,
        presets: Sequence[Preset] | None = None,
        *,
        first_day: int = 0,
        today: Callable[[], date] = date.today,
    ):
        """Initialize the selector.

        Args:
            presets: Ordered presets; defaults to ``default_presets()``
            first_day: First day of the week, 0 = Sunday
            today: Clock the presets resolve against
        """
        super().__init__()
        self.presets = list(presets) if presets is not None else default_presets()
        self.first_day = first_day
        self._today = today
        self._selected = UNSET

    @property
    def captions(self) -> list[str]:
        return [preset.caption for preset in self.presets]

    def index_of(self, key: str) -> int:
        """Index of the preset with ``key``.

        Raises:
            UnknownPresetError: If no preset has that key
        """
        for index, preset in enumerate(self.presets):
            if preset.key == key:
                return index
        raise UnknownPresetError(f"Unknown preset: {key}")

    def is_valid(self, index: int) -> bool:
        return 0 <= index < len(self.presets)

    def resolve_range(self, index: int) -> tuple[date, date]:
        if not self.is_valid(index):
            raise UnknownPresetError(f"Unknown preset index: {index}")
        return self.presets[index].resolve(self._today(), self.first_day)

    def get_selected_index(self) -> int:
        return self._selected

    def set_selected_index(self, index: int) -> None:
        self._selected = index if self.is_valid(index) else UNSET

    def select(self, index: int) -> None:
        """User pick of a preset button.

        Raises:
            UnknownPresetError: If ``index`` is not a known preset
        """
        if not self.is_valid(index):
            raise UnknownPresetError(f"Unknown preset index: {index}")
        logger.debug("preset_selected", index=index, preset=self.presets[index].key)
        self._selected = index
        self._notify(index)

    def reset(self, silent: bool = False) -> None:
        self._selected = UNSET
        if not silent:
            self._notify(UNSET)
