"""Date range picker: builds the controls from settings and wires them together.

Coordinates:
1. Two date inputs ("start" and "end")
2. The preset selector (when enabled)
3. The persisted state attribute in the shared store
4. The reconciler, registered with the search pipeline
"""

from collections.abc import Callable
from datetime import date

from .adapters import (
    DateInput,
    PersistedRange,
    PresetSelector,
    UnknownPresetError,
    default_presets,
)
from .config import Settings, get_settings
from .logging import get_logger
from .models import Breadcrumb, RangeSelection
from .reconciler import Reconciler
from .search import QueryController, SearchPipeline
from .store import QueryStateModel

logger = get_logger(__name__)


class DateRangePicker:
    """A date range filter bound to a state store and a search pipeline."""

    def __init__(
        self,
        settings: Settings | None = None,
        store: QueryStateModel | None = None,
        search: SearchPipeline | None = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize the picker.

        Args:
            settings: Optional settings override
            store: Shared state store; a private in-memory one by default
            search: Search pipeline; a logging ``QueryController`` by default
            today: Clock for presets and the selectable year window
        """
        self.settings = settings or get_settings()
        self.store = store if store is not None else QueryStateModel()
        self.search = search if search is not None else QueryController()

        self.from_input = self._build_input("start", today)
        self.to_input = self._build_input("end", today)

        self.presets: PresetSelector | None = None
        if self.settings.enable_presets:
            self.presets = PresetSelector(
                default_presets(self.settings.preset_captions),
                first_day=self.settings.first_day,
                today=today,
            )

        self.persistence = PersistedRange(self.store, self.settings.filter_id)
        self.reconciler = Reconciler(
            self.from_input,
            self.to_input,
            self.persistence,
            self.search,
            presets=self.presets,
            field_from=self.settings.field_from,
            field_to=self.settings.field_to,
            title=self.settings.title,
            from_label=self.settings.from_label,
            to_label=self.settings.to_label,
        )

        logger.info(
            "picker_initialized",
            filter_id=self.settings.filter_id,
            presets=self.presets.captions if self.presets else [],
            restored=str(self.reconciler.selection),
        )

    def _build_input(self, extra: str, today: Callable[[], date]) -> DateInput:
        return DateInput(
            f"{self.settings.filter_id}-{extra}",
            display_format=self.settings.display_format,
            placeholder=self.settings.input_placeholder,
            years_back=self.settings.years_back,
            years_ahead=self.settings.years_ahead,
            today=today,
        )

    @property
    def selection(self) -> RangeSelection:
        return self.reconciler.selection

    @property
    def expression(self) -> str | None:
        return self.reconciler.build_expression()

    def breadcrumb(self) -> Breadcrumb | None:
        return self.reconciler.populate_breadcrumb()

    def edit(self, start: date | None, end: date | None) -> None:
        """Apply a user edit of both inputs as one change.

        ``None`` clears a bound. The inputs are written silently and a single
        change notification follows.
        """
        for control, value in ((self.from_input, start), (self.to_input, end)):
            if value is None:
                control.reset(silent=True)
            else:
                control.check_selectable(value)
                control.set_value(value, silent=True)
        self.reconciler.handle_input_change()

    def select_preset(self, index: int) -> None:
        """Apply a user pick of a preset.

        Raises:
            UnknownPresetError: If presets are disabled or the index is unknown
        """
        if self.presets is None:
            raise UnknownPresetError("Presets are disabled for this filter")
        self.presets.select(index)

    def reset(self, execute_query: bool = True) -> None:
        self.reconciler.reset(execute_query=execute_query)
