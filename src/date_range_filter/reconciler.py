"""Reconciliation of the range selection across its three representations.

The reconciler owns the canonical ``RangeSelection``. Every notification from
the date inputs, the preset selector or the persisted state goes through it;
it decides the new canonical value, pushes it into the other representations
with silent writes, persists it and, when the filter materially changed,
requests a search run. Within one reconciliation adapter writes happen before
the persisted write, which happens before the run request.
"""

from typing import Any

from .adapters import InputAdapter, PersistenceAdapter, PresetAdapter
from .dates import UNSET, date_from_timestamp, parse_input, timestamp_from_date
from .filters import build_breadcrumb, compile_expression, summarize
from .logging import get_logger
from .models import EMPTY_SELECTION, ActionCause, Breadcrumb, RangeSelection
from .search import SearchPipeline

logger = get_logger(__name__)


class Reconciler:
    """Single update path for the canonical range selection."""

    def __init__(
        self,
        from_input: InputAdapter,
        to_input: InputAdapter,
        persistence: PersistenceAdapter,
        search: SearchPipeline,
        *,
        presets: PresetAdapter | None = None,
        field_from: str = "@sysdate",
        field_to: str = "@sysdate",
        title: str = "NoTitle",
        from_label: str = "From",
        to_label: str = "To",
    ):
        """Wire the adapters and restore the persisted selection.

        Args:
            from_input: Lower-bound input
            to_input: Upper-bound input
            persistence: Persisted, shareable selection
            search: Pipeline receiving the filter expression and run requests
            presets: Quick-select control, None when presets are disabled
            field_from: Field bounded by the lower bound
            field_to: Field bounded by the upper bound
            title: Filter title shown in the breadcrumb
            from_label: Summary label of the lower bound
            to_label: Summary label of the upper bound
        """
        self.from_input = from_input
        self.to_input = to_input
        self.persistence = persistence
        self.search = search
        self.presets = presets
        self.field_from = field_from
        self.field_to = field_to
        self.title = title
        self.from_label = from_label
        self.to_label = to_label
        self._selection = EMPTY_SELECTION

        from_input.on_change(self.handle_input_change)
        to_input.on_change(self.handle_input_change)
        if presets is not None:
            presets.on_select(self.handle_preset_select)
        persistence.subscribe(self.handle_state_change)
        search.register_expression_builder(self.build_expression)

        # A rebuilt widget picks up whatever the store already holds
        self.handle_state_change(persistence.get())

    @property
    def selection(self) -> RangeSelection:
        return self._selection

    @property
    def has_empty_state(self) -> bool:
        return self._selection.is_empty

    @property
    def is_active(self) -> bool:
        """Whether either input shows a value (eraser visible)."""
        return bool(self.from_input.get_value() + self.to_input.get_value())

    def build_expression(self) -> str | None:
        return compile_expression(self._selection, self.field_from, self.field_to)

    def summary(self) -> str | None:
        return summarize(
            self._selection,
            self.from_label,
            self.to_label,
            from_display=self.from_input.get_display_value,
            to_display=self.to_input.get_display_value,
        )

    def populate_breadcrumb(self) -> Breadcrumb | None:
        return build_breadcrumb(self.title, self.summary())

    # Inbound notifications
    def handle_input_change(self) -> None:
        """A user edited the "from" or "to" input."""
        if self.presets is not None:
            self.presets.reset(silent=True)

        new = RangeSelection(
            from_=parse_input(self.from_input.get_value()),
            to=parse_input(self.to_input.get_value()),
        )
        old = self._selection
        execute_query = new.from_ != old.from_ or new.to != old.to
        logger.info(
            "input_change",
            range=str(new),
            previous=str(old),
            execute_query=execute_query,
        )
        self._commit(new, ActionCause.INPUT_CHANGE, execute_query)

    def handle_preset_select(self, index: int) -> None:
        """A user picked a preset."""
        if index == UNSET:
            return
        if self.presets is None or not self.presets.is_valid(index):
            logger.warning("unknown_preset_ignored", index=index)
            return

        start, end = self.presets.resolve_range(index)
        new = RangeSelection(
            from_=timestamp_from_date(start),
            to=timestamp_from_date(end),
            preset=index,
        )
        logger.info("radio_select", index=index, range=str(new))

        self.from_input.set_value(start, silent=True)
        self.to_input.set_value(end, silent=True)
        self.presets.set_selected_index(index)
        self._commit(new, ActionCause.RADIO_SELECT, True)

    def handle_state_change(self, value: dict[str, Any]) -> None:
        """The persisted selection changed outside the reconciler.

        Each field is validated on its own and falls back to UNSET. The result
        is pushed silently into the inputs and presets; no run is requested
        since the navigation that changed the state runs its own query.
        """
        new = RangeSelection.from_serialized(value, self._is_valid_preset)
        if new != self._selection:
            logger.info("query_state_changed", range=str(new), preset=new.preset)
        self._selection = new
        self._push_to_adapters()

    def handle_query_success(self) -> None:
        """Re-sync the controls with the canonical selection after a query."""
        self._push_to_adapters()

    def handle_clear_breadcrumb(self) -> None:
        """An upstream "clear all filters" already runs the query."""
        self.reset(execute_query=False)

    def reset(self, execute_query: bool = True) -> None:
        """Clear every representation of the selection.

        Args:
            execute_query: Whether to request a search run afterwards
        """
        self.from_input.reset(silent=True)
        self.to_input.reset(silent=True)
        if self.presets is not None:
            self.presets.reset(silent=True)
        logger.info("reset", execute_query=execute_query)
        self._commit(EMPTY_SELECTION, ActionCause.CLEAR, execute_query)

    # Internals
    def _is_valid_preset(self, index: int) -> bool:
        return self.presets is not None and self.presets.is_valid(index)

    def _push_to_adapters(self) -> None:
        for bound, control in ((self._selection.from_, self.from_input), (self._selection.to, self.to_input)):
            if bound == UNSET:
                control.reset(silent=True)
            else:
                control.set_value(date_from_timestamp(bound), silent=True)

        if self.presets is not None:
            if self._selection.has_preset:
                self.presets.set_selected_index(self._selection.preset)
            else:
                self.presets.reset(silent=True)

    def _commit(self, new: RangeSelection, cause: ActionCause, execute_query: bool) -> None:
        self._selection = new
        self.persistence.set(new.to_serialized(), silent=True)
        if execute_query:
            self.search.request_query_run(cause)
