"""Tests for the reconciler: the single update path of the range selection."""

from __future__ import annotations

from datetime import date
from typing import Any

from conftest import DAY_MS, JAN_1, JAN_31, Harness, build_harness

from date_range_filter.adapters import DateInput, PersistedRange
from date_range_filter.dates import UNSET, timestamp_from_date
from date_range_filter.models import ActionCause, RangeSelection, SearchRequest
from date_range_filter.reconciler import Reconciler
from date_range_filter.search import QueryController
from date_range_filter.store import QueryStateModel

THIS_WEEK = 1
THIS_WEEK_FROM = JAN_1 + 6 * DAY_MS  # Sunday 2024-01-07
THIS_WEEK_TO = JAN_1 + 12 * DAY_MS  # Saturday 2024-01-13


def causes(h: Harness) -> list[ActionCause]:
    return [request.cause for request in h.search.history]


class TestInitialState:
    """Tests for a freshly constructed reconciler."""

    def test_starts_empty(self, harness: Harness) -> None:
        assert harness.reconciler.selection == RangeSelection()
        assert harness.reconciler.has_empty_state
        assert not harness.reconciler.is_active
        assert harness.search.history == []

    def test_registers_expression_builder(self, harness: Harness) -> None:
        assert harness.search.build_advanced_expression() is None

    def test_restores_persisted_selection(self) -> None:
        store = QueryStateModel()
        PersistedRange(store, "@sysdate").set({"from": JAN_1, "to": JAN_31, "radio": THIS_WEEK})

        h = build_harness(store)
        assert h.reconciler.selection == RangeSelection(from_=JAN_1, to=JAN_31, preset=THIS_WEEK)
        assert h.from_input.get_value() == "2024-01-01"
        assert h.to_input.get_value() == "2024-01-31"
        assert h.presets.get_selected_index() == THIS_WEEK
        assert h.search.history == []


class TestInputChange:
    """Tests for user edits of the inputs."""

    def test_edit_from_requests_one_run(self, harness: Harness) -> None:
        harness.from_input.select(date(2024, 1, 1))

        assert harness.reconciler.selection == RangeSelection(from_=JAN_1)
        assert causes(harness) == [ActionCause.INPUT_CHANGE]
        assert harness.persistence.get() == {"from": JAN_1, "to": UNSET, "radio": UNSET}

    def test_edit_both_bounds_compiles_expression(self, harness: Harness) -> None:
        harness.from_input.select(date(2024, 1, 1))
        harness.to_input.select(date(2024, 1, 31))

        assert harness.reconciler.build_expression() == (
            "field_from >= 2024-01-01 AND field_to <= 2024-01-31"
        )
        assert harness.search.run_count == 2
        assert harness.search.history[-1].expression == (
            "field_from >= 2024-01-01 AND field_to <= 2024-01-31"
        )

    def test_same_value_does_not_rerun(self, harness: Harness) -> None:
        harness.from_input.select(date(2024, 1, 1))
        harness.from_input.select(date(2024, 1, 1))
        assert harness.search.run_count == 1

    def test_clearing_last_bound_reruns(self, harness: Harness) -> None:
        harness.to_input.select(date(2024, 1, 31))
        harness.to_input.clear()

        assert harness.reconciler.has_empty_state
        assert harness.search.run_count == 2
        assert harness.search.history[-1].expression is None

    def test_clearing_already_empty_does_not_run(self, harness: Harness) -> None:
        harness.from_input.clear()
        assert harness.search.run_count == 0

    def test_edit_after_preset_clears_preset(self, harness: Harness) -> None:
        harness.presets.select(THIS_WEEK)
        harness.to_input.select(date(2024, 1, 31))

        selection = harness.reconciler.selection
        assert selection == RangeSelection(from_=THIS_WEEK_FROM, to=JAN_31)
        assert selection.preset == UNSET
        assert harness.presets.get_selected_index() == UNSET
        assert harness.persistence.get()["radio"] == UNSET

    def test_edit_matching_preset_range_still_clears_preset(self, harness: Harness) -> None:
        """Bounds unchanged: no run, but the preset marker is dropped."""
        harness.presets.select(THIS_WEEK)
        harness.from_input.select(date(2024, 1, 7))

        assert harness.reconciler.selection == RangeSelection(from_=THIS_WEEK_FROM, to=THIS_WEEK_TO)
        assert causes(harness) == [ActionCause.RADIO_SELECT]
        assert harness.persistence.get() == {"from": THIS_WEEK_FROM, "to": THIS_WEEK_TO, "radio": UNSET}


class TestPresetSelect:
    """Tests for user preset picks."""

    def test_preset_sets_bounds_and_marker(self, harness: Harness) -> None:
        harness.presets.select(THIS_WEEK)

        assert harness.reconciler.selection == RangeSelection(
            from_=THIS_WEEK_FROM, to=THIS_WEEK_TO, preset=THIS_WEEK
        )
        assert harness.from_input.get_value() == "2024-01-07"
        assert harness.to_input.get_value() == "2024-01-13"
        assert causes(harness) == [ActionCause.RADIO_SELECT]

    def test_preset_always_runs(self, harness: Harness) -> None:
        harness.presets.select(THIS_WEEK)
        harness.presets.select(THIS_WEEK)
        assert harness.search.run_count == 2

    def test_scenario_edit_then_preset(self, harness: Harness) -> None:
        """Each user action yields exactly one search run."""
        harness.from_input.select(date(2024, 1, 1))
        assert harness.search.run_count == 1
        harness.to_input.select(date(2024, 1, 31))
        assert harness.search.run_count == 2
        assert harness.reconciler.build_expression() == (
            "field_from >= 2024-01-01 AND field_to <= 2024-01-31"
        )

        harness.presets.select(THIS_WEEK)
        assert harness.search.run_count == 3
        assert harness.reconciler.selection.preset == THIS_WEEK
        assert harness.reconciler.build_expression() == (
            "field_from >= 2024-01-07 AND field_to <= 2024-01-13"
        )

    def test_non_silent_preset_reset_is_ignored(self, harness: Harness) -> None:
        harness.presets.select(THIS_WEEK)
        harness.presets.reset()
        assert harness.reconciler.selection.preset == THIS_WEEK
        assert harness.search.run_count == 1

    def test_invalid_index_notification_is_ignored(self, harness: Harness) -> None:
        harness.reconciler.handle_preset_select(42)
        assert harness.reconciler.has_empty_state
        assert harness.search.run_count == 0


class TestExternalStateChange:
    """Tests for persisted state changes from outside (navigation)."""

    def test_pushes_into_adapters_without_running(self, harness: Harness) -> None:
        inputs_changed: list[str] = []
        harness.from_input.on_change(lambda: inputs_changed.append("from"))
        harness.to_input.on_change(lambda: inputs_changed.append("to"))

        harness.store.set(harness.persistence.attribute, {"from": JAN_1, "to": JAN_31, "radio": 2})

        assert harness.reconciler.selection == RangeSelection(from_=JAN_1, to=JAN_31, preset=2)
        assert harness.from_input.get_value() == "2024-01-01"
        assert harness.to_input.get_value() == "2024-01-31"
        assert harness.presets.get_selected_index() == 2
        assert inputs_changed == []
        assert harness.search.run_count == 0

    def test_early_year_bound_survives_edit_of_other_bound(self, harness: Harness) -> None:
        early = timestamp_from_date(date(500, 3, 4))
        harness.store.set(harness.persistence.attribute, {"from": early, "to": UNSET, "radio": UNSET})
        assert harness.from_input.get_value() == "0500-03-04"

        harness.to_input.select(date(2024, 1, 31))

        assert harness.reconciler.selection == RangeSelection(from_=early, to=JAN_31)
        assert harness.reconciler.build_expression() == (
            "field_from >= 0500-03-04 AND field_to <= 2024-01-31"
        )
        assert harness.persistence.get()["from"] == early

    def test_same_value_twice_is_idempotent(self, harness: Harness) -> None:
        value = {"from": JAN_1, "to": JAN_31, "radio": -1}
        harness.reconciler.handle_state_change(value)
        selection = harness.reconciler.selection
        harness.reconciler.handle_state_change(value)

        assert harness.reconciler.selection == selection
        assert harness.search.run_count == 0

    def test_malformed_value_degrades_to_unset(self, harness: Harness) -> None:
        harness.from_input.select(date(2024, 1, 1))
        harness.store.set(harness.persistence.attribute, {"from": "not-a-date", "to": -1, "radio": 99})

        assert harness.reconciler.selection == RangeSelection()
        assert harness.from_input.get_value() == ""
        assert harness.presets.get_selected_index() == UNSET

    def test_unset_fields_reset_inputs(self, harness: Harness) -> None:
        harness.presets.select(THIS_WEEK)
        harness.store.set(harness.persistence.attribute, {"from": JAN_1, "to": -1, "radio": -1})

        assert harness.from_input.get_value() == "2024-01-01"
        assert harness.to_input.get_value() == ""
        assert harness.presets.get_selected_index() == UNSET

    def test_navigation_via_fragment(self, harness: Harness) -> None:
        harness.from_input.select(date(2024, 1, 1))
        fragment = harness.store.to_fragment()
        harness.reconciler.reset()

        harness.store.apply_fragment(fragment)
        assert harness.reconciler.selection == RangeSelection(from_=JAN_1)
        assert causes(harness) == [ActionCause.INPUT_CHANGE, ActionCause.CLEAR]

    def test_own_writes_do_not_reenter(self) -> None:
        """One user action produces exactly one persisted write."""
        store = QueryStateModel()
        h = build_harness(store)
        writes: list[Any] = []
        store.subscribe(h.persistence.attribute, writes.append)
        state_changes: list[Any] = []
        h.persistence.subscribe(state_changes.append)

        h.from_input.select(date(2024, 1, 1))
        h.presets.select(THIS_WEEK)
        h.reconciler.reset()

        assert len(writes) == 3
        assert state_changes == []
        assert h.search.run_count == 3


class TestReset:
    """Tests for explicit and breadcrumb resets."""

    def test_reset_clears_everything(self, harness: Harness) -> None:
        harness.presets.select(THIS_WEEK)
        harness.reconciler.reset()

        assert harness.reconciler.has_empty_state
        assert harness.reconciler.selection == RangeSelection()
        assert harness.from_input.get_value() == ""
        assert harness.to_input.get_value() == ""
        assert harness.presets.get_selected_index() == UNSET
        assert harness.persistence.get() == {"from": -1, "to": -1, "radio": -1}
        assert causes(harness) == [ActionCause.RADIO_SELECT, ActionCause.CLEAR]

    def test_reset_from_empty_state(self, harness: Harness) -> None:
        harness.reconciler.reset()
        assert harness.reconciler.has_empty_state
        assert causes(harness) == [ActionCause.CLEAR]

    def test_reset_without_query(self, harness: Harness) -> None:
        harness.from_input.select(date(2024, 1, 1))
        harness.reconciler.reset(execute_query=False)
        assert harness.reconciler.has_empty_state
        assert harness.search.run_count == 1

    def test_breadcrumb_clear_does_not_run(self, harness: Harness) -> None:
        harness.to_input.select(date(2024, 1, 31))
        harness.reconciler.handle_clear_breadcrumb()
        assert harness.reconciler.has_empty_state
        assert harness.to_input.get_value() == ""
        assert harness.search.run_count == 1


class TestOrdering:
    """Adapter writes, then the persisted write, then the run request."""

    def test_pipeline_observes_written_state(self) -> None:
        observed: list[tuple[Any, str, str, str | None]] = []
        holder: dict[str, Harness] = {}

        def runner(request: SearchRequest) -> None:
            h = holder["h"]
            observed.append(
                (h.persistence.get(), h.from_input.get_value(), h.to_input.get_value(), request.expression)
            )

        h = build_harness(runner=runner)
        holder["h"] = h
        h.presets.select(THIS_WEEK)

        assert observed == [
            (
                {"from": THIS_WEEK_FROM, "to": THIS_WEEK_TO, "radio": THIS_WEEK},
                "2024-01-07",
                "2024-01-13",
                "field_from >= 2024-01-07 AND field_to <= 2024-01-13",
            )
        ]


class TestDerivedViews:
    """Tests for the active flag, summary and breadcrumb."""

    def test_is_active_follows_inputs(self, harness: Harness) -> None:
        harness.to_input.select(date(2024, 1, 31))
        assert harness.reconciler.is_active
        harness.reconciler.reset()
        assert not harness.reconciler.is_active

    def test_breadcrumb_uses_displayed_text(self) -> None:
        store = QueryStateModel()
        from_input = DateInput("start", display_format="DD/MM/YYYY", today=lambda: date(2024, 1, 10))
        to_input = DateInput("end", display_format="DD/MM/YYYY", today=lambda: date(2024, 1, 10))
        reconciler = Reconciler(
            from_input,
            to_input,
            PersistedRange(store, "f"),
            QueryController(lambda request: None),
            title="Published",
        )
        from_input.select(date(2024, 1, 1))
        to_input.select(date(2024, 1, 31))

        breadcrumb = reconciler.populate_breadcrumb()
        assert breadcrumb is not None
        assert breadcrumb.text == "Published: from 01/01/2024 - to 31/01/2024"

    def test_breadcrumb_falls_back_when_not_rendered(self, harness: Harness) -> None:
        harness.reconciler.handle_state_change({"from": JAN_1, "to": JAN_31, "radio": -1})
        harness.from_input.rendered = False

        assert harness.reconciler.summary() == "from 2024-01-01 - to 2024-01-31"

    def test_no_breadcrumb_for_empty_state(self, harness: Harness) -> None:
        assert harness.reconciler.populate_breadcrumb() is None
        assert harness.reconciler.summary() is None

    def test_query_success_resyncs_controls(self, harness: Harness) -> None:
        harness.presets.select(THIS_WEEK)
        harness.from_input.reset(silent=True)
        harness.presets.reset(silent=True)

        harness.reconciler.handle_query_success()
        assert harness.from_input.get_value() == "2024-01-07"
        assert harness.presets.get_selected_index() == THIS_WEEK
        assert harness.search.run_count == 1


class TestWithoutPresets:
    """Tests for a reconciler whose presets are disabled."""

    def test_persisted_preset_is_dropped(self) -> None:
        store = QueryStateModel()
        reconciler = Reconciler(
            DateInput("start"),
            DateInput("end"),
            PersistedRange(store, "f"),
            QueryController(lambda request: None),
        )
        reconciler.handle_state_change({"from": JAN_1, "to": -1, "radio": 1})
        assert reconciler.selection == RangeSelection(from_=JAN_1)
