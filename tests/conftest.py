"""Shared fixtures for the range filter tests."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

import pytest

from date_range_filter.adapters import DateInput, PersistedRange, PresetSelector
from date_range_filter.reconciler import Reconciler
from date_range_filter.search import QueryController, QueryRunner
from date_range_filter.store import QueryStateModel

# Wednesday
TODAY = date(2024, 1, 10)

JAN_1 = 1704067200000
JAN_31 = 1706659200000
DAY_MS = 86_400_000


@dataclass
class Harness:
    """A reconciler wired to in-memory adapters."""

    from_input: DateInput
    to_input: DateInput
    presets: PresetSelector
    store: QueryStateModel
    persistence: PersistedRange
    search: QueryController
    reconciler: Reconciler


def build_harness(
    store: QueryStateModel | None = None,
    filter_id: str = "@sysdate",
    runner: QueryRunner | None = None,
) -> Harness:
    store = store if store is not None else QueryStateModel()
    from_input = DateInput(f"{filter_id}-start", today=lambda: TODAY)
    to_input = DateInput(f"{filter_id}-end", today=lambda: TODAY)
    presets = PresetSelector(today=lambda: TODAY)
    persistence = PersistedRange(store, filter_id)
    search = QueryController(runner or (lambda request: None))
    reconciler = Reconciler(
        from_input,
        to_input,
        persistence,
        search,
        presets=presets,
        field_from="field_from",
        field_to="field_to",
        title="Date",
    )
    return Harness(from_input, to_input, presets, store, persistence, search, reconciler)


@pytest.fixture
def harness() -> Harness:
    return build_harness()
