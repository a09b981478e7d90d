"""Pydantic data models for the date range filter.

The canonical selection, its persisted form and the records the filter hands
to its collaborators (breadcrumbs, search requests).
"""

from collections.abc import Callable, Mapping
from datetime import date
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .dates import UNSET, coerce_number, date_from_timestamp, is_valid_timestamp
from .logging import get_logger

logger = get_logger(__name__)


class ActionCause(StrEnum):
    """Why a search run was requested."""

    CLEAR = "facetRangeClear"
    RADIO_SELECT = "facetRangeRadioSelect"
    INPUT_CHANGE = "facetRangeInputChange"


class RangeSelection(BaseModel):
    """The canonical range value.

    Each field is either a concrete value or ``UNSET`` (-1). ``from_`` and
    ``to`` are inclusive bounds in ms since the epoch; ``preset`` indexes the
    ordered preset list and only drives the highlight state.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: int = Field(default=UNSET, alias="from", description="Inclusive lower bound (ms)")
    to: int = Field(default=UNSET, description="Inclusive upper bound (ms)")
    preset: int = Field(default=UNSET, description="Active preset index")

    @property
    def has_from(self) -> bool:
        return self.from_ != UNSET

    @property
    def has_to(self) -> bool:
        return self.to != UNSET

    @property
    def has_preset(self) -> bool:
        return self.preset != UNSET

    @property
    def is_empty(self) -> bool:
        """No bound is set (a preset marker alone does not filter anything)."""
        return not self.has_from and not self.has_to

    @property
    def from_date(self) -> date | None:
        return date_from_timestamp(self.from_) if self.has_from else None

    @property
    def to_date(self) -> date | None:
        return date_from_timestamp(self.to) if self.has_to else None

    def to_serialized(self) -> dict[str, int]:
        """Persisted form: ``{"from", "to", "radio"}`` with -1 for unset."""
        return {"from": self.from_, "to": self.to, "radio": self.preset}

    @classmethod
    def from_serialized(
        cls,
        raw: Mapping[str, Any] | None,
        is_valid_preset: Callable[[int], bool] = lambda index: False,
    ) -> "RangeSelection":
        """Parse a persisted value, degrading each malformed field to UNSET.

        Args:
            raw: Persisted mapping, possibly from an untrusted source (URL)
            is_valid_preset: Predicate for known preset indices

        Returns:
            A well-formed selection
        """
        if not isinstance(raw, Mapping):
            if raw is not None:
                logger.warning("malformed_persisted_state", value=repr(raw))
            return cls()

        from_ = coerce_number(raw.get("from"))
        to = coerce_number(raw.get("to"))
        preset = coerce_number(raw.get("radio"))

        if from_ is None or not is_valid_timestamp(from_):
            from_ = UNSET
        if to is None or not is_valid_timestamp(to):
            to = UNSET
        if preset is None or not is_valid_preset(preset):
            preset = UNSET

        return cls(from_=from_, to=to, preset=preset)

    def __str__(self) -> str:
        return f"{self.from_}-{self.to}"


EMPTY_SELECTION = RangeSelection()


class Breadcrumb(BaseModel):
    """Summary entry the breadcrumb UI shows for an active filter."""

    title: str = Field(description="Filter title")
    caption: str = Field(description="Human-readable range summary")

    @property
    def text(self) -> str:
        return f"{self.title}: {self.caption}"


class SearchRequest(BaseModel):
    """A search run requested by the filter."""

    cause: ActionCause = Field(description="Action that triggered the run")
    expression: str | None = Field(default=None, description="Advanced expression at run time")
