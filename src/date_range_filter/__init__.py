"""date_range_filter - Reconciled date range filter for search UIs.

Keeps a "from"/"to" range selection consistent across the date inputs, the
quick-select presets and a persisted, shareable state store, and derives the
search filter expression and breadcrumb text from it.
"""

from .cli import main
from .models import RangeSelection
from .picker import DateRangePicker
from .reconciler import Reconciler

__all__ = ["main", "DateRangePicker", "RangeSelection", "Reconciler"]
