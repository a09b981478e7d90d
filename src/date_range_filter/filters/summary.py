"""Human-readable summary of a selection for the breadcrumb trail.

The text reuses what each input currently shows rather than re-deriving it
from the timestamp, so it matches the control's display format. When an
input cannot be read the bound falls back to its query date.
"""

from collections.abc import Callable

from ..adapters import AdapterUnavailableError
from ..dates import date_for_query
from ..logging import get_logger
from ..models import Breadcrumb, RangeSelection

logger = get_logger(__name__)

SEPARATOR = " - "

DisplayReader = Callable[[], str]


def _bound_text(timestamp: int, read_display: DisplayReader | None, bound: str) -> str:
    if read_display is not None:
        try:
            displayed = read_display()
        except AdapterUnavailableError as e:
            logger.warning("summary_fallback", bound=bound, error=str(e))
        else:
            if displayed:
                return displayed
            logger.warning("summary_fallback", bound=bound, error="empty display value")
    return date_for_query(timestamp)


def summarize(
    selection: RangeSelection,
    from_label: str = "From",
    to_label: str = "To",
    from_display: DisplayReader | None = None,
    to_display: DisplayReader | None = None,
) -> str | None:
    """Summarize a selection, e.g. ``"from 2024-01-01 - to 2024-01-31"``.

    Args:
        selection: Canonical selection
        from_label: Label of the lower bound (lowercased in the text)
        to_label: Label of the upper bound (lowercased in the text)
        from_display: Reader of the "from" input's displayed text
        to_display: Reader of the "to" input's displayed text

    Returns:
        Summary text, or None for the empty selection
    """
    if selection.is_empty:
        return None

    parts = []
    if selection.has_from:
        parts.append(f"{from_label.lower()} {_bound_text(selection.from_, from_display, 'from')}")
    if selection.has_to:
        parts.append(f"{to_label.lower()} {_bound_text(selection.to, to_display, 'to')}")
    return SEPARATOR.join(parts)


def build_breadcrumb(title: str, caption: str | None) -> Breadcrumb | None:
    """Breadcrumb entry for a summary, or None when there is nothing to show."""
    if caption is None:
        return None
    return Breadcrumb(title=title, caption=caption)
