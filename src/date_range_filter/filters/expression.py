"""Filter expression for a range selection."""

from ..dates import date_for_query
from ..models import RangeSelection


def compile_expression(selection: RangeSelection, field_from: str, field_to: str) -> str | None:
    """Compile a selection into a conjunctive filter expression.

    Args:
        selection: Canonical selection
        field_from: Field bounded from below by ``selection.from_``
        field_to: Field bounded from above by ``selection.to``

    Returns:
        ``"<field_from> >= <date> AND <field_to> <= <date>"`` (either clause
        omitted when its bound is unset), or None for the empty selection
    """
    if selection.is_empty:
        return None

    clauses = []
    if selection.has_from:
        clauses.append(f"{field_from} >= {date_for_query(selection.from_)}")
    if selection.has_to:
        clauses.append(f"{field_to} <= {date_for_query(selection.to)}")
    return " AND ".join(clauses)
