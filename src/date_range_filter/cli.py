"""date-range-filter CLI using Typer.

Commands operate on the persisted filter state at ``state_path``:
- show: Current selection, filter expression, breadcrumb and URL fragment
- edit: Edit the "from"/"to" inputs
- preset: Pick a quick-select preset
- reset: Clear the filter
- navigate: Apply a URL fragment, as browser navigation would
- presets: List the presets and their current ranges
- expression: Compile a range without touching the stored state
"""

from datetime import date
from typing import Annotated

import typer

from .adapters import DateOutOfRangeError, UnknownPresetError
from .config import get_settings
from .dates import UNSET, timestamp_from_date
from .filters import compile_expression
from .logging import configure_logging, get_logger
from .models import RangeSelection
from .picker import DateRangePicker
from .store import SqliteStateStore

app = typer.Typer(
    name="date-range-filter",
    help="Inspect and drive a persisted date range filter.",
    add_completion=False,
)


def parse_date(value: str) -> date:
    """Parse a date string in YYYY-MM-DD format."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid date format: {value}. Use YYYY-MM-DD.")


def _open_picker() -> DateRangePicker:
    settings = get_settings()
    return DateRangePicker(settings, store=SqliteStateStore(settings.state_path))


def _echo_state(picker: DateRangePicker) -> None:
    selection = picker.selection
    typer.echo(f"From: {selection.from_date or '-'}")
    typer.echo(f"To: {selection.to_date or '-'}")
    if selection.has_preset and picker.presets is not None:
        typer.echo(f"Preset: {picker.presets.captions[selection.preset]}")
    typer.echo(f"Expression: {picker.expression or '(none)'}")
    breadcrumb = picker.breadcrumb()
    typer.echo(f"Breadcrumb: {breadcrumb.text if breadcrumb else '(none)'}")
    typer.echo(f"Fragment: #{picker.store.to_fragment()}")


def _echo_runs(picker: DateRangePicker, before: int) -> None:
    runs = picker.search.history[before:]
    if runs:
        for request in runs:
            typer.echo(f"Search run requested ({request.cause.value})")
    else:
        typer.echo("No search run requested")


@app.callback()
def main_options(
    log_level: Annotated[str, typer.Option("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")] = "WARNING",
    log_format: Annotated[str, typer.Option("--log-format", help="Log format (console, json)")] = "console",
) -> None:
    """Configure logging for every command."""
    configure_logging(level=log_level, format=log_format)


@app.command()
def show() -> None:
    """Show the persisted selection."""
    _echo_state(_open_picker())


@app.command()
def edit(
    start: Annotated[str | None, typer.Option("--from", "-f", help="Lower bound (YYYY-MM-DD, '' clears)")] = None,
    end: Annotated[str | None, typer.Option("--to", "-t", help="Upper bound (YYYY-MM-DD, '' clears)")] = None,
) -> None:
    """Edit the "from"/"to" inputs; omitted bounds keep their value.

    Example:
        date-range-filter edit --from 2024-01-01 --to 2024-01-31
    """
    picker = _open_picker()
    current = picker.selection

    try:
        new_start = current.from_date if start is None else (parse_date(start) if start else None)
        new_end = current.to_date if end is None else (parse_date(end) if end else None)
    except typer.BadParameter as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if new_start and new_end and new_start > new_end:
        typer.echo("Error: --from must not be after --to", err=True)
        raise typer.Exit(1)

    before = len(picker.search.history)
    try:
        picker.edit(new_start, new_end)
    except DateOutOfRangeError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    _echo_runs(picker, before)
    _echo_state(picker)


@app.command()
def preset(
    index: Annotated[int, typer.Argument(help="Preset index (see 'presets')")],
) -> None:
    """Pick a quick-select preset."""
    picker = _open_picker()
    before = len(picker.search.history)
    try:
        picker.select_preset(index)
    except UnknownPresetError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    _echo_runs(picker, before)
    _echo_state(picker)


@app.command()
def reset(
    no_query: Annotated[bool, typer.Option("--no-query", help="Do not request a search run")] = False,
) -> None:
    """Clear the filter."""
    picker = _open_picker()
    before = len(picker.search.history)
    picker.reset(execute_query=not no_query)
    _echo_runs(picker, before)
    _echo_state(picker)


@app.command()
def navigate(
    fragment: Annotated[str, typer.Argument(help="URL fragment, e.g. '#@sysdate:rangePicker=...'")],
) -> None:
    """Apply a URL fragment as back/forward navigation would."""
    picker = _open_picker()
    changed = picker.store.apply_fragment(fragment)
    get_logger(__name__).info("navigated", changed=changed)
    typer.echo(f"Changed attributes: {', '.join(changed) if changed else '(none)'}")
    _echo_state(picker)


@app.command()
def presets() -> None:
    """List the quick-select presets."""
    picker = DateRangePicker(get_settings())
    if picker.presets is None:
        typer.echo("Presets are disabled (set DATE_RANGE_ENABLE_PRESETS=true)")
        raise typer.Exit(1)

    for i, caption in enumerate(picker.presets.captions):
        start, end = picker.presets.resolve_range(i)
        typer.echo(f"{i}. {caption}: {start} to {end}")


@app.command()
def expression(
    start: Annotated[str | None, typer.Option("--from", "-f", help="Lower bound (YYYY-MM-DD)")] = None,
    end: Annotated[str | None, typer.Option("--to", "-t", help="Upper bound (YYYY-MM-DD)")] = None,
    field_from: Annotated[str | None, typer.Option("--field-from", help="Field for the lower bound")] = None,
    field_to: Annotated[str | None, typer.Option("--field-to", help="Field for the upper bound")] = None,
) -> None:
    """Compile a range into a filter expression."""
    settings = get_settings()
    try:
        selection = RangeSelection(
            from_=timestamp_from_date(parse_date(start)) if start else UNSET,
            to=timestamp_from_date(parse_date(end)) if end else UNSET,
        )
    except typer.BadParameter as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    result = compile_expression(
        selection,
        field_from or settings.field_from,
        field_to or settings.field_to,
    )
    typer.echo(result or "(none)")


def main() -> None:
    """CLI entry point."""
    app()
