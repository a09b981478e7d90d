"""Search pipeline the filter contributes to.

Components register an expression builder, called each time a query is
assembled. Run requests are fire-and-forget: the controller assembles the
advanced expression and hands it to its runner.
"""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

from .logging import get_logger
from .models import ActionCause, SearchRequest

logger = get_logger(__name__)

ExpressionBuilder = Callable[[], str | None]
QueryRunner = Callable[[SearchRequest], None]


@runtime_checkable
class SearchPipeline(Protocol):
    """What the reconciler needs from the search pipeline."""

    def register_expression_builder(self, builder: ExpressionBuilder) -> None:
        """Register a callback supplying a filter expression at query time."""
        ...

    def request_query_run(self, cause: ActionCause) -> None:
        """Ask for a new query run; never blocks on the result."""
        ...


def _log_runner(request: SearchRequest) -> None:
    logger.info("query_executed", cause=request.cause.value, expression=request.expression)


class QueryController:
    """Minimal in-process search pipeline."""

    def __init__(self, runner: QueryRunner | None = None):
        """Initialize the controller.

        Args:
            runner: Receives each assembled request; defaults to logging it
        """
        self.runner = runner or _log_runner
        self._builders: list[ExpressionBuilder] = []
        self.history: list[SearchRequest] = []

    def register_expression_builder(self, builder: ExpressionBuilder) -> None:
        self._builders.append(builder)

    def build_advanced_expression(self) -> str | None:
        """Combine all builder expressions; None when no filter applies."""
        parts = [expr for expr in (builder() for builder in self._builders) if expr]
        if not parts:
            return None
        if len(parts) == 1:
            return parts[0]
        return " AND ".join(f"({part})" for part in parts)

    def request_query_run(self, cause: ActionCause) -> None:
        request = SearchRequest(cause=cause, expression=self.build_advanced_expression())
        logger.info("query_requested", cause=cause.value, expression=request.expression)
        self.history.append(request)
        self.runner(request)

    @property
    def run_count(self) -> int:
        return len(self.history)
