"""Derived views of a selection: the filter expression and the summary text.

Both are pure functions of the canonical selection.
"""

from .expression import compile_expression
from .summary import SEPARATOR, build_breadcrumb, summarize

__all__ = [
    "compile_expression",
    "summarize",
    "build_breadcrumb",
    "SEPARATOR",
]
