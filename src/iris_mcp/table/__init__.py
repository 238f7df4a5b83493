"""Normalization of query results into Markdown tables."""

from .markdown_table import EMPTY_RESULT
from .markdown_table import TableShape
from .markdown_table import classify_shape
from .markdown_table import escape_cell
from .markdown_table import render_table
from .markdown_table import stringify_cell
from .summary import extract_query_content
from .summary import summarize_body

__all__ = [
    "EMPTY_RESULT",
    "TableShape",
    "classify_shape",
    "escape_cell",
    "extract_query_content",
    "render_table",
    "stringify_cell",
    "summarize_body",
]
