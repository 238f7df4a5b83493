"""Render loosely-typed JSON query results as Markdown tables.

Query results come back in whatever shape the server felt like producing, so
the shape is decided at read time:

- OBJECT_ROWS: a list of objects; columns are the union of their keys
- ARRAY_ROWS: a list of lists; the first row may be a header
- SCALAR_LIST: anything else in a list; a single ``value`` column
- NOT_TABULAR: not a list at all; summarized instead of tabulated

Rendering never raises. Every input produces some text.
"""

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any

from .summary import summarize_body

EMPTY_RESULT = "_(empty result)_"
VALUE_COLUMN = "value"


class TableShape(str, Enum):
    OBJECT_ROWS = "object_rows"
    ARRAY_ROWS = "array_rows"
    SCALAR_LIST = "scalar_list"
    NOT_TABULAR = "not_tabular"


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def classify_shape(value: Any) -> TableShape:
    """Classify a value; the first matching shape wins."""
    if not _is_sequence(value):
        return TableShape.NOT_TABULAR
    if value and all(isinstance(row, Mapping) for row in value):
        return TableShape.OBJECT_ROWS
    if value and all(_is_sequence(row) for row in value):
        return TableShape.ARRAY_ROWS
    return TableShape.SCALAR_LIST


def stringify_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return json.dumps(value)
    try:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return str(value)


def escape_cell(text: str) -> str:
    """Keep a cell on one table row: escape pipes and turn newlines into <br>."""
    return text.replace("|", "\\|").replace("\r\n", "\n").replace("\n", "<br>")


def format_cell(value: Any) -> str:
    return escape_cell(stringify_cell(value))


def _format_row(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def _build_table(headers: list[str], rows: list[list[str]]) -> str:
    lines = [_format_row(headers), _format_row(["---"] * len(headers))]
    lines.extend(_format_row(row) for row in rows)
    return "\n".join(lines)


def _object_rows_table(rows: list[Mapping]) -> str:
    columns: list[str] = []
    seen: set[str] = set()
    for row in rows:
        for key in row.keys():
            name = str(key)
            if name not in seen:
                seen.add(name)
                columns.append(name)

    if not columns:
        columns = [VALUE_COLUMN]

    body = []
    for row in rows:
        by_name = {str(key): cell for key, cell in row.items()}
        body.append([format_cell(by_name.get(column)) for column in columns])
    return _build_table([escape_cell(column) for column in columns], body)


def _has_header_row(rows: list) -> bool:
    if len(rows) < 2:
        return False
    first, second = rows[0], rows[1]
    return len(first) > 0 and len(first) == len(second) and all(isinstance(cell, str) for cell in first)


def _array_rows_table(rows: list) -> str:
    max_len = max(len(row) for row in rows)

    if _has_header_row(rows):
        headers = [escape_cell(cell) for cell in rows[0]]
        data = rows[1:]
    else:
        headers = [f"col{i}" for i in range(1, max(max_len, 1) + 1)]
        data = rows

    width = len(headers)
    body = []
    for row in data:
        cells = [format_cell(cell) for cell in list(row)[:width]]
        cells.extend([""] * (width - len(cells)))
        body.append(cells)
    return _build_table(headers, body)


def _scalar_list_table(values: list) -> str:
    return _build_table([VALUE_COLUMN], [[format_cell(value)] for value in values])


def render_table(value: Any) -> str:
    """Render a query result as a Markdown table, or a diagnostic string."""
    try:
        shape = classify_shape(value)
        if shape == TableShape.NOT_TABULAR:
            return f"Query returned a non-tabular result: {summarize_body(value)}"
        if len(value) == 0:
            return EMPTY_RESULT
        if shape == TableShape.OBJECT_ROWS:
            return _object_rows_table(list(value))
        if shape == TableShape.ARRAY_ROWS:
            return _array_rows_table(list(value))
        return _scalar_list_table(list(value))
    except Exception as e:
        # Last resort so a pathological value never turns into a tool failure
        try:
            summary = summarize_body(value)
        except Exception:
            summary = "Received non-serializable object body."
        return f"Query result could not be rendered ({type(e).__name__}): {summary}"
