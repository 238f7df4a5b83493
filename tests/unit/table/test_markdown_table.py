from unittest.mock import patch

import pytest

from iris_mcp.table import EMPTY_RESULT
from iris_mcp.table import TableShape
from iris_mcp.table import classify_shape
from iris_mcp.table import escape_cell
from iris_mcp.table import render_table
from iris_mcp.table import stringify_cell


@pytest.mark.parametrize(
    "value,expected",
    [
        ([{"a": 1}, {"b": 2}], TableShape.OBJECT_ROWS),
        ([[1, 2], (3, 4)], TableShape.ARRAY_ROWS),
        ([1, "two", None], TableShape.SCALAR_LIST),
        ([{"a": 1}, [1]], TableShape.SCALAR_LIST),
        ([[1], "x"], TableShape.SCALAR_LIST),
        ({"a": 1}, TableShape.NOT_TABULAR),
        ("a string", TableShape.NOT_TABULAR),
        (42, TableShape.NOT_TABULAR),
        (None, TableShape.NOT_TABULAR),
    ],
)
def test_classify_shape(value, expected):
    assert classify_shape(value) == expected


def test_object_rows_union_of_keys_in_first_seen_order():
    rows = [{"a": 1, "b": "x"}, {"b": "y", "c": None}, {"d": True, "a": 2}]
    assert render_table(rows) == (
        "| a | b | c | d |\n"
        "| --- | --- | --- | --- |\n"
        "| 1 | x |  |  |\n"
        "|  | y |  |  |\n"
        "| 2 |  |  | true |"
    )


def test_object_rows_one_body_row_per_element():
    rows = [{"id": i} for i in range(5)]
    lines = render_table(rows).split("\n")
    assert lines[0] == "| id |"
    assert lines[1] == "| --- |"
    assert len(lines) == 2 + len(rows)


def test_object_rows_without_keys_use_value_column():
    assert render_table([{}, {}]) == "| value |\n| --- |\n|  |\n|  |"


def test_array_rows_with_inferred_header():
    rows = [["id", "name"], [1, "alpha"], [2]]
    assert render_table(rows) == "| id | name |\n| --- | --- |\n| 1 | alpha |\n| 2 |  |"


def test_array_rows_header_truncates_longer_rows():
    rows = [["a", "b"], [1, 2], [3, 4, 5]]
    assert render_table(rows) == "| a | b |\n| --- | --- |\n| 1 | 2 |\n| 3 | 4 |"


def test_array_rows_synthesized_header_when_first_row_not_all_strings():
    rows = [[1, 2], [3]]
    assert render_table(rows) == "| col1 | col2 |\n| --- | --- |\n| 1 | 2 |\n| 3 |  |"


def test_array_rows_synthesized_header_when_lengths_differ():
    rows = [["a", "b"], [1, 2, 3]]
    assert render_table(rows) == "| col1 | col2 | col3 |\n| --- | --- | --- |\n| a | b |  |\n| 1 | 2 | 3 |"


def test_array_rows_single_row_is_data():
    assert render_table([["a", "b"]]) == "| col1 | col2 |\n| --- | --- |\n| a | b |"


def test_array_rows_all_empty():
    assert render_table([[], []]) == "| col1 |\n| --- |\n|  |\n|  |"


def test_scalar_list():
    assert render_table([1, "two", None, True, 1.5]) == "| value |\n| --- |\n| 1 |\n| two |\n|  |\n| true |\n| 1.5 |"


def test_mixed_list_falls_back_to_value_column():
    assert render_table([{"a": 1}, [1, 2]]) == '| value |\n| --- |\n| {"a":1} |\n| [1,2] |'


def test_empty_list():
    assert render_table([]) == EMPTY_RESULT == "_(empty result)_"


@pytest.mark.parametrize("value", [None, {"a": 1}, "text", "", 3, 2.5, False, object()])
def test_non_tabular_never_raises_and_is_not_empty(value):
    text = render_table(value)
    assert isinstance(text, str)
    assert text
    assert text.startswith("Query returned a non-tabular result: ")


def test_non_tabular_includes_summary():
    assert render_table({"version": "2024.1"}) == "Query returned a non-tabular result: version=2024.1"


def test_cell_with_pipe_and_newline_stays_on_one_row():
    text = render_table([{"c": "a|b\nc"}])
    assert text == "| c |\n| --- |\n| a\\|b<br>c |"
    assert len(text.split("\n")) == 3


def test_header_cells_are_escaped():
    assert render_table([{"a|b": 1}]).split("\n")[0] == "| a\\|b |"


def test_escape_cell_normalizes_crlf():
    assert escape_cell("x\r\ny\nz") == "x<br>y<br>z"
    assert escape_cell("plain") == "plain"


def test_stringify_cell():
    assert stringify_cell(None) == ""
    assert stringify_cell("s") == "s"
    assert stringify_cell(True) == "true"
    assert stringify_cell(False) == "false"
    assert stringify_cell(10) == "10"
    assert stringify_cell(0.25) == "0.25"
    assert stringify_cell({"x": [1, 2]}) == '{"x":[1,2]}'
    assert stringify_cell({1, 2}) == str({1, 2})


def test_nested_value_in_cell_is_json():
    assert render_table([{"tags": ["a", "b"]}]) == '| tags |\n| --- |\n| ["a","b"] |'


def _deeply_nested(depth=100_000):
    value = []
    for _ in range(depth):
        value = [value]
    return value


def test_deeply_nested_value_is_reported_not_raised():
    text = render_table(_deeply_nested())
    assert text == "Query result could not be rendered (RecursionError): Received non-serializable object body."


def test_failing_summary_in_last_resort_branch_is_contained():
    with patch("iris_mcp.table.markdown_table.summarize_body", side_effect=RuntimeError("boom")):
        text = render_table({"a": 1})
    assert text == "Query result could not be rendered (RuntimeError): Received non-serializable object body."
