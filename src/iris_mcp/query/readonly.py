"""Read-only guard for SQL sent through the query tool.

IRIS SQL is not parsed here; the check is lexical. A query passes when it is a
single statement whose first keyword is SELECT or WITH.
"""

import re

ALLOWED_KEYWORDS = ("SELECT", "WITH")

# One left-to-right scan: whichever literal or comment starts first wins, so a
# quote inside a comment (or "--" inside a string) is not misread.
_LITERAL_OR_COMMENT = re.compile(
    r"'(?:[^']|'')*'"
    r'|"(?:[^"]|"")*"'
    r"|--[^\n]*"
    r"|/\*.*?\*/",
    re.DOTALL,
)
_FIRST_WORD = re.compile(r"[A-Za-z_]+")


class ReadOnlyViolation(ValueError):
    """Raised when a query could modify data or contains several statements."""


def _strip_literals_and_comments(query: str) -> str:
    return _LITERAL_OR_COMMENT.sub(lambda m: "''" if m.group(0)[0] in "'\"" else " ", query)


def check_readonly(query: str) -> str:
    """
    Validate that ``query`` is a single read-only statement.

    Returns:
        The query with surrounding whitespace and trailing semicolons removed.

    Raises:
        ReadOnlyViolation: if the query is empty, has several statements, or
        does not start with an allowed keyword.
    """
    cleaned = query.strip().rstrip(";").strip()
    if not cleaned:
        raise ReadOnlyViolation("query must not be empty")

    bare = _strip_literals_and_comments(cleaned).strip().rstrip(";").strip()
    if ";" in bare:
        raise ReadOnlyViolation("Only a single SQL statement is allowed")

    match = _FIRST_WORD.match(bare.lstrip("( \t\r\n"))
    keyword = match.group(0).upper() if match else ""
    if keyword not in ALLOWED_KEYWORDS:
        raise ReadOnlyViolation(
            f"Only read-only queries are allowed (statement must start with {' or '.join(ALLOWED_KEYWORDS)}), got: {keyword or 'nothing'}"
        )
    return cleaned
