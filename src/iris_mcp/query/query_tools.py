"""Read-only SQL execution through the Atelier query action."""

import logging
from typing import Any

import httpx
import mcp.types as types
from pydantic import Field

from ..client import AtelierClient
from ..client import describe_http_error
from ..table import extract_query_content
from ..table import render_table
from .readonly import ReadOnlyViolation
from .readonly import check_readonly

logger = logging.getLogger(__name__)

ResponseType = list[types.TextContent | types.ImageContent | types.EmbeddedResource]


def format_text_response(text: Any) -> ResponseType:
    """Format a text response."""
    return [types.TextContent(type="text", text=str(text))]


def format_error_response(error: str) -> ResponseType:
    """Format an error response."""
    return format_text_response(f"Error: {error}")


async def execute_sql(
    query: str = Field(description="Read-only SQL query (SELECT or WITH)"),
    namespace: str | None = Field(description="IRIS namespace (defaults to IRIS_NAMESPACE)", default=None),
    client: AtelierClient | None = None,
) -> ResponseType:
    """
    Execute a read-only SQL query and return the rows as a Markdown table.

    Examples:
        - query='SELECT TOP 10 Name FROM %Dictionary.ClassDefinition'
        - query="SELECT Name, Super FROM %Dictionary.ClassDefinition WHERE Name %STARTSWITH 'Pkg.'"

    Returns:
        A Markdown table, '_(empty result)_', or a summary of a non-tabular result
    """
    try:
        if not client:
            raise ValueError("client is required")

        try:
            statement = check_readonly(query)
        except ReadOnlyViolation as e:
            return format_error_response(str(e))

        resolved_namespace = namespace or client.settings.namespace
        payload = await client.execute_query(resolved_namespace, statement)
        return format_text_response(render_table(extract_query_content(payload)))

    except httpx.HTTPError as e:
        logger.error(f"Error executing SQL: {e}")
        return format_error_response(describe_http_error(e))
    except Exception as e:
        logger.error(f"Error executing SQL: {e}")
        return format_error_response(str(e))
