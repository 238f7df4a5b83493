"""Read-only routine retrieval tool.

Classes are not served as compiled code by the doc endpoint, so a request for
``Pkg.Class.cls`` is answered with the class's generated ``.int`` routine.
"""

import logging
from typing import Any

import mcp.types as types
from pydantic import Field

from ..client import AtelierClient
from ..table import summarize_body
from .candidates import resolve_candidates
from .fallback import fetch_with_fallback

logger = logging.getLogger(__name__)

ResponseType = list[types.TextContent | types.ImageContent | types.EmbeddedResource]


def format_text_response(text: Any) -> ResponseType:
    """Format a text response."""
    return [types.TextContent(type="text", text=str(text))]


def format_error_response(error: str) -> ResponseType:
    """Format an error response."""
    return format_text_response(f"Error: {error}")


def format_routine(response: Any, requested_name: str) -> str:
    """Render a doc response as a header line followed by the source lines."""
    # Responses are usually {"result": {"name", "cat", "content": [...]}}
    result = response.get("result", response) if isinstance(response, dict) else response
    if not isinstance(result, dict):
        result = {}

    name = result.get("name") or requested_name
    category = result.get("cat") or "unknown"
    header = f"[IRIS routine] name={name} cat={category}"

    lines = result.get("content")
    if isinstance(lines, list):
        return header + "\n" + "\n".join("" if line is None else str(line) for line in lines)
    return header + "\n" + summarize_body(response)


async def get_routine(
    name: str = Field(description="Routine or class name, e.g. 'Pkg.Class.cls', 'Pkg.Class' or 'Pkg.Routine.1.int'"),
    namespace: str | None = Field(description="IRIS namespace (defaults to IRIS_NAMESPACE)", default=None),
    client: AtelierClient | None = None,
) -> ResponseType:
    """
    Fetch the compiled routine source for a class or routine name.

    Candidate document names are tried in order (e.g. 'Pkg.Class.1.int' then
    'Pkg.Class.int' for 'Pkg.Class.cls'); the first one that exists is
    returned. Connection, authentication and persistent server errors stop
    the search early.

    Returns:
        '[IRIS routine] name=... cat=...' followed by the routine lines, or a
        message listing every name that was tried.
    """
    try:
        if not client:
            raise ValueError("client is required")

        candidates = resolve_candidates(name)
        if not candidates:
            return format_error_response("name must not be empty")

        resolved_namespace = namespace or client.settings.namespace

        async def lookup(candidate: str) -> Any:
            return await client.get_document(resolved_namespace, candidate)

        result = await fetch_with_fallback(candidates, lookup)

        if not result.found:
            return format_text_response(result.to_text())

        logger.info(f"Resolved {name} to {result.candidate} in namespace {resolved_namespace}")
        return format_text_response(format_routine(result.document, result.candidate))

    except Exception as e:
        logger.error(f"Error fetching routine: {e}")
        return format_error_response(str(e))
