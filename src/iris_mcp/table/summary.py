"""Best-effort summaries of response bodies for diagnostics."""

import json
import re
from typing import Any

SUMMARY_LIMIT = 400

# Checked in order; the first match wins.
VERSION_PATTERNS = [
    re.compile(r'"version"\s*:\s*"([^"]+)"', re.IGNORECASE),
    re.compile(r'"irisVersion"\s*:\s*"([^"]+)"', re.IGNORECASE),
    re.compile(r'"productVersion"\s*:\s*"([^"]+)"', re.IGNORECASE),
]

_WHITESPACE = re.compile(r"\s+")


def summarize_body(body: Any) -> str:
    """
    Summarize an arbitrary response body in one short string.

    Prefers a version-like field when the body contains one, otherwise falls
    back to a truncated JSON or text rendering. Never raises.
    """
    if body is None:
        return "No response body."

    if isinstance(body, (dict, list, tuple)):
        try:
            serialized = json.dumps(body, ensure_ascii=False)
            for pattern in VERSION_PATTERNS:
                match = pattern.search(serialized)
                if match:
                    return f"version={match.group(1)}"
            return json.dumps(body, indent=2, ensure_ascii=False)[:SUMMARY_LIMIT]
        except (TypeError, ValueError, RecursionError):
            return "Received non-serializable object body."

    if isinstance(body, str):
        snippet = _WHITESPACE.sub(" ", body)[:SUMMARY_LIMIT]
        return snippet if snippet.strip() else "Empty string body."

    try:
        return str(body)
    except Exception:
        return "Received non-serializable object body."


def extract_query_content(payload: Any) -> Any:
    """Pull the rows out of a query response.

    Atelier wraps results as ``{"result": {"content": [...]}}``; some proxies
    drop the ``result`` level, and anything else is passed through as is.
    """
    if isinstance(payload, dict):
        result = payload.get("result")
        if isinstance(result, dict) and "content" in result:
            return result["content"]
        if "content" in payload:
            return payload["content"]
    return payload
