"""HTTP client for the IRIS Atelier REST API."""

import logging
import re
from typing import Any
from typing import Optional
from urllib.parse import quote
from urllib.parse import urlparse
from urllib.parse import urlunparse

import httpx

from ..config import IrisSettings

logger = logging.getLogger(__name__)

ATELIER_ROOT = "/api/atelier/"
ATELIER_V1 = "/api/atelier/v1"


def obfuscate_password(text: str | None) -> str | None:
    """
    Obfuscate passwords in any text containing connection information.
    Works on URLs with user info, error messages, and other strings.
    """
    if text is None:
        return None

    if not text:
        return text

    # Try first as a proper URL
    try:
        parsed = urlparse(text)
        if parsed.scheme and parsed.netloc and parsed.password:
            netloc = parsed.netloc.replace(f":{parsed.password}@", ":****@")
            return urlunparse(parsed._replace(netloc=netloc))
    except ValueError:
        pass

    # URLs embedded in longer messages: http(s)://user:password@host
    url_pattern = re.compile(r"(https?:\/\/[^:\/\s]+:)([^@\s]+)(@[^\/\s]+)")
    text = re.sub(url_pattern, r"\1****\3", text)

    # password=xxx parameters
    param_pattern = re.compile(r'(password=)([^\s&;"\']+)', re.IGNORECASE)
    text = re.sub(param_pattern, r"\1****", text)

    return text


def create_client(settings: IrisSettings) -> httpx.AsyncClient:
    """Create an HTTP client bound to the configured IRIS server."""
    return httpx.AsyncClient(
        base_url=settings.url,
        auth=httpx.BasicAuth(settings.username, settings.password),
        headers={"Content-Type": "application/json"},
        timeout=settings.timeout,
    )


def response_body(response: httpx.Response) -> Any:
    """Decoded JSON body of a response, or its text when it is not JSON."""
    try:
        return response.json()
    except ValueError:
        return response.text


def doc_path(namespace: str, name: str) -> str:
    return f"{ATELIER_V1}/{quote(namespace, safe='')}/doc/{quote(name, safe='')}"


def query_path(namespace: str) -> str:
    return f"{ATELIER_V1}/{quote(namespace, safe='')}/action/query"


class AtelierClient:
    """Read-only access to the Atelier endpoints used by the tools.

    Each tool invocation opens its own client; nothing is shared between
    invocations. Non-2xx responses raise ``httpx.HTTPStatusError``.
    """

    def __init__(self, settings: IrisSettings, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._http = http_client or create_client(settings)

    async def __aenter__(self) -> "AtelierClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.aclose()

    async def get_server_info(self) -> httpx.Response:
        """GET the Atelier root. Returns the raw response so callers can report its status."""
        response = await self._http.get(ATELIER_ROOT)
        response.raise_for_status()
        return response

    async def get_document(self, namespace: str, name: str) -> Any:
        """Fetch a single document (routine, class, include file) by its full name."""
        logger.debug(f"Fetching document {name} in namespace {namespace}")
        response = await self._http.get(doc_path(namespace, name))
        response.raise_for_status()
        return response.json()

    async def execute_query(self, namespace: str, query: str) -> Any:
        """Run an SQL query through the Atelier query action."""
        logger.debug(f"Executing query in namespace {namespace}: {query}")
        response = await self._http.post(query_path(namespace), json={"query": query})
        response.raise_for_status()
        return response.json()
