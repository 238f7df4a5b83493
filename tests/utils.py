import json
from typing import Any
from typing import Callable

import httpx

from iris_mcp.client import AtelierClient
from iris_mcp.config import IrisSettings


def status_error(status: int, body: Any = None, url: str = "http://iris.test:52773/api/atelier/v1/USER/doc/X") -> httpx.HTTPStatusError:
    """Build the error httpx raises from raise_for_status() for ``status``."""
    request = httpx.Request("GET", url)
    content = json.dumps(body).encode() if body is not None else b""
    response = httpx.Response(status, request=request, content=content)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


def connect_error(message: str = "[Errno 111] Connection refused") -> httpx.ConnectError:
    return httpx.ConnectError(message, request=httpx.Request("GET", "http://iris.test:52773/api/atelier/"))


def mock_client(settings: IrisSettings, handler: Callable[[httpx.Request], httpx.Response]) -> AtelierClient:
    """An AtelierClient whose requests are answered by ``handler``."""
    http = httpx.AsyncClient(
        base_url=settings.url,
        auth=httpx.BasicAuth(settings.username, settings.password),
        headers={"Content-Type": "application/json"},
        transport=httpx.MockTransport(handler),
    )
    return AtelierClient(settings, http_client=http)


def doc_response(name: str, lines: list[str], cat: str = "RTN") -> dict:
    return {"status": {"errors": [], "summary": ""}, "console": [], "result": {"name": name, "cat": cat, "content": lines}}
