"""Classification of failures raised while talking to the Atelier API."""

from enum import Enum
from typing import Optional

import httpx

from ..table import summarize_body
from .atelier_client import obfuscate_password
from .atelier_client import response_body

NOT_FOUND_STATUSES = frozenset({400, 404})
AUTH_STATUSES = frozenset({401, 403})
TRANSIENT_STATUSES = frozenset({502, 503, 504})


class ErrorKind(str, Enum):
    """What a failed request tells us about the backend."""

    CONNECTIVITY = "connectivity"  # No HTTP response was ever received
    NOT_FOUND = "not_found"  # 400/404: this document name is wrong
    AUTHORIZATION = "authorization"  # 401/403
    TRANSIENT = "transient"  # 502/503/504
    OTHER = "other"  # Anything else, including malformed bodies


def status_of(error: BaseException) -> Optional[int]:
    """Return the HTTP status carried by an error, if a response was received."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return None


def classify_error(error: BaseException) -> ErrorKind:
    """Map an exception raised by a lookup or query to an ErrorKind."""
    # Timeouts and socket level failures (refused, reset, DNS, unreachable)
    if isinstance(error, (httpx.TimeoutException, httpx.NetworkError)):
        return ErrorKind.CONNECTIVITY
    if isinstance(error, (ConnectionError, TimeoutError)):
        return ErrorKind.CONNECTIVITY

    status = status_of(error)
    if status in NOT_FOUND_STATUSES:
        return ErrorKind.NOT_FOUND
    if status in AUTH_STATUSES:
        return ErrorKind.AUTHORIZATION
    if status in TRANSIENT_STATUSES:
        return ErrorKind.TRANSIENT
    return ErrorKind.OTHER


def request_url(error: BaseException) -> str:
    """Best-effort URL of the request that failed, with credentials masked."""
    if not isinstance(error, httpx.RequestError | httpx.HTTPStatusError):
        return ""
    try:
        url = str(error.request.url)
    except RuntimeError:
        # httpx raises when the error was built without a request
        return ""
    return obfuscate_password(url) or ""


def connectivity_message(error: BaseException) -> str:
    url = request_url(error)
    target = f" ({url})" if url else ""
    return (
        f"Cannot reach IRIS{target}: {type(error).__name__}: {obfuscate_password(str(error)) or 'no details'}. "
        "Check IRIS_URL and that the IRIS web server is running and reachable."
    )


def auth_message(status: int) -> str:
    return f"Authentication failed (HTTP {status}). Check IRIS_USERNAME and IRIS_PASSWORD and the user's privileges on the namespace."


def describe_http_error(error: BaseException) -> str:
    """Render a single failure as the text handed back to the tool caller."""
    kind = classify_error(error)
    status = status_of(error)

    if kind == ErrorKind.CONNECTIVITY:
        return connectivity_message(error)
    if kind == ErrorKind.AUTHORIZATION and status is not None:
        return auth_message(status)
    if isinstance(error, httpx.HTTPStatusError):
        return f"Request failed: HTTP {status}: {summarize_body(response_body(error.response))}"
    return f"Request failed: {type(error).__name__}: {obfuscate_password(str(error))}"
