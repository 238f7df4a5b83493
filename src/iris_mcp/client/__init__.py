"""Atelier REST API client and failure classification."""

from .atelier_client import AtelierClient
from .atelier_client import create_client
from .atelier_client import obfuscate_password
from .atelier_client import response_body
from .errors import ErrorKind
from .errors import classify_error
from .errors import describe_http_error
from .errors import status_of

__all__ = [
    "AtelierClient",
    "ErrorKind",
    "classify_error",
    "create_client",
    "describe_http_error",
    "obfuscate_password",
    "response_body",
    "status_of",
]
