"""Process configuration for the IRIS MCP server.

Settings are read once from the environment (and an optional ``.env`` file)
when the server starts, then passed explicitly to everything that needs them.

Environment variables:
- IRIS_URL: Base URL of the IRIS web server (default http://localhost:63668)
- IRIS_NAMESPACE: Default namespace for tools that accept one (default KELVIN)
- IRIS_USERNAME / IRIS_PASSWORD: HTTP Basic Auth credentials
- IRIS_TIMEOUT: Request timeout in seconds (default 30)
"""

import os
from typing import Mapping
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator

DEFAULT_URL = "http://localhost:63668"
DEFAULT_NAMESPACE = "KELVIN"
DEFAULT_USERNAME = "_SYSTEM"
DEFAULT_PASSWORD = "SYS"
DEFAULT_TIMEOUT = 30.0

# Maps model fields to the environment variables that feed them.
ENV_VARS = {
    "url": "IRIS_URL",
    "namespace": "IRIS_NAMESPACE",
    "username": "IRIS_USERNAME",
    "password": "IRIS_PASSWORD",
    "timeout": "IRIS_TIMEOUT",
}


class ConfigError(ValueError):
    """Raised when the environment does not describe a usable IRIS connection."""

    def __init__(self, field_errors: dict[str, list[str]]):
        self.field_errors = field_errors
        details = "; ".join(f"{name}: {', '.join(msgs)}" for name, msgs in field_errors.items())
        super().__init__(f"Invalid environment configuration: {details}")


def normalize_base_url(url: str) -> str:
    """Remove trailing slashes so joined paths never contain '//'."""
    return url.rstrip("/")


class IrisSettings(BaseModel):
    """Connection settings shared by every tool invocation."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(default=DEFAULT_URL, min_length=1)
    namespace: str = Field(default=DEFAULT_NAMESPACE, min_length=1)
    username: str = Field(default=DEFAULT_USERNAME, min_length=1)
    password: str = Field(default=DEFAULT_PASSWORD, min_length=1)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)

    @field_validator("url")
    @classmethod
    def _strip_trailing_slashes(cls, value: str) -> str:
        value = normalize_base_url(value.strip())
        if not value:
            raise ValueError("IRIS_URL is required")
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "IrisSettings":
        """
        Build settings from environment variables.

        When no mapping is given, a ``.env`` file in the working directory is
        loaded first and the process environment is used. Unset variables fall
        back to the defaults.

        Raises:
            ConfigError: if any variable is present but invalid.
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        values = {field: environ[var] for field, var in ENV_VARS.items() if var in environ}
        try:
            return cls(**values)
        except ValidationError as e:
            field_errors: dict[str, list[str]] = {}
            for error in e.errors():
                field = str(error["loc"][0]) if error["loc"] else "settings"
                field_errors.setdefault(ENV_VARS.get(field, field), []).append(error["msg"])
            raise ConfigError(field_errors) from e
