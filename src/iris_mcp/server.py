# ruff: noqa: B008
import argparse
import asyncio
import logging
import signal
import sys
from typing import Any
from typing import List

import httpx
import mcp.types as types
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from .client import AtelierClient
from .client import describe_http_error
from .client import obfuscate_password
from .client import response_body
from .client import status_of
from .config import ConfigError
from .config import IrisSettings
from .query import query_tools
from .routine import routine_tools
from .table import summarize_body

# Initialize FastMCP with default settings
mcp = FastMCP("intersystems-objectscript-mcp")

ResponseType = List[types.TextContent | types.ImageContent | types.EmbeddedResource]

logger = logging.getLogger(__name__)

# Global variables
settings: IrisSettings | None = None
shutdown_in_progress = False


def get_atelier_client() -> AtelierClient:
    """Open a client for one tool invocation."""
    if settings is None:
        raise ValueError("IRIS connection settings are not initialized")
    return AtelierClient(settings)


def format_text_response(text: Any) -> ResponseType:
    """Format a text response."""
    return [types.TextContent(type="text", text=str(text))]


def format_error_response(error: str) -> ResponseType:
    """Format an error response."""
    return format_text_response(f"Error: {error}")


@mcp.tool(description="Health check for MCP connectivity.")
async def ping() -> ResponseType:
    """Return 'pong'."""
    return format_text_response("pong")


@mcp.tool(description="Read-only: show the IRIS Atelier API server info (HTTP status and version).")
async def get_iris_server_info() -> ResponseType:
    """Query the Atelier root endpoint."""
    try:
        async with get_atelier_client() as client:
            response = await client.get_server_info()
        return format_text_response(f"HTTP {response.status_code}\nAtelier info: {summarize_body(response_body(response))}")
    except httpx.HTTPError as e:
        logger.error(f"Error getting server info: {obfuscate_password(str(e))}")
        return format_error_response(describe_http_error(e))
    except Exception as e:
        logger.error(f"Error getting server info: {e}")
        return format_error_response(str(e))


@mcp.tool(
    description="Read-only: fetch compiled routine (.int) content from IRIS. Does not modify any code. "
    "Accepts a class name ('Pkg.Class.cls' is served as its generated 'Pkg.Class.1.int' or 'Pkg.Class.int'), "
    "a bare name, or a routine/include name ending in .int, .mac or .inc."
)
async def get_iris_routine(
    name: str = Field(description="Routine or class name, e.g. 'Pkg.Class.cls'"),
    namespace: str | None = Field(description="IRIS namespace (defaults to IRIS_NAMESPACE)", default=None),
) -> ResponseType:
    """Fetch routine source, trying candidate document names in order."""
    try:
        async with get_atelier_client() as client:
            return await routine_tools.get_routine(name=name, namespace=namespace, client=client)
    except Exception as e:
        logger.error(f"Error fetching routine: {e}")
        return format_error_response(str(e))


@mcp.tool(
    description="Read-only: execute a single SELECT (or WITH) SQL query in an IRIS namespace and return the rows as a Markdown table. "
    "Statements that could modify data are rejected."
)
async def execute_iris_sql(
    query: str = Field(description="SQL query to run"),
    namespace: str | None = Field(description="IRIS namespace (defaults to IRIS_NAMESPACE)", default=None),
) -> ResponseType:
    """Run a read-only SQL query."""
    try:
        async with get_atelier_client() as client:
            return await query_tools.execute_sql(query=query, namespace=namespace, client=client)
    except Exception as e:
        logger.error(f"Error executing SQL: {e}")
        return format_error_response(str(e))


async def verify_connection(iris_settings: IrisSettings) -> bool:
    """
    Check that the Atelier API answers before any tool is served.

    Logs the outcome to stderr and returns False on any failure.
    """
    try:
        async with AtelierClient(iris_settings) as client:
            response = await client.get_server_info()
    except httpx.HTTPError as e:
        logger.error("IRIS connection failed.")
        if isinstance(e, httpx.HTTPStatusError):
            logger.error(f"HTTP {status_of(e)}")
            logger.error(summarize_body(response_body(e.response)))
        else:
            logger.error(describe_http_error(e))
        return False
    except Exception as e:
        logger.error("IRIS connection failed.")
        logger.error(obfuscate_password(str(e)))
        return False

    logger.info("Connected to IRIS.")
    logger.info(f"HTTP {response.status_code}")
    logger.info(f"Atelier info: {summarize_body(response_body(response))}")
    return True


async def main():
    # Parse command line arguments
    parser = argparse.ArgumentParser(description="InterSystems IRIS ObjectScript MCP Server")
    parser.add_argument(
        "--verify-only",
        action="store_true",
        help="Check the connection to IRIS and exit",
    )
    parser.add_argument(
        "--transport",
        type=str,
        choices=["stdio", "sse"],
        default="stdio",
        help="Select MCP transport: stdio (default) or sse",
    )
    parser.add_argument(
        "--sse-host",
        type=str,
        default="localhost",
        help="Host to bind SSE server to (default: localhost)",
    )
    parser.add_argument(
        "--sse-port",
        type=int,
        default=8000,
        help="Port for SSE server (default: 8000)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    args = parser.parse_args()

    # stdout carries the stdio protocol stream, so logs go to stderr
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    global settings
    try:
        settings = IrisSettings.from_env()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(f"Using IRIS at {obfuscate_password(settings.url)} (namespace {settings.namespace})")

    # A server that cannot reach IRIS should not advertise tools it cannot serve
    if not await verify_connection(settings):
        sys.exit(1)

    if args.verify_only:
        return

    # Set up proper shutdown handling
    try:
        loop = asyncio.get_running_loop()
        signals = (signal.SIGTERM, signal.SIGINT)
        for s in signals:
            loop.add_signal_handler(s, lambda s=s: asyncio.create_task(shutdown(s)))
    except NotImplementedError:
        # Windows doesn't support signals properly
        logger.warning("Signal handling not supported on Windows")

    logger.info(f"MCP server started ({args.transport}).")

    # Run the server with the selected transport (always async)
    if args.transport == "stdio":
        await mcp.run_stdio_async()
    else:
        # Update FastMCP settings based on command line arguments
        mcp.settings.host = args.sse_host
        mcp.settings.port = args.sse_port
        await mcp.run_sse_async()


async def shutdown(sig=None):
    """Clean shutdown of the server."""
    global shutdown_in_progress

    if shutdown_in_progress:
        logger.warning("Forcing immediate exit")
        sys.exit(1)

    shutdown_in_progress = True

    if sig:
        logger.info(f"Received exit signal {sig.name}")

    # Exit with appropriate status code
    sys.exit(128 + sig if sig is not None else 0)
