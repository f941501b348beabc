"""
adb-mcp MCP Server.

Command-line entry point. Startup order:

1. Configure logging (and, for SSE, print the banner and settings table).
2. Register a DeviceManager built from the adb options.
3. Start the adb server; if that fails the process exits with status 1.
4. Serve MCP over stdio or SSE until interrupted.
"""

import asyncio
import ipaddress
import sys
import traceback
from types import TracebackType
from typing import Any

import anyio
import click
from mcp.server.sse import SseServerTransport
from mcp.server.stdio import stdio_server
from rich.logging import RichHandler
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, Route
import uvicorn

# Annotated modules with MCP resources, prompts and tools
from adbmcp import (  # noqa: F401
    console,
    prompts,
    resources,
    tools,
)
from adbmcp.config import DEFAULT_CONTROLLER_CACHE_SIZE, ADBConfig
from adbmcp.context import mcp
from adbmcp.devices import DeviceManager, get_device_manager, set_device_manager
from adbmcp.errors import ADBError
from adbmcp.log import logger, setup_logging

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 4256


def log_exception_tree(exc: BaseException, depth: int = 0) -> None:
    """Log an exception with its traceback, then any exceptions it groups or chains.

    Args:
        exc: The exception to log
        depth: Nesting level, used to indent the summary line
    """
    logger.error("%s%s: %s", "  " * depth, type(exc).__name__, exc)
    logger.debug("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)))

    if isinstance(exc, BaseExceptionGroup):
        for sub_exc in exc.exceptions:
            log_exception_tree(sub_exc, depth + 1)
    elif exc.__cause__ is None and exc.__context__ is not None and depth < 5:
        log_exception_tree(exc.__context__, depth + 1)


def install_excepthook() -> None:
    """Send uncaught exceptions to the log instead of bare stderr."""

    def excepthook(
        exc_type: type[BaseException], exc_value: BaseException, exc_traceback: TracebackType | None
    ) -> None:
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_traceback)
            return
        logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_traceback))
        log_exception_tree(exc_value)

    sys.excepthook = excepthook


def resolve_bind_host(host: str) -> tuple[str, str | None]:
    """Check the bind address, falling back to the loopback address.

    Returns:
        The host to bind to and, when it was replaced, a note for the settings table
    """
    if host == "localhost":
        return host, None
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return DEFAULT_HOST, f"(Changed from {host} - invalid address)"
    return host, None


def start_adb_server() -> None:
    """Start the adb server, exiting the process if it cannot be started."""
    try:
        asyncio.run(get_device_manager().start_server())
    except ADBError as e:
        logger.error("Server error: %s", e)
        sys.exit(1)
    logger.info("ADB server ready")


def create_sse_app(debug: bool = False) -> Starlette:
    """Build the Starlette app serving MCP over SSE.

    Clients open ``GET /sse`` for the event stream and post messages to
    ``/messages/``.
    """
    sse = SseServerTransport("/messages/")

    async def handle_sse(request: Request) -> Response:
        async with sse.connect_sse(request.scope, request.receive, request._send) as (read_stream, write_stream):
            try:
                await mcp._mcp_server.run(read_stream, write_stream, mcp._mcp_server.create_initialization_options())
            except asyncio.CancelledError:
                logger.debug("SSE connection cancelled")
            except Exception as e:  # noqa: BLE001 - one broken session must not stop the server
                logger.exception("SSE session ended with exception: %s", e)
                log_exception_tree(e)
        return Response()

    return Starlette(
        debug=debug,
        middleware=[
            Middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET", "POST"], allow_headers=["*"]),
        ],
        routes=[
            Route("/sse", endpoint=handle_sse),
            Mount("/messages/", app=sse.handle_post_message),
        ],
    )


def run_sse_server(host: str, port: int, debug: bool) -> None:
    """Serve the SSE app with uvicorn until interrupted."""
    server = uvicorn.Server(
        uvicorn.Config(create_sse_app(debug), host=host, port=port, log_config=None, timeout_graceful_shutdown=0)
    )
    try:
        asyncio.run(server.serve())
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received, shutting down.")


def run_stdio_server() -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    logger.info("Using stdio transport")

    async def arun() -> None:
        async with stdio_server() as (read_stream, write_stream):
            await mcp._mcp_server.run(read_stream, write_stream, mcp._mcp_server.create_initialization_options())

    anyio.run(arun)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--transport",
    type=click.Choice(["stdio", "sse"]),
    default="stdio",
    help="Transport type to use (stdio for MCP clients that spawn the server, sse for network)",
)
@click.option("--host", default=DEFAULT_HOST, help="Host to bind the SSE server to (use 0.0.0.0 for all interfaces)")
@click.option("--port", default=DEFAULT_PORT, type=int, help="Port for the SSE server")
@click.option("--debug/--no-debug", default=False, help="Enable debug mode for more verbose logging")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default="INFO",
    help="Set the logging level",
)
@click.option(
    "--log-file",
    "-l",
    type=str,
    default=None,
    help="Path to log file (if not specified, logs go to console in SSE mode or nowhere in stdio mode)",
)
@click.option("--adb-path", default="adb", envvar="ADB_PATH", show_default=True, help="Path to the adb binary")
@click.option(
    "--timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    envvar="ADB_MCP_TIMEOUT",
    help="Per-command timeout in seconds (no timeout if not specified)",
)
@click.option(
    "--cache-size",
    type=click.IntRange(min=1),
    default=DEFAULT_CONTROLLER_CACHE_SIZE,
    envvar="ADB_MCP_CACHE_SIZE",
    show_default=True,
    help="How many devices keep cached controllers",
)
def main(
    transport: str,
    host: str,
    port: int,
    debug: bool,
    log_level: str,
    log_file: str | None,
    adb_path: str,
    timeout: float | None,
    cache_size: int,
) -> None:
    """
    mcp-server-adb - Android Debug Bridge for AI assistants.

    Serves the Model Context Protocol so AI assistants can list Android
    devices, read their properties and send them input through adb.
    """
    install_excepthook()
    if debug:
        log_level = "DEBUG"

    if transport == "stdio":
        # stdout carries the protocol; only a log file may receive output
        setup_logging(log_level, debug, log_file=log_file, disable_console_logging=not log_file)
    else:
        console.print_banner()
        handler = RichHandler(console=console.console, rich_tracebacks=True)
        setup_logging(log_level, debug, handler=handler, log_file=log_file)

        host, host_note = resolve_bind_host(host)
        settings: dict[str, Any] = {
            "transport": transport.upper(),
            "host": host,
            "host_note": host_note or "",
            "port": port,
            "log_level": log_level,
            "adb_path": adb_path,
            "timeout": f"{timeout:g}s" if timeout is not None else "none",
            "cache_size": cache_size,
        }
        console.display_system_info(settings)

    adb_config = ADBConfig(adb_path=adb_path, timeout_seconds=timeout, controller_cache_size=cache_size)
    set_device_manager(DeviceManager(config=adb_config))
    logger.debug("Device manager initialized: %s", adb_config)

    start_adb_server()

    if transport == "sse":
        run_sse_server(host, port, debug)
    else:
        run_stdio_server()


if __name__ == "__main__":
    main()
