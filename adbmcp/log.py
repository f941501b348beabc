"""Logging setup for adb-mcp.

stdio mode owns stdout for the protocol, so console output there is off unless
a log file is given. SSE mode logs to the console through a rich handler.
"""

import logging
from logging import FileHandler, Handler, NullHandler, StreamHandler
import os

logger = logging.getLogger("adbmcp")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that share our handlers, and the level each is held at
_ROUTED_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.INFO,
}
_PROTOCOL_LOGGERS = ("mcp.server.sse", "mcp.server.stdio", "mcp.server.fastmcp", "mcp.server.lowlevel")


def _build_handlers(console_handler: Handler | None, log_file: str | None, console: bool) -> list[Handler]:
    plain = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    handlers: list[Handler] = []

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = FileHandler(log_file)
        file_handler.setFormatter(plain)
        handlers.append(file_handler)

    if console:
        if console_handler is None:
            console_handler = StreamHandler()
            console_handler.setFormatter(plain)
        handlers.append(console_handler)

    return handlers or [NullHandler()]


def setup_logging(
    log_level: str,
    debug: bool,
    handler: Handler | None = None,
    log_file: str | None = None,
    disable_console_logging: bool = False,
) -> None:
    """Configure logging for the server.

    Args:
        log_level: The logging level name to use
        debug: Whether debug mode is enabled (forces DEBUG for our logger)
        handler: A console handler such as RichHandler; a plain stderr handler is used if omitted
        log_file: Path to a file to log to (optional)
        disable_console_logging: If True, write nothing to the console
    """
    level = logging.getLevelName(log_level.upper())
    handlers = _build_handlers(handler, log_file, console=not disable_console_logging)
    rich_console = handler is not None and not disable_console_logging

    logging.basicConfig(
        level=level,
        format="%(message)s" if rich_console else LOG_FORMAT,
        datefmt="[%X]" if rich_console else LOG_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )

    logger.setLevel(logging.DEBUG if debug else level)
    logger.handlers = handlers
    logger.propagate = False

    for name, routed_level in _ROUTED_LOGGERS.items():
        routed = logging.getLogger(name)
        routed.handlers = handlers
        routed.propagate = False
        routed.setLevel(logging.DEBUG if debug else routed_level)

    # Keep per-message protocol chatter out of the log unless debugging
    for name in _PROTOCOL_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.INFO)
