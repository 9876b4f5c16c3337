import logging
import os

from rich.console import Console
from rich.logging import RichHandler


def get_logger(name: str = "candle_search") -> logging.Logger:
    """Create a configured logger with Rich output on stderr.

    stdout is reserved for the MCP stdio stream, so nothing may log there.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    log_level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logger.setLevel(log_level)
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=True,
        show_level=True,
        show_path=False,
    )
    fmt = logging.Formatter("%(message)s")
    handler.setFormatter(fmt)
    logger.addHandler(handler)
    logger.propagate = False
    return logger
