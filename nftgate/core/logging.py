"""
Structured logging for nftgate.

Log events are key/value pairs rendered by rich on a terminal or as JSON
lines. Logs always go to stderr so command output on stdout stays parseable.

The correlation id lives in structlog's context variables, so every asyncio
task sees the id that was bound when it was created.
"""

import logging
import sys
import uuid
from typing import List, Optional

import structlog
from rich.console import Console
from rich.logging import RichHandler
from structlog.types import Processor

CORRELATION_ID_KEY = "correlation_id"


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind a correlation ID (generated if omitted) to the current context."""
    correlation_id = correlation_id or uuid.uuid4().hex[:8]
    structlog.contextvars.bind_contextvars(**{CORRELATION_ID_KEY: correlation_id})
    return correlation_id


def get_correlation_id() -> Optional[str]:
    return structlog.contextvars.get_contextvars().get(CORRELATION_ID_KEY)


def clear_correlation_id() -> None:
    structlog.contextvars.unbind_contextvars(CORRELATION_ID_KEY)


def _processors(rich_output: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.dev.set_exc_info,
    ]
    if rich_output:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True, exception_formatter=structlog.dev.rich_traceback
            )
        )
    else:
        processors.extend(
            [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        )
    return processors


def _stdlib_handler(rich_output: bool) -> logging.Handler:
    if rich_output:
        return RichHandler(console=Console(stderr=True), show_path=False)
    return logging.StreamHandler(sys.stderr)


def setup_logging(debug: bool = False, rich_output: bool = True) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        debug: Enable debug level logging
        rich_output: Rich console rendering; JSON lines otherwise
    """
    level = logging.DEBUG if debug else logging.INFO

    # web3 and httpx log through the standard library
    logging.basicConfig(
        level=level, format="%(message)s", handlers=[_stdlib_handler(rich_output)]
    )

    structlog.configure(
        processors=_processors(rich_output),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.WriteLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
