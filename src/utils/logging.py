"""Structured logging for newsdesk.

Every module logs through the stdlib (``logging.getLogger(__name__)``);
structlog renders those records, either as colored console lines or as
JSON, and stamps each one with the id of the HTTP request it belongs to.
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

import structlog

current_request_id: ContextVar[str | None] = ContextVar("current_request_id", default=None)

# Chatty below WARNING, and never about our own pipeline
QUIET_LOGGERS = (
    "httpx",
    "httpcore",
    "google_genai",
    "google_genai.models",
    "uvicorn.access",
    "multipart",
    "python_multipart",
)


def add_request_id(_logger, _method_name, event_dict):
    """Structlog processor: tag the event with the active request id, if any."""
    request_id = current_request_id.get()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Route all stdlib logging through structlog renderers.

    Args:
        log_level: Root level name (DEBUG, INFO, WARNING, ERROR); unknown names fall back to INFO
        json_output: One JSON object per line instead of colored console output
    """
    pre_chain = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_request_id,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info if json_output else _passthrough,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)


def _passthrough(_logger, _method_name, event_dict):
    # ConsoleRenderer prints exc_info itself
    return event_dict


@contextmanager
def request_scope(request_id: str) -> Iterator[str]:
    """Tag every log record emitted inside the block with ``request_id``."""
    token = current_request_id.set(request_id)
    try:
        yield request_id
    finally:
        current_request_id.reset(token)
