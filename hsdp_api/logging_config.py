"""
Structured logging for hsdp-api.

JSON lines by default, console rendering for local work. A correlation id
set with :func:`set_correlation_id` is attached to every event and reused as
the ``HSDP-Request-ID`` of requests built with ``with_request_id()``, so SDK
logs and platform-side logs can be joined.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from structlog.types import EventDict


correlation_id_var: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor: copy the context correlation id into the event."""
    correlation_id = correlation_id_var.get()
    if correlation_id:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def set_correlation_id(correlation_id: Optional[str] = None) -> str:
    """Bind ``correlation_id`` (a new UUID when None) to the current context."""
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    correlation_id_var.set(correlation_id)
    return correlation_id


def clear_correlation_id() -> None:
    correlation_id_var.set(None)


def get_correlation_id() -> Optional[str]:
    return correlation_id_var.get()


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = True,
) -> None:
    """
    Route hsdp-api events through the stdlib root logger.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL; unknown names mean INFO
        log_file: Write to this file instead of stderr
        json_format: JSON lines when True, console rendering otherwise
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        add_correlation_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Logger named ``hsdp_api.<name>``; pass the module's ``__name__``."""
    return structlog.get_logger(f"hsdp_api.{name}")


# Transport events

def log_request_sent(
    logger: structlog.stdlib.BoundLogger,
    method: str,
    url: str,
    content_length: Optional[int] = None,
    **kwargs: Any,
) -> None:
    """Debug event for a request handed to the session."""
    log_data: Dict[str, Any] = {
        "event_type": "request_sent",
        "method": method,
        "url": url,
    }
    if content_length is not None:
        log_data["content_length"] = content_length
    log_data.update(kwargs)

    logger.debug("request_sent", **log_data)


def log_response_classified(
    logger: structlog.stdlib.BoundLogger,
    method: str,
    url: str,
    status_code: int,
    success: bool,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Event for a classified response.

    Success is logged at debug; any other status at warning so failed calls
    stay visible at the default level.
    """
    log_data: Dict[str, Any] = {
        "event_type": "response_classified",
        "method": method,
        "url": url,
        "status_code": status_code,
        "success": success,
        "duration_ms": duration_ms,
    }
    log_data.update(kwargs)

    if success:
        logger.debug("response_classified", **log_data)
    else:
        logger.warning("response_classified", **log_data)
