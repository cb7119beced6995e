"""
Structured Logging Utilities
=============================

Human-readable or JSON logging for the bridge, plus a trace id that follows
one push notification through normalization, dispatch and publishing.

Usage:
    logger = get_component_logger(__name__, "dispatcher")
    with trace_context(generate_trace_id("push")):
        logger.info("Motion detected", extra={"event": "motion_published"})
"""

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# ============================================================================
# Trace Context
# ============================================================================

trace_id_var: ContextVar[Optional[str]] = ContextVar("trace_id", default=None)


def get_trace_id() -> Optional[str]:
    """Current trace id, or None outside a trace_context"""
    return trace_id_var.get()


def generate_trace_id(prefix: str = "trace") -> str:
    """
    Generate a new trace id.

    Args:
        prefix: Trace id prefix (e.g. "push", "discovery")

    Returns:
        Trace id formatted as {prefix}-{short_uuid}
    """
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


@contextmanager
def trace_context(trace_id: Optional[str] = None):
    """
    Propagate a trace id to every log record emitted inside the block.

    ContextVar values are copied into each asyncio task, so overlapping
    notifications keep separate trace ids.

    Args:
        trace_id: Trace id to propagate. Generated when None.
    """
    if trace_id is None:
        trace_id = generate_trace_id()

    token = trace_id_var.set(trace_id)
    try:
        yield trace_id
    finally:
        trace_id_var.reset(token)


# ============================================================================
# Logger Setup
# ============================================================================

def _json_formatter(indent: Optional[int] = None) -> logging.Formatter:
    """JSON formatter adding level, logger and trace_id fields"""
    try:
        from pythonjsonlogger.json import JsonFormatter
    except ImportError:
        raise ImportError(
            "pythonjsonlogger not found. Install with: pip install python-json-logger"
        )

    class TraceJsonFormatter(JsonFormatter):
        def add_fields(self, log_record, record, message_dict):
            super().add_fields(log_record, record, message_dict)

            if "levelname" in log_record:
                log_record["level"] = log_record.pop("levelname")

            if "name" in log_record:
                log_record["logger"] = log_record.pop("name")

            current_trace_id = get_trace_id()
            if current_trace_id and "trace_id" not in log_record:
                log_record["trace_id"] = current_trace_id

    return TraceJsonFormatter(
        "%(timestamp)s %(levelname)s %(name)s %(message)s",
        timestamp=True,
        json_indent=indent,
    )


class HumanReadableFormatter(logging.Formatter):
    """Column formatter for development; fills in component and event"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(component)-12s | %(event)-20s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1]
        if not hasattr(record, "event"):
            record.event = "-"
        return super().format(record)


def setup_structured_logging(
    level: str = "INFO",
    json_format: bool = False,
    indent: Optional[int] = None,
    output_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """
    Configure the root logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Emit JSON lines instead of human-readable columns
        indent: JSON indent (None = compact)
        output_file: Log file path with rotation (None = stdout)
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files to keep
    """
    if json_format:
        formatter = _json_formatter(indent)
    else:
        formatter = HumanReadableFormatter()

    if output_file:
        log_path = Path(output_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            filename=str(log_path),
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
    else:
        handler = logging.StreamHandler(sys.stdout)

    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))


# ============================================================================
# ComponentLogger
# ============================================================================

class ComponentLogger(logging.LoggerAdapter):
    """
    Logger adapter that adds 'component' and 'trace_id' to every record.

    Order of precedence (highest to lowest):
    1. User-provided extra
    2. Adapter extra (component)
    3. Trace id from context
    """

    def process(self, msg, kwargs):
        extra = dict(self.extra)

        trace_id = get_trace_id()
        if trace_id:
            extra["trace_id"] = trace_id

        if "extra" in kwargs:
            extra.update(kwargs["extra"])

        kwargs["extra"] = extra
        return msg, kwargs


def get_component_logger(name: str, component: str) -> ComponentLogger:
    """
    Get a logger tagged with a component name.

    Args:
        name: Logger name (usually __name__)
        component: Component name (e.g. "dispatcher", "publisher")
    """
    return ComponentLogger(logging.getLogger(name), {"component": component})


__all__ = [
    "setup_structured_logging",
    "trace_context",
    "get_trace_id",
    "generate_trace_id",
    "ComponentLogger",
    "get_component_logger",
    "HumanReadableFormatter",
]
