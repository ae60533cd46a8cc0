"""structlog setup for reasoning-demo.

Every log line is a single JSON object carrying an ISO timestamp, the level,
the emitting component (``logger``) and, while a run executes, its
``run_id``.

configure_logging() is applied once by the application lifespan; later calls
are ignored unless ``force`` is set, which the tests use to redirect output.
"""

import contextvars
import logging
import sys
from typing import Any, TextIO

import structlog
from structlog.types import EventDict, Processor


_configured: bool = False

_run_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "run_id", default=None
)


# =============================================================================
# Run Context
# =============================================================================


def set_run_id(run_id: str | None) -> None:
    """Bind (or clear, with None) the run ID for the current task context."""
    _run_id_var.set(run_id)


def get_run_id() -> str | None:
    return _run_id_var.get()


def add_run_id(_logger: object, _method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor stamping the active run ID onto the event."""
    run_id = _run_id_var.get()
    if run_id is not None:
        event_dict.setdefault("run_id", run_id)
    return event_dict


# =============================================================================
# Configuration
# =============================================================================


def _min_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: str = "INFO",
    stream: TextIO | None = None,
    force: bool = False,
) -> None:
    """Install the JSON processor chain.

    Args:
        level: Lowest level that is emitted.
        stream: Destination, stdout when omitted.
        force: Reapply even if logging was already configured.
    """
    global _configured

    if _configured and not force:
        return

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="timestamp"),
        add_run_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_min_level(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )
    _configured = True


def reset_logging() -> None:
    """Forget the configured flag so the next configure_logging() applies."""
    global _configured
    _configured = False


def get_logger(name: str) -> Any:
    """Return a logger bound to ``name``, configuring defaults on first use."""
    configure_logging()
    return structlog.get_logger().bind(logger=name)
