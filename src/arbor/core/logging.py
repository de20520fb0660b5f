"""Structured logging for synthesis runs.

structlog and stdlib logging share one processor chain and one stdout
handler, so a record from ``logging.getLogger(__name__)`` (Dynaconf, or
any library loaded alongside Arbor) renders exactly like an event from
``get_logger``. Rendering is JSON for machine consumption or a plain
key=value console format.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.stdlib import ProcessorFormatter

if TYPE_CHECKING:
    from arbor.core.config import LoggingSettings

# Dynaconf reports every loader it tries at DEBUG; that is noise when
# debugging synthesis.
_NOISY_LOGGERS: tuple[str, ...] = ("dynaconf",)

_SHARED_PROCESSORS: tuple[Any, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.StackInfoRenderer(),
)


def _drop_formatter_bookkeeping(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Strip the ``_record`` / ``_from_structlog`` keys ProcessorFormatter adds."""
    event_dict.pop("_record", None)
    event_dict.pop("_from_structlog", None)
    return event_dict


def _renderers(json_output: bool) -> list[Any]:
    if json_output:
        return [
            _drop_formatter_bookkeeping,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [_drop_formatter_bookkeeping, structlog.dev.ConsoleRenderer(colors=False)]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
) -> None:
    """Install the shared structlog/stdlib pipeline on the root logger.

    Replaces any handlers already on the root logger, so calling this twice
    reconfigures rather than duplicating output.

    Args:
        json_output: Render events as JSON lines instead of console text.
        level: Root log level name, case-insensitive.
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Caching would pin loggers to the first configuration seen
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ProcessorFormatter(
            processors=_renderers(json_output),
            foreign_pre_chain=list(_SHARED_PROCESSORS),
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    # Never make noisy loggers less restrictive than the root level
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(max(log_level, logging.WARNING))


def configure_logging_from_settings(settings: "LoggingSettings") -> None:
    """Configure logging from the logging section of loaded settings."""
    configure_logging(json_output=settings.json_output, level=settings.level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
