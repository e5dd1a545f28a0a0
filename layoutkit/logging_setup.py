import logging
import sys
from typing import Optional, TextIO

import structlog

LOGGER_NAMESPACE = "layoutkit"

# -v count -> level name; anything past the last entry stays at debug.
VERBOSITY_LEVELS = ("warning", "info", "debug")

def level_for_verbosity(verbosity: int) -> str:
    return VERBOSITY_LEVELS[min(max(verbosity, 0), len(VERBOSITY_LEVELS) - 1)]

def _exception_processor(json_logs: bool):
    # json consumers get structured tracebacks; the console gets formatted text.
    if json_logs:
        return structlog.processors.dict_tracebacks
    return structlog.processors.format_exc_info

def _renderer(json_logs: bool, stream: TextIO):
    if json_logs:
        return structlog.processors.JSONRenderer(sort_keys=True)
    isatty = getattr(stream, "isatty", None)
    return structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty()))

def configure_logging(log_level_str: str = "warning", force_json_logs: bool = False, stream: Optional[TextIO] = None):
    """Routes every ``layoutkit.*`` structlog event through one stdlib handler.

    Events go to ``stream`` (stderr by default) so rendered pages on stdout
    are never mixed with diagnostics. Calling this again replaces the handler.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.WARNING)
    stream = stream or sys.stderr

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            _exception_processor(force_json_logs),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=_renderer(force_json_logs, stream),
        foreign_pre_chain=[structlog.stdlib.add_logger_name, structlog.stdlib.add_log_level],
    ))

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.handlers.clear()
    namespace_logger.addHandler(handler)
    namespace_logger.setLevel(log_level)
    # keep layoutkit events out of whatever the host application put on the root logger.
    namespace_logger.propagate = False

    structlog.get_logger(__name__).info("logging_configured", level=log_level_str, json=force_json_logs)
