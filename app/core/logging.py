"""Logging configuration driven by application settings.

Application modules log through the standard library
(``logging.getLogger(__name__)``). With ``LOG_FORMAT=json`` the records are
rendered by structlog as one JSON object per line.
"""

import logging

import structlog

from app.core.config import LogFormatEnum, settings

SIMPLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_formatter(log_format: LogFormatEnum) -> logging.Formatter:
    """Return the formatter for ``log_format``."""
    if log_format == LogFormatEnum.json:
        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
            ],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer(),
            ],
        )
    return logging.Formatter(SIMPLE_FORMAT)


def setup_logging() -> None:
    """Configure the root logger from ``settings.log_level`` and ``settings.log_format``."""
    handler = logging.StreamHandler()
    handler.setFormatter(build_formatter(settings.log_format))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.value, logging.INFO),
        handlers=[handler],
        force=True,
    )
