"""
Loguru sinks and the shared bound logger

- stdout sink always, file sink with hourly rotation in DEBUG
- standard-library logging (uvicorn, sqlalchemy, asyncpg) routed into loguru
- every line carries the service context, the decorated call target and the
  start time of its call chain
"""

from contextvars import ContextVar
from datetime import datetime, timezone
from enum import StrEnum
import logging
import os
from pathlib import Path
import sys
from typing import TYPE_CHECKING

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.logging.service_context import get_service_context


# Argument names and `key=value` pairs whose values never reach a log line.
# Ticket credentials are bearer tokens for entry.
SENSITIVE_KEYWORDS = frozenset({'password', 'secret', 'token', 'credential', 'raw_payload'})

# Chatty third-party loggers kept at WARNING even in DEBUG
QUIET_LOGGERS = ('sqlalchemy.engine', 'sqlalchemy.pool', 'asyncpg', 'uvicorn.access')

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


def _bind_defaults() -> 'LoguruLogger':
    return loguru_logger.bind(
        **{
            ExtraField.SERVICE_CONTEXT: get_service_context(),
            ExtraField.CHAIN_START_TIME: '',
            ExtraField.CALL_TARGET: '',
        }
    )


class InterceptHandler(logging.Handler):
    """Forward standard-library records to loguru, keeping the original caller."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        custom_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _log_file_path() -> Path:
    # TEST_LOG_DIR keeps test runs out of the service's own log directory
    test_log_dir = os.environ.get('TEST_LOG_DIR')
    log_dir = Path(test_log_dir) if test_log_dir else settings.LOG_DIR
    prefix = 'test_' if test_log_dir else ''
    return log_dir / f'{prefix}{datetime.now(timezone.utc):%Y-%m-%d_%H}.log'


def _configure() -> 'LoguruLogger':
    loguru_logger.remove()
    bound = _bind_defaults()
    level = 'DEBUG' if settings.DEBUG else 'INFO'

    bound.add(sys.stdout, format=io_log_format, level=level, enqueue=True)
    if settings.DEBUG:
        bound.add(
            str(_log_file_path()),
            format=io_log_format,
            rotation='1 hour',
            retention='7 days',
            compression='gz',
            enqueue=True,
            level=level,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return bound


custom_logger = _configure()
