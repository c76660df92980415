from contextvars import ContextVar
from datetime import datetime
from enum import StrEnum
import logging
import os
import re
import sys
from typing import TYPE_CHECKING, Union
import zoneinfo

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


# Tests point this at test/test_log
LOG_DIR = os.environ.get('TEST_LOG_DIR', LOG_DIR)


# Argument names whose values @Logger.io masks
SENSITIVE_KEYWORDS = {
    'password',
    'secret',
    'token',
    'authorization',
    'smtp_password',
}

chain_start_time_var: ContextVar[float] = ContextVar('chain_start_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


# uvicorn access line: '127.0.0.1:53422 - "POST /api/session/3/booking HTTP/1.1" 201'
_ACCESS_LOG_STATUS = re.compile(r'"[A-Z]+ \S+ HTTP/[\d.]+" (\d{3})')

# stdlib loggers that are only noise below WARNING
_QUIET_LOGGERS = ('aiosqlite', 'asyncio', 'sqlalchemy.pool', 'multipart')


def _access_log_level(message: str) -> str | None:
    """Level for a uvicorn access line by response status, None for other messages"""
    match = _ACCESS_LOG_STATUS.search(message)
    if not match:
        return None
    status_code = int(match.group(1))
    if status_code >= 500:
        return 'CRITICAL'
    if status_code >= 400:
        # seat taken, locked out, ...
        return 'WARNING'
    return 'SUCCESS'


def _bind_defaults() -> 'LoguruLogger':
    return loguru_logger.bind(
        **{
            ExtraField.SERVICE_CONTEXT: get_service_context(),
            ExtraField.CHAIN_START_TIME: '',
            ExtraField.CALL_TARGET: '',
        }
    )


class InterceptHandler(logging.Handler):
    """Routes stdlib logging (uvicorn, sqlalchemy, alembic) into loguru"""

    _bound: Union['LoguruLogger', None] = None

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno < logging.WARNING and record.name.startswith(_QUIET_LOGGERS):
            return

        message = record.getMessage()
        level: str | int | None = _access_log_level(message)
        if level is None:
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        if InterceptHandler._bound is None:
            InterceptHandler._bound = _bind_defaults()
        InterceptHandler._bound.opt(depth=depth, exception=record.exc_info).log(level, message)


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


def _log_file_path() -> str:
    hour = datetime.now(zoneinfo.ZoneInfo(settings.TIMEZONE)).strftime('%Y-%m-%d_%H')
    prefix = 'test_' if os.environ.get('TEST_LOG_DIR') else ''
    return f'{LOG_DIR}/{prefix}{hour}.log'


def _configure() -> 'LoguruLogger':
    level = 'DEBUG' if settings.DEBUG else 'INFO'

    loguru_logger.remove()
    configured = _bind_defaults()
    configured.add(sys.stdout, format=io_log_format, level=level, enqueue=True)

    # hourly files kept for a week while debugging
    if settings.DEBUG:
        configured.add(
            _log_file_path(),
            format=io_log_format,
            rotation='1 hour',
            retention='7 days',
            compression='gz',
            enqueue=True,
            level=level,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    return configured


custom_logger = _configure()
