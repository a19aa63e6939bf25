import logging
import os
import sys
import uuid
from contextvars import ContextVar
from logging.handlers import RotatingFileHandler
from typing import Optional

from .configs import FlexHttpSettings, load_settings

trace_id_var: ContextVar[Optional[str]] = ContextVar("flex_http_trace_id", default=None)


def trace_id_generator() -> str:
    return str(uuid.uuid4().hex)


def init_logging(settings: FlexHttpSettings | None = None) -> None:
    settings = settings or load_settings()
    log_handlers: list[logging.Handler] = []
    log_file = settings.LOG_FILE
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        log_handlers.append(
            RotatingFileHandler(
                filename=log_file,
                maxBytes=settings.LOG_FILE_MAX_SIZE * 1024 * 1024,
                backupCount=settings.LOG_FILE_BACKUP_COUNT,
            )
        )

    log_handlers.append(logging.StreamHandler(sys.stdout))

    for handler in log_handlers:
        handler.addFilter(RequestIdFilter())

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format=settings.LOG_FORMAT,
        datefmt=settings.LOG_DATEFORMAT,
        handlers=log_handlers,
        force=True,
    )

    for handler in logging.root.handlers:
        if handler.formatter:
            handler.formatter = RequestIdFormatter(settings.LOG_FORMAT, settings.LOG_DATEFORMAT)


class RequestIdFilter(logging.Filter):
    # Makes the trace id of the current call available to the log format.
    def filter(self, record):
        record.trace_id = trace_id_var.get()
        return True


class RequestIdFormatter(logging.Formatter):
    def format(self, record):
        if not hasattr(record, "trace_id"):
            record.trace_id = ""
        return super().format(record)
