"""JSON log output shared by the worker and the API."""

import logging
import os
import sys

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(trace_id)s %(span_id)s"

_QUIET_LOGGERS = {"pika": logging.WARNING, "httpx": logging.WARNING}
_UVICORN_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")


def build_formatter(service_name: str) -> jsonlogger.JsonFormatter:
    """
    One JSON object per record, tagged with the emitting service.

    ``trace_id`` and ``span_id`` are filled in by ddtrace log injection and are
    null outside a trace.
    """
    return jsonlogger.JsonFormatter(
        LOG_FORMAT,
        rename_fields={"levelname": "level", "asctime": "timestamp"},
        static_fields={"service": service_name},
    )


def setup_logging(service_name: str, level: int | str | None = None) -> logging.Logger:
    """
    Routes the root logger and uvicorn's loggers to stdout as JSON.

    Args:
        service_name: Written to every record as ``service``.
        level: Overrides the ``LOG_LEVEL`` environment variable (default INFO).

    Returns:
        The configured root logger.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO").upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter(service_name))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for name in _UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.setLevel(level)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)

    return root_logger
