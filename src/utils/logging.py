"""Structured JSON logging configuration."""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Dict, Any

SERVICE_NAME = "neurosense-api"


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    # Standard LogRecord attributes that should not be included as extra fields
    _STANDARD_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
        'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname',
        'process', 'processName', 'relativeCreated', 'thread', 'threadName',
        'exc_info', 'exc_text', 'stack_info', 'taskName'
    }

    def __init__(self, service: str = SERVICE_NAME):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # logger.info("...", extra={"userId": ...}) puts userId straight on the record
        for key, value in record.__dict__.items():
            if key not in self._STANDARD_ATTRS and key not in log_data and not callable(value):
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_structured_logging(level: str | None = None):
    """Configure structured JSON logging for the application.

    Level comes from the argument, then LOG_LEVEL, then INFO.
    """
    level_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()

    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))
    root_logger.handlers = [handler]

    # Keep uvicorn's access log in the same format, warnings only
    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.handlers = [handler]
    uvicorn_access.setLevel(logging.WARNING)
