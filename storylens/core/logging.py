"""
Logging setup for the StoryLens service.

Every record is stamped with the current request id and the configured
generation provider so a single review request can be followed from the
upload through the upstream call to the analysis summary.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from storylens.core.config import settings
from storylens.core.error_handling import request_id_var

SERVICE_NAME = "storylens"

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(provider)s] %(message)s"

# Third-party loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "google_genai", "multipart")


class RequestContextFilter(logging.Filter):
    """Attach request_id and provider to each record."""

    def __init__(self, provider: str):
        super().__init__()
        self.provider = provider

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or ""
        record.provider = self.provider
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line; Korean text is written unescaped."""

    def __init__(self, include_request_id: bool = True):
        super().__init__()
        self.include_request_id = include_request_id

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "service": SERVICE_NAME,
            "level": record.levelname,
            "logger": record.name,
            "provider": getattr(record, "provider", ""),
            "message": record.getMessage(),
        }
        if self.include_request_id and getattr(record, "request_id", ""):
            payload["request_id"] = record.request_id
        if hasattr(record, "extra_fields"):
            payload.update(record.extra_fields)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _build_formatter(fmt: str, include_request_id: bool) -> logging.Formatter:
    if fmt == "json":
        return JSONFormatter(include_request_id=include_request_id)
    text_format = TEXT_FORMAT
    if include_request_id:
        text_format += " - request_id=%(request_id)s"
    return logging.Formatter(text_format)


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Configure the root logger to write to stdout.

    Args:
        level: Log level name (defaults to LOG_LEVEL)
        fmt: "text" or "json" (defaults to LOG_FORMAT)
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    fmt = (fmt or settings.LOG_FORMAT).lower()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter(fmt, settings.LOG_INCLUDE_REQUEST_ID))
    handler.addFilter(RequestContextFilter(settings.GENERATION_PROVIDER.lower()))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(log_level)
    logging.getLogger("uvicorn.error").setLevel(log_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
