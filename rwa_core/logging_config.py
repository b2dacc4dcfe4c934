"""
Structured Logging Configuration Module

JSON log lines for asset operations. Every line carries the operation
context (who, what, which asset) as top-level keys so log pipelines can
filter on them without parsing messages.
"""

import logging
import json
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .errors import RwaError


# Context keys promoted to top-level JSON fields, in output order
CONTEXT_FIELDS = ("identity", "action", "resource", "asset", "error", "extra")


class JSONFormatter(logging.Formatter):
    """One JSON object per record"""

    def format(self, record):
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str = "INFO", logger_name: str = "rwa",
                  log_file: Optional[str] = None) -> logging.Logger:
    """
    Install the JSON handler on the application logger

    Calling it again replaces the handler rather than adding a second one.
    """
    logger = logging.getLogger(logger_name)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
    handler.setFormatter(JSONFormatter())

    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False
    return logger


def get_logger(name: str = "rwa") -> logging.Logger:
    return logging.getLogger(name)


def log_action(logger: logging.Logger, level: str, message: str,
               identity: Optional[str] = None, action: Optional[str] = None,
               resource: Optional[str] = None, asset: Optional[str] = None,
               extra: Optional[dict] = None, error: Optional[str] = None):
    """
    Log a message with operation context

    Args:
        logger: Logger instance
        level: Level name (info, warning, ...)
        message: Log message
        identity: Identity that authorized the operation
        action: Operation name, e.g. "mint"
        resource: Record acted upon, e.g. "unit_account:<address>"
        asset: Address of the asset involved
        extra: Additional structured data
        error: Error code of a rejected operation
    """
    context = {
        "identity": identity,
        "action": action,
        "resource": resource,
        "asset": asset,
        "error": error,
        "extra": extra,
    }
    fields = {key: value for key, value in context.items() if value}
    logger.log(getattr(logging, level.upper()), message, extra=fields)


@contextmanager
def rejections_logged(logger: logging.Logger, action: str, identity: Optional[str] = None,
                      resource: Optional[str] = None, asset: Optional[str] = None,
                      extra: Optional[dict] = None):
    """
    Log an RwaError raised inside the block at warning, then re-raise it

    Usage:
        with rejections_logged(self.logger, "mint", identity=owner, asset=address):
            ...
    """
    try:
        yield
    except RwaError as e:
        log_action(
            logger, "warning", f"{action} rejected: {e}",
            identity=identity, action=action, resource=resource, asset=asset,
            extra=extra, error=e.code
        )
        raise
