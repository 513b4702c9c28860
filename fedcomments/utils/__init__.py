"""Utility modules for the comment analysis API.

- **errors** -- Exception hierarchy rooted at FedCommentsError; each class
  carries the HTTP status code the middleware maps it to.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **json_fields** -- Tolerant JSON blob parsing and priority-chain field
  resolution over schema-less attribute mappings.
"""

from fedcomments.utils.errors import (
    CommentNotFoundError,
    ConfigurationError,
    ExportTooLargeError,
    FedCommentsError,
    StorageError,
)
from fedcomments.utils.json_fields import parse_json_object, resolve_field
from fedcomments.utils.logging import configure_logging, get_logger

__all__ = [
    "CommentNotFoundError",
    "ConfigurationError",
    "ExportTooLargeError",
    "FedCommentsError",
    "StorageError",
    "configure_logging",
    "get_logger",
    "parse_json_object",
    "resolve_field",
]
