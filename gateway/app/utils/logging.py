"""Logging setup with structured extras."""

import json
import logging
import sys

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class StructuredFormatter(logging.Formatter):
    """Formatter that appends the ``structured`` extra as compact JSON.

    Call sites attach data with ``logger.info(msg, extra={"structured": {...}})``.
    """

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        structured = getattr(record, "structured", None)
        if structured:
            message = f"{message} {json.dumps(structured, default=str, sort_keys=True)}"
        return message


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Args:
        level: Log level name (e.g. "INFO", "debug")
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter(DEFAULT_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper())
