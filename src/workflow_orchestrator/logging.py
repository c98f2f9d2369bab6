"""JSON-lines logging for the workflow store and its front ends.

Store operations log their outcome with the ids they touched passed through
``extra=``. The formatter lifts those ids (``template_id``, ``instance_id``,
``approval_id``, ``step_id``, ``user_id``) to top-level keys, so one workflow's
history can be pulled out of the log with a single field filter. Any other
``extra=`` values are grouped under ``"extra"``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries; anything else came in through extra=.
_STANDARD_RECORD_ATTRS: frozenset[str] = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}

CORRELATION_FIELDS: tuple[str, ...] = (
    "template_id",
    "instance_id",
    "approval_id",
    "step_id",
    "user_id",
)

# Access logs from the REST server and its test client.
_QUIET_LOGGERS = ("httpx", "uvicorn.access")


class JsonFormatter(logging.Formatter):
    """One JSON object per record, workflow ids at the top level."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        fields = {
            key: value
            for key, value in vars(record).items()
            if key not in _STANDARD_RECORD_ATTRS and not key.startswith("_")
        }

        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CORRELATION_FIELDS:
            if name in fields:
                entry[name] = fields.pop(name)
        if fields:
            entry["extra"] = fields
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Datetimes and other values json cannot encode render through str().
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Send JSON lines to stdout at ``level``, replacing any earlier setup."""

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))
