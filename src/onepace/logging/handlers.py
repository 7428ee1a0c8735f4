"""JSON log output.

Each record becomes one line. The library item being resolved, when there
is one, is reported under "item" so log shippers can group every line
belonging to one media file.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord carries, plus those added by Formatter.format()
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", None, None).__dict__
) | {"message", "asctime"}

# Attributes set by ItemContextFilter
_ITEM_ATTRS = frozenset({"item_path", "operation", "item_tag"})


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Keys: timestamp (ISO-8601 UTC), level, message, logger, item
    ({"path", "operation"}), context (values passed via extra=) and
    exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        if record.name and record.name != "root":
            entry["logger"] = record.name

        item = _item_fields(record)
        if item:
            entry["item"] = item

        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS
            and key not in _ITEM_ATTRS
            and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _item_fields(record: logging.LogRecord) -> dict[str, str]:
    path = getattr(record, "item_path", None)
    if not path:
        return {}
    item = {"path": path}
    operation = getattr(record, "operation", None)
    if operation:
        item["operation"] = operation
    return item
