"""Library item context for structured logging.

The host resolves one library item at a time per thread. item_context()
records which item that is in contextvars so every log record emitted while
resolving it carries the item path.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Generator

_item_path: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "item_path", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)


@contextmanager
def item_context(
    item_path: Path | str | None, operation: str | None = None
) -> Generator[None, None, None]:
    """Tag log records with the item being resolved.

    Args:
        item_path: Path or name of the library item.
        operation: Short label such as "episode" or "image".

    Example:
        with item_context("/media/One Pace/Romance Dawn/01.mkv", "episode"):
            logger.info("Resolving")  # Record carries item_path
    """
    path_token = _item_path.set(str(item_path) if item_path is not None else None)
    op_token = _operation.set(operation)
    try:
        yield
    finally:
        _item_path.reset(path_token)
        _operation.reset(op_token)


def get_item_context() -> tuple[str | None, str | None]:
    """Return (item_path, operation) for the current context."""
    return _item_path.get(), _operation.get()


class ItemContextFilter(logging.Filter):
    """Logging filter that injects item context into log records.

    Adds item_path and operation attributes plus an item_tag for the text
    format, e.g. "[episode:01.mkv] ".
    """

    def filter(self, record: logging.LogRecord) -> bool:
        item_path, operation = get_item_context()
        record.item_path = item_path
        record.operation = operation

        if item_path:
            name = Path(item_path).name or item_path
            record.item_tag = f"[{operation}:{name}] " if operation else f"[{name}] "
        else:
            record.item_tag = ""

        return True
