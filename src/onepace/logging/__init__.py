"""Logging setup for onepace.

- configure_logging: handler/formatter setup from LoggingConfig
- JSONFormatter: structured output
- item_context / ItemContextFilter: per-item context on log records
"""

from onepace.logging.config import configure_logging
from onepace.logging.context import ItemContextFilter, get_item_context, item_context
from onepace.logging.handlers import JSONFormatter

__all__ = [
    "ItemContextFilter",
    "JSONFormatter",
    "configure_logging",
    "get_item_context",
    "item_context",
]
