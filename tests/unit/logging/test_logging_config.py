"""Unit tests for configure_logging and JSONFormatter."""

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from onepace.config.models import LoggingConfig
from onepace.logging import (
    ItemContextFilter,
    JSONFormatter,
    configure_logging,
    item_context,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Remove handlers installed by configure_logging after each test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if any(isinstance(f, ItemContextFilter) for f in handler.filters):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def _installed() -> list[logging.Handler]:
    return [
        h
        for h in logging.getLogger().handlers
        if any(isinstance(f, ItemContextFilter) for f in h.filters)
    ]


class TestConfigureLogging:
    def test_stderr_only_by_default(self) -> None:
        handlers = configure_logging(LoggingConfig(level="debug"))

        assert logging.getLogger().level == logging.DEBUG
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert _installed() == handlers

    def test_keeps_host_handlers(self) -> None:
        host_handler = logging.NullHandler()
        root = logging.getLogger()
        root.addHandler(host_handler)
        try:
            configure_logging(LoggingConfig())
            configure_logging(LoggingConfig())

            assert host_handler in root.handlers
            assert len(_installed()) == 1
        finally:
            root.removeHandler(host_handler)

    def test_unwritable_file_falls_back_to_stderr(self, temp_dir: Path) -> None:
        blocker = temp_dir / "not-a-dir"
        blocker.write_text("")

        handlers = configure_logging(LoggingConfig(file=blocker / "onepace.log"))

        assert [type(h) for h in handlers] == [logging.StreamHandler]

    def test_file_handler(self, temp_dir: Path) -> None:
        log_file = temp_dir / "logs" / "onepace.log"
        configure_logging(LoggingConfig(file=log_file, format="json"))

        logging.getLogger("onepace.test").warning("hello %s", "world")
        for handler in logging.getLogger().handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["message"] == "hello world"
        assert entry["level"] == "WARNING"

    def test_include_stderr_with_file(self, temp_dir: Path) -> None:
        handlers = configure_logging(
            LoggingConfig(file=temp_dir / "onepace.log", include_stderr=True)
        )
        assert len(handlers) == 2
        assert isinstance(handlers[0], RotatingFileHandler)

    def test_quiets_httpx(self) -> None:
        configure_logging(LoggingConfig(level="debug"))
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_invalid_level_rejected(self) -> None:
        with pytest.raises(ValueError, match="level"):
            LoggingConfig(level="verbose")


class TestJSONFormatter:
    def _format(self, **extra) -> dict:
        record = logging.LogRecord(
            "onepace.catalog", logging.INFO, __file__, 10, "fetched %d", (3,), None
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return json.loads(JSONFormatter().format(record))

    def test_basic_fields(self) -> None:
        entry = self._format()

        assert entry["message"] == "fetched 3"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "onepace.catalog"
        assert "timestamp" in entry
        assert "context" not in entry
        assert "item" not in entry

    def test_extra_and_item_context(self) -> None:
        entry = self._format(
            version=7, item_path="/media/01.mkv", operation="episode", item_tag="x"
        )

        assert entry["context"] == {"version": 7}
        assert entry["item"] == {"path": "/media/01.mkv", "operation": "episode"}

    def test_item_without_operation(self) -> None:
        entry = self._format(item_path="One Pace", operation=None)

        assert entry["item"] == {"path": "One Pace"}

    def test_context_filter_integration(self, temp_dir: Path) -> None:
        log_file = temp_dir / "onepace.log"
        configure_logging(LoggingConfig(file=log_file, format="json"))

        with item_context("/media/Romance Dawn/01.mkv", "episode"):
            logging.getLogger("onepace.test").info("resolving")
        for handler in logging.getLogger().handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert entry["item"]["path"] == "/media/Romance Dawn/01.mkv"
        assert entry["item"]["operation"] == "episode"
