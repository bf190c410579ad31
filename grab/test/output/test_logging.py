from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from grab.output.logging import configure_logging


@pytest.fixture
def root_logger() -> Iterator[logging.Logger]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestConfigureLogging:
    def test_installs_single_handler(self, root_logger: logging.Logger) -> None:
        configure_logging("INFO")
        configure_logging("DEBUG")

        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0], logging.StreamHandler)
        assert root_logger.level == logging.DEBUG

    def test_default_is_warning(self, root_logger: logging.Logger) -> None:
        configure_logging()
        assert root_logger.level == logging.WARNING

    def test_debug_format_has_location(self, root_logger: logging.Logger) -> None:
        configure_logging("DEBUG")
        formatter = root_logger.handlers[0].formatter
        assert formatter is not None
        assert "%(lineno)d" in (formatter._fmt or "")
