"""
Тесты для configure_logging
"""

import io
import logging

import pytest

from src.core.logging_utils import LOG_FORMAT, configure_logging


@pytest.fixture
def restore_root_logger():
    """Сохраняет и восстанавливает handlers / level root logger."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    logging.captureWarnings(False)


class TestConfigureLogging:
    """Тесты конфигурации логирования"""

    def test_info_level_by_default(self, restore_root_logger: logging.Logger) -> None:
        stream = io.StringIO()
        handler = configure_logging(verbose=False, stream=stream)

        assert restore_root_logger.level == logging.INFO
        assert handler.level == logging.INFO

        logging.getLogger("src.pruning.planner").debug("hidden")
        logging.getLogger("src.pruning.planner").info("visible")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "[INFO] src.pruning.planner: visible" in output

    def test_verbose_enables_debug(self, restore_root_logger: logging.Logger) -> None:
        stream = io.StringIO()
        configure_logging(verbose=True, stream=stream)

        logging.getLogger("sukashi.test").debug("details")

        assert restore_root_logger.level == logging.DEBUG
        assert "[DEBUG] sukashi.test: details" in stream.getvalue()

    def test_repeated_calls_replace_handler(self, restore_root_logger: logging.Logger) -> None:
        first = configure_logging(verbose=False, stream=io.StringIO())
        second = configure_logging(verbose=False, stream=io.StringIO())

        assert first not in restore_root_logger.handlers
        assert restore_root_logger.handlers == [second]

    def test_formatter(self, restore_root_logger: logging.Logger) -> None:
        handler = configure_logging(verbose=False, stream=io.StringIO())
        assert handler.formatter is not None
        assert handler.formatter._fmt == LOG_FORMAT
