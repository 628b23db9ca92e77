"""Logging — конфигурация логирования для слоя планирования и его вызывающих."""

from __future__ import annotations

import logging
from typing import TextIO

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(verbose: bool, stream: TextIO | None = None) -> logging.Handler:
    """
    Установка единственного форматированного stream handler на root logger.

    Предыдущие handlers root logger удаляются и закрываются: повторный
    вызов не дублирует вывод.

    Args:
        verbose: DEBUG при True, иначе INFO
        stream: Поток вывода (по умолчанию sys.stderr)

    Returns:
        Установленный handler
    """
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    root.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console = logging.StreamHandler(stream)
    console.setFormatter(formatter)
    console.setLevel(level)
    root.addHandler(console)

    logging.captureWarnings(True)
    return console


__all__ = ["configure_logging", "LOG_FORMAT", "LOG_DATE_FORMAT"]
