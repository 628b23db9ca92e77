"""
RetentionPolicy — Конфигурация прореживания

Параметры алгоритма sukashi:
- base: основание системы счисления (временные масштабы разрядов)
- retain: сколько timestamps сохранить

Источники конфигурации:
- keyword arguments
- mapping (from_mapping), валидируется JSON Schema retention_policy
- JSON файл (load_policy)
"""

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Final, Mapping

from src.core.contracts import validate_retention_policy
from src.core.errors import validate_base, validate_retain_count

# =============================================================================
# DEFAULTS
# =============================================================================

# Двоичные разряды: каждый уровень делит интервал пополам
DEFAULT_BASE: Final[int] = 2

DEFAULT_RETAIN: Final[int] = 10


# =============================================================================
# POLICY
# =============================================================================


@dataclass(frozen=True)
class RetentionPolicy:
    """Конфигурация прореживания (base, retain).

    Raises:
        InvalidBase: если base <= 1
        InvalidRetainCount: если retain <= 0
    """

    base: int = DEFAULT_BASE
    retain: int = DEFAULT_RETAIN

    def __post_init__(self) -> None:
        validate_base(self.base)
        validate_retain_count(self.retain)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RetentionPolicy":
        """
        Policy из mapping; отсутствующие ключи берутся по умолчанию.

        Raises:
            jsonschema.ValidationError: если mapping не соответствует схеме
        """
        validate_retention_policy(data)
        return cls(**data)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def load_policy(path: Path) -> RetentionPolicy:
    """
    Загрузка RetentionPolicy из JSON файла.

    Raises:
        FileNotFoundError: если файл не найден
        json.JSONDecodeError: если файл не является валидным JSON
        jsonschema.ValidationError: если содержимое не соответствует схеме
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    validate_retention_policy(data)
    return RetentionPolicy(**data)
