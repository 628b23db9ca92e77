"""
JSON Schema Contract Validators

Валидация JSON документов прореживания по контрактам из schema/.

Контракты (RETENTION_CONTRACTS):
- retention_policy  — параметры base / retain (все поля опциональны)
- retention_request — полная policy + items для разбиения
- retention_plan    — результат: kept / discarded
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Final, Iterator, Mapping, Optional, Tuple

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

RETENTION_CONTRACTS: Final[Tuple[str, ...]] = (
    "retention_policy",
    "retention_request",
    "retention_plan",
)

SCHEMA_DIR: Final[Path] = Path(__file__).parent / "schema"


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema с meta-валидацией и кэшем.

    По умолчанию читает каталог schema/ рядом с модулем (package data).
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = schema_dir or SCHEMA_DIR
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка схемы по имени (без расширения .json).

        Raises:
            FileNotFoundError: если файл схемы не найден
            json.JSONDecodeError: если файл не является валидным JSON
            ValueError: если документ не является валидной JSON Schema
        """
        cached = self._schemas.get(schema_name)
        if cached is not None:
            return cached

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}")

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATOR
# =============================================================================


class ContractValidator:
    """
    Валидатор одного контракта прореживания.

    Args:
        contract: Имя контракта из RETENTION_CONTRACTS

    Raises:
        ValueError: если контракт неизвестен
    """

    def __init__(self, contract: str, loader: Optional[SchemaLoader] = None):
        if contract not in RETENTION_CONTRACTS:
            raise ValueError(
                f"Unknown retention contract {contract!r}, "
                f"expected one of {', '.join(RETENTION_CONTRACTS)}"
            )
        self.contract = contract
        self.schema = (loader or _SCHEMA_LOADER).load_schema(contract)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, data: Mapping[str, Any]) -> None:
        """
        Raises:
            ValidationError: если документ не соответствует контракту
        """
        self._validator.validate(data)

    def is_valid(self, data: Mapping[str, Any]) -> bool:
        return self._validator.is_valid(data)

    def iter_errors(self, data: Mapping[str, Any]) -> Iterator[ValidationError]:
        """Все нарушения контракта, а не только первое."""
        return self._validator.iter_errors(data)


@lru_cache(maxsize=None)
def get_validator(contract: str) -> ContractValidator:
    """Общий (кэшированный) валидатор контракта."""
    return ContractValidator(contract)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_retention_policy(data: Mapping[str, Any]) -> None:
    get_validator("retention_policy").validate(data)


def validate_retention_request(data: Mapping[str, Any]) -> None:
    get_validator("retention_request").validate(data)


def validate_retention_plan(data: Mapping[str, Any]) -> None:
    """
    Raises:
        ValidationError: если план не соответствует контракту retention_plan
    """
    get_validator("retention_plan").validate(data)
