"""
RetentionItem / RetentionPlan — Модели входа и выхода прореживания

Immutable Pydantic модели:
- RetentionItem: пара (opaque identifier, integer timestamp)
- RetentionPlan: разбиение элементов на kept / discarded

Полная совместимость с JSON Schema (src/core/contracts/schema/retention_plan.json).
"""

from typing import Any, Dict, FrozenSet, Tuple

from pydantic import BaseModel, Field, PrivateAttr, model_validator


# =============================================================================
# RETENTION ITEM
# =============================================================================


class RetentionItem(BaseModel):
    """
    Элемент-кандидат на прореживание.

    identifier непрозрачен для ядра (имя файла, id снапшота и т.п.).
    timestamp — целые секунды (или любой упорядоченный целочисленный ключ).
    """

    identifier: str = Field(..., min_length=1, description="Непрозрачный идентификатор")
    timestamp: int = Field(..., ge=0, description="Timestamp элемента (>= 0)")

    model_config = {"frozen": True}


# =============================================================================
# RETENTION PLAN
# =============================================================================


class RetentionPlan(BaseModel):
    """
    Результат прореживания: какие элементы сохранить, какие отбросить.

    Immutable модель (frozen=True). kept и discarded упорядочены от старых
    к новым, при равном timestamp — по identifier.
    """

    schema_version: str = Field(default="1", pattern="^1$", description="Версия схемы")
    base: int = Field(..., gt=1, description="Основание системы счисления")
    retain: int = Field(..., gt=0, description="Целевое количество сохраняемых timestamps")
    kept: Tuple[RetentionItem, ...] = Field(default=(), description="Сохраняемые элементы")
    discarded: Tuple[RetentionItem, ...] = Field(
        default=(), description="Отбрасываемые элементы"
    )

    _kept_identifier_set: FrozenSet[str] = PrivateAttr(default=frozenset())

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_partition(self) -> "RetentionPlan":
        """kept и discarded не пересекаются по identifier."""
        kept_ids = {item.identifier for item in self.kept}
        overlap = kept_ids.intersection(item.identifier for item in self.discarded)
        if overlap:
            raise ValueError(
                f"Identifiers cannot be both kept and discarded: {sorted(overlap)}"
            )
        return self

    def model_post_init(self, __context: Any) -> None:
        self._kept_identifier_set = frozenset(item.identifier for item in self.kept)

    @property
    def kept_identifiers(self) -> Tuple[str, ...]:
        return tuple(item.identifier for item in self.kept)

    @property
    def discarded_identifiers(self) -> Tuple[str, ...]:
        return tuple(item.identifier for item in self.discarded)

    @property
    def kept_timestamps(self) -> Tuple[int, ...]:
        """Различные timestamps сохраняемых элементов (по возрастанию)."""
        return tuple(sorted({item.timestamp for item in self.kept}))

    @property
    def discarded_timestamps(self) -> Tuple[int, ...]:
        return tuple(sorted({item.timestamp for item in self.discarded}))

    @property
    def kept_count(self) -> int:
        return len(self.kept)

    @property
    def discarded_count(self) -> int:
        return len(self.discarded)

    def is_kept(self, identifier: str) -> bool:
        """O(1) проверка по множеству identifiers, собранному при создании."""
        return identifier in self._kept_identifier_set

    def to_contract(self) -> Dict[str, Any]:
        """Сериализация в JSON-совместимый dict (контракт retention_plan)."""
        return self.model_dump(mode="json")
