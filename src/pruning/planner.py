"""
Retention Planner — разбиение элементов на kept / discarded

Связывает внешний вход (пары identifier + timestamp) с ядром RetentionSet:
1. Нормализация элементов в RetentionItem (pydantic)
2. Построение RetentionSet из timestamps
3. retain(base, retain) → сохраняемые timestamps
4. Разбиение identifiers: kept / discarded

Элементы с одинаковым timestamp разделяют один TimeCode и поэтому
сохраняются или отбрасываются вместе.

Инкрементальный режим: retain(kept ∪ new_batch), где new_batch строго новее
всех ранее сохранённых элементов. Результат приближает прореживание всей
истории с нуля и почти всегда с ним совпадает, но не гарантированно:
ёмкость групп в allocate_exactly даёт точную cardinality ценой редких
расхождений (см. RetentionSet, инвариант 5).
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from src.core.contracts import validate_retention_plan, validate_retention_request
from src.core.domain.items import RetentionItem, RetentionPlan
from src.core.domain.retention_set import RetentionSet
from src.core.errors import ChronologyViolation
from src.pruning.policy import RetentionPolicy

logger = logging.getLogger(__name__)

ItemLike = Union[RetentionItem, Tuple[str, int], Mapping[str, Any]]


def _to_item(raw: ItemLike) -> RetentionItem:
    if isinstance(raw, RetentionItem):
        return raw
    if isinstance(raw, Mapping):
        return RetentionItem(**raw)
    identifier, timestamp = raw
    return RetentionItem(identifier=identifier, timestamp=timestamp)


def normalize_items(items: Iterable[ItemLike]) -> List[RetentionItem]:
    """
    Нормализация входа в RetentionItem с проверкой уникальности identifier.

    Raises:
        pydantic.ValidationError: если элемент не проходит валидацию модели
        ValueError: если identifier повторяется
    """
    normalized: List[RetentionItem] = []
    seen = set()
    for raw in items:
        item = _to_item(raw)
        if item.identifier in seen:
            raise ValueError(f"Duplicate item identifier: {item.identifier!r}")
        seen.add(item.identifier)
        normalized.append(item)
    return normalized


def _chronological(items: Iterable[RetentionItem]) -> Tuple[RetentionItem, ...]:
    return tuple(sorted(items, key=lambda item: (item.timestamp, item.identifier)))


# =============================================================================
# PLANNER
# =============================================================================


class RetentionPlanner:
    """Планировщик прореживания с фиксированной RetentionPolicy.

    Не выполняет I/O: только вычисляет разбиение. Удаление/перемещение
    отброшенных элементов — ответственность вызывающей стороны.
    """

    def __init__(self, policy: Optional[RetentionPolicy] = None):
        self.policy = policy or RetentionPolicy()

    def plan(self, items: Iterable[ItemLike]) -> RetentionPlan:
        """
        Разбиение элементов на kept / discarded.

        Args:
            items: RetentionItem, пары (identifier, timestamp) или mappings

        Returns:
            RetentionPlan с упорядоченными kept / discarded

        Raises:
            ValueError: если identifier повторяется
        """
        normalized = normalize_items(items)
        timestamps = RetentionSet(item.timestamp for item in normalized)
        retained = timestamps.retain(self.policy.base, self.policy.retain)

        kept = _chronological(item for item in normalized if item.timestamp in retained)
        discarded = _chronological(
            item for item in normalized if item.timestamp not in retained
        )

        logger.info(
            "Retention plan (base %d, retain %d): %d kept, %d discarded of %d item(s)",
            self.policy.base,
            self.policy.retain,
            len(kept),
            len(discarded),
            len(normalized),
        )
        for item in kept:
            logger.debug("Keep %s (timestamp %d)", item.identifier, item.timestamp)
        for item in discarded:
            logger.debug("Discard %s (timestamp %d)", item.identifier, item.timestamp)

        return RetentionPlan(
            base=self.policy.base,
            retain=self.policy.retain,
            kept=kept,
            discarded=discarded,
        )

    def plan_incremental(
        self, kept: Iterable[ItemLike], new_items: Iterable[ItemLike]
    ) -> RetentionPlan:
        """
        Прореживание ранее сохранённых элементов вместе с новой партией.

        Приближает plan() по всей истории: в редких случаях, когда группа
        разрядов переполняется, наборы kept могут различаться.

        Args:
            kept: Элементы, сохранённые предыдущим прореживанием
            new_items: Новая партия (строго новее всех kept)

        Returns:
            RetentionPlan по объединению kept ∪ new_items

        Raises:
            ChronologyViolation: если элемент новой партии не новее всех kept
        """
        previous: Sequence[RetentionItem] = normalize_items(kept)
        batch: Sequence[RetentionItem] = normalize_items(new_items)

        if previous and batch:
            newest_kept = max(item.timestamp for item in previous)
            oldest_new = min(item.timestamp for item in batch)
            if oldest_new <= newest_kept:
                raise ChronologyViolation(
                    f"New batch must be strictly newer than kept items: "
                    f"oldest new timestamp {oldest_new} <= newest kept {newest_kept}"
                )

        logger.debug(
            "Incremental pruning: %d kept item(s) + %d new item(s)",
            len(previous),
            len(batch),
        )
        return self.plan([*previous, *batch])


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def plan_retention(
    items: Iterable[ItemLike], policy: Optional[RetentionPolicy] = None
) -> RetentionPlan:
    """Разбиение элементов на kept / discarded с указанной policy."""
    return RetentionPlanner(policy).plan(items)


def plan_incremental(
    kept: Iterable[ItemLike],
    new_items: Iterable[ItemLike],
    policy: Optional[RetentionPolicy] = None,
) -> RetentionPlan:
    """Прореживание ранее сохранённых элементов вместе с более новой партией."""
    return RetentionPlanner(policy).plan_incremental(kept, new_items)


def plan_from_request(payload: Mapping[str, Any]) -> RetentionPlan:
    """
    RetentionPlan из JSON-запроса (контракт retention_request).

    Результат дополнительно проверяется контрактом retention_plan.

    Raises:
        jsonschema.ValidationError: если запрос не соответствует схеме
    """
    validate_retention_request(payload)
    policy = RetentionPolicy(**payload["policy"])
    plan = RetentionPlanner(policy).plan(payload["items"])
    validate_retention_plan(plan.to_contract())
    return plan
