"""Pruning — планирование прореживания поверх ядра RetentionSet.

- RetentionPolicy: параметры base / retain и их загрузка
- RetentionPlanner: разбиение (identifier, timestamp) на kept / discarded
- mermaid_diagram: визуализация рекурсивных решений
"""

from .planner import (
    RetentionPlanner,
    normalize_items,
    plan_from_request,
    plan_incremental,
    plan_retention,
)
from .policy import DEFAULT_BASE, DEFAULT_RETAIN, RetentionPolicy, load_policy
from .visualization import mermaid_diagram

__all__ = [
    "RetentionPlanner",
    "normalize_items",
    "plan_from_request",
    "plan_incremental",
    "plan_retention",
    "DEFAULT_BASE",
    "DEFAULT_RETAIN",
    "RetentionPolicy",
    "load_policy",
    "mermaid_diagram",
]
