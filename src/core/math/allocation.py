"""
Allocation — Exact Weighted Slot Allocation

Распределение свободных слотов сохранения между разрядными группами (buckets)
с геометрическими весами и точным двухпроходным балансированием.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. sum(allocation) == min(available, sum(capacities)) точно
2. allocation[d] <= capacity[d] для каждой группы
3. Результат детерминирован и не зависит от порядка digits на входе
4. Округление: round half away from zero (не banker's rounding)

ФОРМУЛЫ:
    weight(d) = base - d
    total_weight = base * (base + 1) / 2
    allocation[d] = round_half_away_from_zero(available * weight(d) / total_weight)

PASS 2:
    surplus > 0 → +1 по кругу, digits по убыванию (более свежие группы первыми)
    surplus < 0 → -1 по кругу, digits по возрастанию (более старые группы первыми)
"""

import math
from typing import Dict, Iterable, Mapping, Optional

from src.core.errors import validate_base

# =============================================================================
# ROUNDING
# =============================================================================


def round_half_away_from_zero(value: float) -> int:
    """
    Округление до ближайшего целого, половины — от нуля.

    Python round() использует banker's rounding (round(2.5) == 2), что меняет
    распределение излишка между группами, поэтому здесь явная реализация.

    Examples:
        >>> round_half_away_from_zero(2.5)
        3
        >>> round_half_away_from_zero(-2.5)
        -3
        >>> round_half_away_from_zero(0.49)
        0
    """
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


# =============================================================================
# WEIGHTS
# =============================================================================


def digit_weight(digit: int, base: int) -> int:
    """
    Вес разрядной группы: base - digit.

    Группы ближе к most recent (больший digit) получают меньший вес —
    most recent уже представляет эту полосу свежести.
    """
    return base - digit


def total_weight(base: int) -> int:
    """Сумма весов 1..base = base * (base + 1) / 2."""
    return base * (base + 1) // 2


# =============================================================================
# EXACT ALLOCATION
# =============================================================================


def allocate_exactly(
    available: int,
    base: int,
    digits: Iterable[int],
    capacities: Optional[Mapping[int, int]] = None,
) -> Dict[int, int]:
    """
    Двухпроходное точное распределение available слотов по разрядным группам.

    Args:
        available: Количество слотов для распределения (>= 0)
        base: Основание системы счисления (> 1)
        digits: Занятые разряды (значения в [0, base))
        capacities: Размеры групп (digit -> count). Без capacities группы
            считаются неограниченными.

    Returns:
        Словарь digit -> allocation для всех переданных digits.
        Пустой словарь, если available == 0 или digits пуст.

    Raises:
        InvalidBase: если base <= 1
        ValueError: если available < 0, digit вне [0, base) или capacity < 0
    """
    validate_base(base)
    if available < 0:
        raise ValueError(f"Available slots must be non-negative, got {available}")

    occupied = sorted(set(digits), reverse=True)
    if available == 0 or not occupied:
        return {}

    for digit in occupied:
        if not 0 <= digit < base:
            raise ValueError(f"Digit {digit} out of range for base {base}")

    if capacities is None:
        limits = {digit: available for digit in occupied}
    else:
        limits = {digit: capacities.get(digit, 0) for digit in occupied}
        if any(limit < 0 for limit in limits.values()):
            raise ValueError(f"Capacities must be non-negative, got {dict(limits)}")

    target = min(available, sum(limits.values()))

    # Pass 1: геометрическое распределение с округлением
    weights_total = total_weight(base)
    allocations: Dict[int, int] = {}
    for digit in occupied:
        share = available * digit_weight(digit, base) / weights_total
        allocations[digit] = min(round_half_away_from_zero(share), limits[digit])

    # Pass 2: излишек старшим разрядам, перерасход снимаем с младших
    surplus = target - sum(allocations.values())
    while surplus != 0:
        if surplus > 0:
            for digit in occupied:
                if surplus == 0:
                    break
                if allocations[digit] < limits[digit]:
                    allocations[digit] += 1
                    surplus -= 1
        else:
            for digit in reversed(occupied):
                if surplus == 0:
                    break
                if allocations[digit] > 0:
                    allocations[digit] -= 1
                    surplus += 1

    return allocations
