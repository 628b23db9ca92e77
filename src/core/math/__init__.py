"""
Core math modules для sukashi

Целочисленные примитивы распределения слотов сохранения.
"""

# Allocation
from src.core.math.allocation import (
    allocate_exactly,
    digit_weight,
    round_half_away_from_zero,
    total_weight,
)

__all__ = [
    # Allocation: rounding
    "round_half_away_from_zero",
    # Allocation: weights
    "digit_weight",
    "total_weight",
    # Allocation: exact distribution
    "allocate_exactly",
]
