"""
Domain models and value objects.

Contains fundamental domain entities like TimeCode, RetentionSet, RetentionItem.
"""

from src.core.errors import (
    ChronologyViolation,
    InvalidBase,
    InvalidDigitPosition,
    InvalidRetainCount,
    InvalidTimeCode,
    RetentionContractViolation,
    validate_base,
    validate_retain_count,
)
from src.core.domain.items import RetentionItem, RetentionPlan
from src.core.domain.retention_set import RetentionSet
from src.core.domain.time_code import DIGIT_ALPHABET, MAX_RENDER_BASE, TimeCode

__all__ = [
    # Errors
    "RetentionContractViolation",
    "InvalidBase",
    "InvalidRetainCount",
    "InvalidDigitPosition",
    "InvalidTimeCode",
    "ChronologyViolation",
    "validate_base",
    "validate_retain_count",
    # TimeCode
    "DIGIT_ALPHABET",
    "MAX_RENDER_BASE",
    "TimeCode",
    # RetentionSet
    "RetentionSet",
    # Items
    "RetentionItem",
    "RetentionPlan",
]
