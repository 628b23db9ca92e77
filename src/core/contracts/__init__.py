"""
Contract Validation Module

Модуль для валидации JSON контрактов прореживания (policy, request, plan).
"""

from .validators import (
    RETENTION_CONTRACTS,
    ContractValidator,
    SchemaLoader,
    get_validator,
    validate_retention_plan,
    validate_retention_policy,
    validate_retention_request,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    # Functions
    "get_validator",
    "validate_retention_policy",
    "validate_retention_request",
    "validate_retention_plan",
    # Constants
    "RETENTION_CONTRACTS",
]
