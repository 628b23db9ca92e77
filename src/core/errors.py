"""
Retention Errors — нарушения контракта ядра прореживания

Все ошибки ядра — это нарушения граничного контракта (ошибки конфигурации
или программиста), а не восстанавливаемые runtime-условия.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Ошибки выбрасываются немедленно (fail-fast)
2. Некорректные параметры никогда не "клампятся" молча
3. Все ошибки наследуют ValueError (совместимость с pydantic/валидаторами)
"""


# =============================================================================
# EXCEPTIONS
# =============================================================================


class RetentionContractViolation(ValueError):
    """Базовое нарушение контракта ядра прореживания."""

    pass


class InvalidBase(RetentionContractViolation):
    """
    Недопустимое основание системы счисления.

    Основание должно быть > 1. Для текстового рендеринга дополнительно
    ограничено сверху (digits 0-9a-z).
    """

    pass


class InvalidRetainCount(RetentionContractViolation):
    """Недопустимое количество сохраняемых элементов (retain должно быть > 0)."""

    pass


class InvalidDigitPosition(RetentionContractViolation):
    """Недопустимая позиция разряда (position должна быть >= 0)."""

    pass


class InvalidTimeCode(RetentionContractViolation):
    """
    Недопустимое значение TimeCode.

    Отрицательные timestamps отклоняются: извлечение разрядов для них
    нарушает positional-prefix свойство на границе знака.
    """

    pass


class ChronologyViolation(RetentionContractViolation):
    """
    Нарушение хронологии при инкрементальном прореживании.

    Новая партия должна быть строго новее всех ранее сохранённых элементов,
    иначе объединение kept ∪ new_items не продолжает историю.
    """

    pass


# =============================================================================
# VALIDATION HELPERS
# =============================================================================


def validate_base(base: int) -> None:
    """
    Проверка основания системы счисления.

    Raises:
        InvalidBase: если base <= 1
    """
    if base <= 1:
        raise InvalidBase(f"Base must be greater than 1, got {base}")


def validate_retain_count(retain: int) -> None:
    """
    Проверка количества сохраняемых элементов.

    Raises:
        InvalidRetainCount: если retain <= 0
    """
    if retain <= 0:
        raise InvalidRetainCount(f"Must retain at least one item, got {retain}")
