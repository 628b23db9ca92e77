"""
TimeCode — Timestamp Digit View

Неизменяемое целое значение (timestamp или любой упорядоченный целочисленный
ключ), интерпретируемое как число в системе счисления с основанием base.
Каждый разряд соответствует "временному масштабу": чем старше разряд, тем
грубее граница во времени.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Равенство, хэш и порядок определяются только raw value
2. value >= 0 (отрицательные значения отклоняются InvalidTimeCode)
3. Positional-prefix свойство: если два значения совпадают во всех разрядах
   выше позиции p, то и любое значение между ними совпадает в этих разрядах

ФОРМУЛЫ:
    digit(p, base) = floor(value / base^p) mod base
    digit_count(base) = min k >= 1 такое, что value < base^k
"""

import string
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Final, Optional

from src.core.errors import (
    InvalidBase,
    InvalidDigitPosition,
    InvalidTimeCode,
    validate_base,
)

# =============================================================================
# CONSTANTS
# =============================================================================

# Алфавит разрядов для текстового рендеринга (как у int(x, base))
DIGIT_ALPHABET: Final[str] = string.digits + string.ascii_lowercase

# Максимальное основание, которое можно отрендерить алфавитом 0-9a-z
MAX_RENDER_BASE: Final[int] = len(DIGIT_ALPHABET)

_EPOCH: Final[datetime] = datetime(1970, 1, 1, tzinfo=timezone.utc)


# =============================================================================
# TIME CODE
# =============================================================================


@dataclass(frozen=True, order=True)
class TimeCode:
    """
    Timestamp, рассматриваемый как последовательность разрядов base-N.

    Immutable (frozen=True). Сравнение и сортировка по value.

    Examples:
        >>> TimeCode(42).digit(1, base=10)
        4
        >>> TimeCode(42).digit_count(base=2)
        6
        >>> TimeCode(42).most_significant_differing_digit_position(TimeCode(45), base=2)
        2
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidTimeCode(f"TimeCode value must be an integer, got {self.value!r}")
        if self.value < 0:
            raise InvalidTimeCode(
                f"TimeCode value must be non-negative, got {self.value}"
            )

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_datetime(cls, moment: datetime) -> "TimeCode":
        """
        TimeCode из datetime: целые секунды с Unix epoch.

        Naive datetime трактуется как UTC. Дробная часть секунд отбрасывается.
        """
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        delta = moment - _EPOCH
        return cls(delta.days * 86400 + delta.seconds)

    @classmethod
    def from_iso8601(cls, text: str) -> "TimeCode":
        """TimeCode из ISO 8601 строки (например '2024-03-20T12:00:00Z')."""
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return cls.from_datetime(datetime.fromisoformat(text))

    # -------------------------------------------------------------------------
    # Digit view
    # -------------------------------------------------------------------------

    def digit(self, position: int, base: int) -> int:
        """
        Разряд на позиции position (0 = младший).

        Args:
            position: Позиция разряда (>= 0)
            base: Основание системы счисления (> 1)

        Returns:
            Значение разряда в диапазоне [0, base)

        Raises:
            InvalidBase: если base <= 1
            InvalidDigitPosition: если position < 0
        """
        validate_base(base)
        if position < 0:
            raise InvalidDigitPosition(
                f"Digit position must be non-negative, got {position}"
            )
        return (self.value // base**position) % base

    def digit_count(self, base: int) -> int:
        """
        Минимальное количество разрядов в base-N (0 занимает один разряд).

        Raises:
            InvalidBase: если base <= 1
        """
        validate_base(base)
        remaining = self.value
        count = 1
        while remaining >= base:
            remaining //= base
            count += 1
        return count

    def most_significant_differing_digit_position(
        self, other: "TimeCode", base: int
    ) -> Optional[int]:
        """
        Старшая позиция, на которой разряды двух значений различаются.

        Args:
            other: TimeCode для сравнения
            base: Основание системы счисления (> 1)

        Returns:
            Позиция (0-based) или None, если значения равны

        Raises:
            InvalidBase: если base <= 1
        """
        validate_base(base)
        if self.value == other.value:
            return None

        width = max(self.digit_count(base), other.digit_count(base))
        for position in range(width - 1, -1, -1):
            if self.digit(position, base) != other.digit(position, base):
                return position

        # Недостижимо: различные значения различаются хотя бы в одном разряде
        raise AssertionError("distinct values must differ in some digit")

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def to_digits(self, base: int, width: Optional[int] = None) -> str:
        """
        Строка разрядов base-N (0-9a-z), дополненная нулями слева до width.

        Raises:
            InvalidBase: если base <= 1 или base > MAX_RENDER_BASE
        """
        validate_base(base)
        if base > MAX_RENDER_BASE:
            raise InvalidBase(
                f"Cannot render base {base}: at most {MAX_RENDER_BASE} digit symbols"
            )

        digits = []
        remaining = self.value
        while True:
            remaining, digit = divmod(remaining, base)
            digits.append(DIGIT_ALPHABET[digit])
            if remaining == 0:
                break
        rendered = "".join(reversed(digits))

        if width is not None:
            rendered = rendered.rjust(width, "0")
        return rendered

    def __str__(self) -> str:
        return str(self.value)
