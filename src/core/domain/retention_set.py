"""
RetentionSet — Упорядоченное множество TimeCode и алгоритм прореживания

Неизменяемая, дедуплицированная, отсортированная по возрастанию коллекция
TimeCode. Владеет рекурсивным алгоритмом сохранения (sukashi), алгеброй
множеств и текстовым рендерингом.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Элементы уникальны и хранятся по возрастанию; объект никогда не мутирует
2. retain(S, base, r) ⊆ S и содержит max(S)
3. |retain(S, base, r)| == min(r, |S|)
4. Детерминизм: результат не зависит от порядка элементов на входе
5. Chronological consistency (НЕ гарантируется, как и монотонность по r):
   для A, B с min(B) > max(A) обычно retain(A ∪ B) == retain(retain(A) ∪ B).
   Геометрическое распределение без ёмкостей теряет слоты переполненных
   групп и нарушает п. 3; с ёмкостями п. 3 точен, но в редких случаях
   (переполнение группы) два пути дают разные множества.

АЛГОРИТМ retain(base, count):
    1. O = oldest, R = most_recent; msd = старший различающийся разряд O и R
    2. R сохраняется всегда (один слот)
    3. Остальные элементы группируются по разряду на позиции msd
    4. Оставшиеся count - 1 слотов распределяются allocate_exactly
       (вес группы = base - digit, ёмкость = размер группы)
    5. Рекурсия в группы по убыванию digit, пока слоты не исчерпаны
"""

from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple, Union

from src.core.errors import validate_base, validate_retain_count
from src.core.domain.time_code import TimeCode
from src.core.math.allocation import allocate_exactly

TimeCodeLike = Union[TimeCode, int]


def _coerce(value: TimeCodeLike) -> TimeCode:
    if isinstance(value, TimeCode):
        return value
    return TimeCode(value)


def _merge(
    left: Tuple[TimeCode, ...],
    right: Tuple[TimeCode, ...],
    keep_left_only: bool,
    keep_both: bool,
    keep_right_only: bool,
) -> Tuple[TimeCode, ...]:
    """Линейное слияние двух отсортированных кортежей, O(n + m)."""
    merged: List[TimeCode] = []
    i = j = 0
    while i < len(left) and j < len(right):
        a, b = left[i], right[j]
        if a < b:
            if keep_left_only:
                merged.append(a)
            i += 1
        elif b < a:
            if keep_right_only:
                merged.append(b)
            j += 1
        else:
            if keep_both:
                merged.append(a)
            i += 1
            j += 1

    if keep_left_only:
        merged.extend(left[i:])
    if keep_right_only:
        merged.extend(right[j:])
    return tuple(merged)


# =============================================================================
# RETENTION SET
# =============================================================================


class RetentionSet:
    """
    Неизменяемое множество TimeCode, упорядоченное от старых к новым.

    Все преобразования (adding, union, intersection, subtracting,
    symmetric_difference, retain) возвращают новый RetentionSet.

    Examples:
        >>> s = RetentionSet([3, 1, 2, 3])
        >>> s.values
        (1, 2, 3)
        >>> s.retain(base=2, count=2).most_recent
        TimeCode(value=3)
    """

    __slots__ = ("_codes", "_members")

    def __init__(self, time_codes: Iterable[TimeCodeLike] = ()) -> None:
        members = frozenset(_coerce(value) for value in time_codes)
        self._codes: Tuple[TimeCode, ...] = tuple(sorted(members))
        self._members: FrozenSet[TimeCode] = members

    @classmethod
    def of(cls, *values: TimeCodeLike) -> "RetentionSet":
        """RetentionSet из перечисленных значений: RetentionSet.of(1, 2, 3)."""
        return cls(values)

    @classmethod
    def _from_sorted(cls, codes: Tuple[TimeCode, ...]) -> "RetentionSet":
        instance = cls.__new__(cls)
        instance._codes = codes
        instance._members = frozenset(codes)
        return instance

    # -------------------------------------------------------------------------
    # Attributes
    # -------------------------------------------------------------------------

    @property
    def time_codes(self) -> Tuple[TimeCode, ...]:
        """TimeCode по возрастанию (от старых к новым)."""
        return self._codes

    @property
    def values(self) -> Tuple[int, ...]:
        """Raw значения по возрастанию."""
        return tuple(code.value for code in self._codes)

    @property
    def count(self) -> int:
        return len(self._codes)

    @property
    def oldest(self) -> Optional[TimeCode]:
        return self._codes[0] if self._codes else None

    @property
    def most_recent(self) -> Optional[TimeCode]:
        return self._codes[-1] if self._codes else None

    def __len__(self) -> int:
        return len(self._codes)

    def __iter__(self) -> Iterator[TimeCode]:
        return iter(self._codes)

    def __contains__(self, value: object) -> bool:
        if isinstance(value, int) and not isinstance(value, bool):
            return value >= 0 and TimeCode(value) in self._members
        return value in self._members

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RetentionSet):
            return NotImplemented
        return self._codes == other._codes

    def __hash__(self) -> int:
        return hash(self._codes)

    def __repr__(self) -> str:
        return f"RetentionSet({list(self.values)!r})"

    # -------------------------------------------------------------------------
    # Set algebra
    # -------------------------------------------------------------------------

    def adding(self, value: TimeCodeLike) -> "RetentionSet":
        """Новое множество с добавленным элементом (no-op, если он уже есть)."""
        code = _coerce(value)
        if code in self._members:
            return self
        return self._from_sorted(_merge(self._codes, (code,), True, True, True))

    def union(self, other: "RetentionSet") -> "RetentionSet":
        return self._from_sorted(_merge(self._codes, other._codes, True, True, True))

    def intersection(self, other: "RetentionSet") -> "RetentionSet":
        return self._from_sorted(_merge(self._codes, other._codes, False, True, False))

    def subtracting(self, other: "RetentionSet") -> "RetentionSet":
        return self._from_sorted(_merge(self._codes, other._codes, True, False, False))

    def symmetric_difference(self, other: "RetentionSet") -> "RetentionSet":
        return self._from_sorted(_merge(self._codes, other._codes, True, False, True))

    def is_subset(self, other: "RetentionSet") -> bool:
        return self._members <= other._members

    def is_strict_subset(self, other: "RetentionSet") -> bool:
        return self._members < other._members

    # -------------------------------------------------------------------------
    # Retention
    # -------------------------------------------------------------------------

    def digit_groups(self, base: int) -> Tuple[Optional[int], Dict[int, "RetentionSet"]]:
        """
        Разбиение на разрядные группы для одного уровня рекурсии.

        Args:
            base: Основание системы счисления (> 1)

        Returns:
            (msd, groups): msd — старший различающийся разряд oldest и
            most_recent (None для пустого или одноэлементного множества);
            groups — digit на позиции msd -> подмножество, без most_recent.
        """
        validate_base(base)
        if len(self._codes) < 2:
            return None, {}

        most_recent = self._codes[-1]
        msd = self._codes[0].most_significant_differing_digit_position(most_recent, base)

        buckets: Dict[int, List[TimeCode]] = {}
        for code in self._codes[:-1]:
            buckets.setdefault(code.digit(msd, base), []).append(code)

        groups = {
            digit: self._from_sorted(tuple(codes)) for digit, codes in buckets.items()
        }
        return msd, groups

    def retain(self, base: int, count: int) -> "RetentionSet":
        """
        Элементы, сохраняемые алгоритмом прореживания.

        Args:
            base: Основание системы счисления (> 1)
            count: Сколько элементов сохранить (> 0)

        Returns:
            RetentionSet из min(count, len(self)) элементов, включая most_recent

        Raises:
            InvalidBase: если base <= 1
            InvalidRetainCount: если count <= 0
        """
        validate_base(base)
        validate_retain_count(count)
        return self._from_sorted(tuple(sorted(self._retained(base, count))))

    def _retained(self, base: int, count: int) -> List[TimeCode]:
        if not self._codes:
            return []

        most_recent = self._codes[-1]
        msd, groups = self.digit_groups(base)
        if msd is None:
            return [most_recent]

        retained = [most_recent]
        remaining = count - 1
        if remaining == 0:
            return retained

        allocations = allocate_exactly(
            remaining,
            base,
            groups.keys(),
            capacities={digit: len(group) for digit, group in groups.items()},
        )

        for digit in sorted(groups, reverse=True):
            allocation = allocations.get(digit, 0)
            if allocation <= 0:
                continue

            group = groups[digit]
            kept = group._retained(base, min(allocation, len(group)))
            retained.extend(kept)
            remaining -= len(kept)

            if remaining <= 0:
                break

        return retained

    def would_retain(self, value: TimeCodeLike, base: int, count: int) -> bool:
        """True, если value попадёт в retain(base, count)."""
        return _coerce(value) in self.retain(base, count)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def description(self, base: int) -> str:
        """
        Элементы от новых к старым, по одному в строке, в base-N.

        Все строки дополнены нулями до количества разрядов most_recent.
        Пустое множество → пустая строка.
        """
        validate_base(base)
        if not self._codes:
            return ""

        width = self._codes[-1].digit_count(base)
        return "\n".join(code.to_digits(base, width) for code in reversed(self._codes))

    def diff(self, other: "RetentionSet", base: int) -> str:
        """
        Построчное сравнение с other по объединению, от новых к старым.

        Префиксы строк:
        - "+ " элемент только в other
        - "- " элемент только в self
        - "  " элемент в обоих
        """
        validate_base(base)
        union = self.union(other)
        if not union._codes:
            return ""

        width = union._codes[-1].digit_count(base)
        lines = []
        for code in reversed(union._codes):
            if code not in self._members:
                prefix = "+ "
            elif code not in other._members:
                prefix = "- "
            else:
                prefix = "  "
            lines.append(prefix + code.to_digits(base, width))
        return "\n".join(lines)
