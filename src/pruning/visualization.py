"""
Mermaid Visualization — диаграмма решений прореживания

Отображает рекурсивную структуру групп, которую обходит RetentionSet.retain:
- корневой узел (Total / Retain / Base)
- most recent, сохраняемый на каждом уровне
- узел на каждую разрядную группу (размер и выделенные слоты)
- листья с пометкой [RETAINED] или [DELETED]

Результат детерминирован и совместим с любым Mermaid renderer.
"""

from typing import Final, List, Optional

from src.core.domain.retention_set import RetentionSet
from src.core.domain.time_code import TimeCode
from src.core.errors import validate_base, validate_retain_count
from src.core.math.allocation import allocate_exactly

RETAINED_COLOR: Final[str] = "#90EE90"
DELETED_COLOR: Final[str] = "#ffcdd2"
GROUP_COLOR: Final[str] = "#ffeb3b"
ROOT_COLOR: Final[str] = "#e6f3ff"

# Перенос строки внутри метки узла Mermaid
LABEL_BREAK: Final[str] = "<br/>"


class _MermaidBuilder:
    def __init__(self, base: int):
        self.base = base
        self.lines: List[str] = ["graph LR"]
        self._counter = 0

    def node(self, label: str, color: str) -> str:
        node_id = f"N{self._counter}"
        self._counter += 1
        self.lines.append(f'    {node_id}["{label}"]')
        self.lines.append(f"    style {node_id} fill:{color}")
        return node_id

    def edge(self, parent_id: Optional[str], child_id: str) -> None:
        if parent_id is not None:
            self.lines.append(f"    {parent_id} --> {child_id}")

    def relevant_digits(self, code: TimeCode, msd: Optional[int] = None) -> str:
        # Разряды от позиции группировки вниз; старшие разряды общие
        rendered = code.to_digits(self.base)
        if msd is None:
            return rendered
        return rendered[max(0, len(rendered) - msd - 1):]

    def subtree(self, tree: RetentionSet, parent_id: Optional[str], retain: int) -> None:
        most_recent = tree.most_recent
        if most_recent is None:
            return

        msd, groups = tree.digit_groups(self.base)
        if msd is None:
            leaf_id = self.node(
                f"{self.relevant_digits(most_recent)}{LABEL_BREAK}[RETAINED]",
                RETAINED_COLOR,
            )
            self.edge(parent_id, leaf_id)
            return

        allocations = allocate_exactly(
            retain - 1,
            self.base,
            groups.keys(),
            capacities={digit: len(group) for digit, group in groups.items()},
        )

        recent_id = self.node(
            f"{self.relevant_digits(most_recent, msd)}{LABEL_BREAK}[RETAINED]",
            RETAINED_COLOR,
        )
        self.edge(parent_id, recent_id)

        for digit in sorted(groups, reverse=True):
            group = groups[digit]
            allocation = allocations.get(digit, 0)

            group_id = self.node(
                f"Digit {digit} Group{LABEL_BREAK}Count: {len(group)}"
                f"{LABEL_BREAK}Allocated: {allocation}",
                GROUP_COLOR,
            )
            self.edge(parent_id, group_id)

            if allocation > 1 and len(group) > 1:
                self.subtree(group, group_id, allocation)
                continue

            retained = group.retain(self.base, allocation) if allocation > 0 else RetentionSet()
            for code in group:
                status, color = (
                    ("[RETAINED]", RETAINED_COLOR)
                    if code in retained
                    else ("[DELETED]", DELETED_COLOR)
                )
                leaf_id = self.node(
                    f"{self.relevant_digits(code, msd)}{LABEL_BREAK}{status}", color
                )
                self.edge(group_id, leaf_id)


def mermaid_diagram(tree: RetentionSet, base: int, retain: int) -> str:
    """
    Mermaid документ ``graph LR`` для tree.retain(base, retain).

    Raises:
        InvalidBase: если base <= 1 или base не рендерится (больше 36)
        InvalidRetainCount: если retain <= 0
    """
    validate_base(base)
    validate_retain_count(retain)

    builder = _MermaidBuilder(base)
    root_id = builder.node(
        f"RetentionSet{LABEL_BREAK}Total: {len(tree)}{LABEL_BREAK}"
        f"Retain: {retain}{LABEL_BREAK}Base: {base}",
        ROOT_COLOR,
    )
    builder.subtree(tree, root_id, retain)
    return "\n".join(builder.lines) + "\n"
