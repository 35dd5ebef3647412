from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from .model import GambitPackDocument, GambitRule, MonsterEntry, PackType, RuleHandle


@dataclass(frozen=True)
class RuleRow:
    """One line of the gambit list view: Status | Timing | Condition | Action."""
    handle: RuleHandle
    monster: str
    status: str
    timing_text: str
    condition_text: str
    action_text: str

    @property
    def enabled(self) -> bool:
        return self.status == "ON"


def condition_text(rule: GambitRule) -> str:
    if rule.condition.needs_threshold and rule.hp_threshold is not None:
        return f"HP < {rule.hp_threshold}%"
    return rule.condition.label


def rule_row(monster: MonsterEntry, rule: GambitRule) -> RuleRow:
    timing = rule.timing if monster.pack_type is PackType.TIMELINE else rule.cool_down
    return RuleRow(
        handle=rule.handle,
        monster=monster.name,
        status="ON" if rule.enabled else "OFF",
        timing_text=str(timing),
        condition_text=condition_text(rule),
        action_text=rule.description,
    )


def build_rows(document: GambitPackDocument) -> List[RuleRow]:
    """Rows for every rule, grouped by monster in document order."""
    return [rule_row(monster, rule) for monster, rule in document.iter_rules()]


def group_rows(rows: List[RuleRow]) -> Dict[str, List[RuleRow]]:
    groups: Dict[str, List[RuleRow]] = {}
    for row in rows:
        groups.setdefault(row.monster, []).append(row)
    return groups
