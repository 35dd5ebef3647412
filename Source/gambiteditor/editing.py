"""Model-level editing operations.

Each operation mutates the document model only. Invalid input raises
ValueError and leaves the previous value in place; nothing is ever coerced
to zero. Writing the result back to JSON is a separate, explicit
synchronize step.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .catalog import ActionCatalog
from .codec import HP_THRESHOLD_KEY
from .model import (
    HP_THRESHOLD_MAX,
    HP_THRESHOLD_MIN,
    TIMING_MAX,
    TIMING_MIN,
    Condition,
    GambitRule,
    LoopValue,
    MonsterEntry,
    PackType,
    RuleHandle,
    loop_count_from_wire,
)
from .utils import as_bool, as_float, as_int

logger = logging.getLogger(__name__)

_MONSTER_ATTRIBUTES = {
    "attackRange": "attack_range",
    "isRanged": "is_ranged",
    "baseId": "base_id",
    "nameId": "name_id",
}


def _require_int(value: Any, field: str) -> int:
    parsed = as_int(value)
    if parsed is None:
        raise ValueError(f"{field} must be an integer, got {value!r}")
    return parsed


def _require_pack_type(actual: PackType, expected: PackType, field: str) -> None:
    if actual is not expected:
        raise ValueError(f"{field} only applies to {expected.value} packs, not {actual.value}")


def toggle_enabled(rule: GambitRule) -> bool:
    rule.enabled = not rule.enabled
    logger.debug("Rule %s enabled=%s", rule.handle, rule.enabled)
    return rule.enabled


def set_condition(rule: GambitRule, condition: Any, hp_threshold: Any = None) -> None:
    """Set the targeting condition; the HP condition needs a 1-100 threshold."""
    parsed = Condition.parse(condition)
    if parsed is None:
        raise ValueError(f"Unknown condition {condition!r}")
    if parsed.needs_threshold:
        threshold = as_int(hp_threshold)
        if threshold is None or not HP_THRESHOLD_MIN <= threshold <= HP_THRESHOLD_MAX:
            raise ValueError(
                f"{parsed.value} needs an hpThreshold between {HP_THRESHOLD_MIN} and "
                f"{HP_THRESHOLD_MAX}, got {hp_threshold!r}"
            )
        rule.hp_threshold = threshold
    else:
        rule.hp_threshold = None
    rule.extra.pop(HP_THRESHOLD_KEY, None)
    rule.condition = parsed
    logger.debug("Rule %s condition=%s threshold=%s", rule.handle, parsed.value, rule.hp_threshold)


def set_timing(rule: GambitRule, value: Any, pack_type: PackType = PackType.TIMELINE) -> int:
    """Set the timeline timing, clamped to 0-999. Rule-set rules have no timing."""
    _require_pack_type(pack_type, PackType.TIMELINE, "timing")
    timing = _require_int(value, "timing")
    rule.timing = max(TIMING_MIN, min(TIMING_MAX, timing))
    return rule.timing


def set_cool_down(rule: GambitRule, value: Any, pack_type: PackType = PackType.RULESET) -> int:
    """Set the rule-set cooldown in milliseconds, clamped to >= 0."""
    _require_pack_type(pack_type, PackType.RULESET, "coolDown")
    cool_down = _require_int(value, "coolDown")
    rule.cool_down = max(0, cool_down)
    return rule.cool_down


def set_action(rule: GambitRule, action_id: Any, catalog: Optional[ActionCatalog] = None) -> str:
    """Point the rule at another action. Ids missing from the catalog are allowed."""
    parsed = _require_int(action_id, "actionId")
    rule.action_id = parsed
    rule.description = (catalog or ActionCatalog()).resolve(parsed)
    rule.write_description = True
    logger.debug("Rule %s action=%d (%s)", rule.handle, parsed, rule.description)
    return rule.description


def set_action_param(rule: GambitRule, value: Any) -> None:
    rule.action_param = _require_int(value, "actionParam")


def set_radius(rule: GambitRule, value: Any) -> None:
    """Set or clear (None / blank text) the rule's radius."""
    if value is None or (isinstance(value, str) and not value.strip()):
        rule.radius = None
        return
    radius = as_float(value)
    if radius is None or radius < 0:
        raise ValueError(f"radius must be a non-negative number, got {value!r}")
    rule.radius = radius


def add_rule(monster: MonsterEntry, catalog: Optional[ActionCatalog] = None,
             index: Optional[int] = None) -> RuleHandle:
    """Append (or insert at index) a rule with default values."""
    rule = GambitRule(
        condition=Condition.NONE,
        action_id=0,
        enabled=True,
        timing=0,
        cool_down=0,
        description=(catalog or ActionCatalog()).resolve(0),
        write_description=True,
    )
    handle = monster.add_rule(rule, index)
    logger.debug("Monster %r: added rule %s", monster.name, handle)
    return handle


def remove_rule(monster: MonsterEntry, handle: RuleHandle) -> GambitRule:
    rule = monster.remove_rule(handle)
    logger.debug("Monster %r: removed rule %s", monster.name, handle)
    return rule


def move_rule(monster: MonsterEntry, handle: RuleHandle, index: int) -> None:
    monster.move_rule(handle, index)


def remove_disabled_rules(monster: MonsterEntry) -> int:
    """Remove every disabled rule of the monster; returns how many were removed."""
    disabled = [rule.handle for rule in monster.rules if not rule.enabled]
    for handle in disabled:
        monster.remove_rule(handle)
    if disabled:
        logger.info("Monster %r: removed %d disabled rules", monster.name, len(disabled))
    return len(disabled)


def set_monster_attribute(monster: MonsterEntry, attribute: str, value: Any) -> None:
    """Set attackRange, isRanged, baseId or nameId on the monster and all its rules.

    baseId/nameId text that is not an integer is kept as typed; the
    synchronizer then leaves the document's ids alone.
    """
    attr = _MONSTER_ATTRIBUTES.get(attribute, attribute)
    if attr not in _MONSTER_ATTRIBUTES.values():
        raise KeyError(f"Not a monster-level attribute: {attribute}")

    if attr == "attack_range":
        number = as_float(value)
        if number is None or number < 0:
            raise ValueError(f"attackRange must be a non-negative number, got {value!r}")
        new_value: Any = number
    elif attr == "is_ranged":
        flag = as_bool(value)
        if flag is None:
            raise ValueError(f"isRanged must be true or false, got {value!r}")
        new_value = flag
    else:
        parsed = as_int(value)
        new_value = parsed if parsed is not None else value

    monster.set_shared(attr, new_value)
    logger.debug("Monster %r: %s=%r", monster.name, attr, new_value)


def set_loop_count(monster: MonsterEntry, value: Any) -> LoopValue:
    """Set the pack loop count: an integer >= 1, or -1 / "Infinite"."""
    parsed = loop_count_from_wire(value)
    if parsed is None:
        raise ValueError(f"loopCount must be >= 1 or Infinite, got {value!r}")
    monster.set_loop_count(parsed)
    return parsed
