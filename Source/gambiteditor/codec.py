"""Soft-disable encoding of a single rule.

The JSON schema has no "enabled" flag. A disabled rule is made inert by
writing condition "None" and actionId 0 into the live keys, with the real
values kept under `originalCondition` / `originalActionId`. A rule is
disabled exactly when `originalCondition` is present; a lone
`originalActionId` is stray state and is dropped on the next encode.

Everything here is pure: the functions read their arguments and return new
dicts, so encoding a decoded rule never nests or leaks shadow values.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Tuple

from .model import Condition, GambitRule, PackType

CONDITION_KEY = "condition"
ACTION_KEY = "actionId"
SHADOW_CONDITION_KEY = "originalCondition"
SHADOW_ACTION_KEY = "originalActionId"
ACTION_PARAM_KEY = "actionParam"
DESCRIPTION_KEY = "description"
RADIUS_KEY = "radius"
HP_THRESHOLD_KEY = "hpThreshold"

INERT_CONDITION = Condition.NONE
INERT_ACTION_ID = 0

SHADOW_KEYS = (SHADOW_CONDITION_KEY, SHADOW_ACTION_KEY)


def is_disabled(raw: Mapping[str, Any]) -> bool:
    return SHADOW_CONDITION_KEY in raw


def has_stray_shadow(raw: Mapping[str, Any]) -> bool:
    """True for an enabled rule that still carries `originalActionId`."""
    return not is_disabled(raw) and SHADOW_ACTION_KEY in raw


def decode_state(raw: Mapping[str, Any]) -> Tuple[bool, Any, Any]:
    """Return (enabled, true condition, true action id) as found in the JSON.

    Values are returned raw; the caller validates them. For a disabled rule
    the sentinel live actionId is used only if `originalActionId` is missing.
    """
    if not is_disabled(raw):
        return True, raw.get(CONDITION_KEY), raw.get(ACTION_KEY)
    action_id = raw.get(SHADOW_ACTION_KEY, raw.get(ACTION_KEY))
    return False, raw[SHADOW_CONDITION_KEY], action_id


def encode_state(enabled: bool, condition: Condition, action_id: int) -> Dict[str, Any]:
    if enabled:
        return {CONDITION_KEY: condition.value, ACTION_KEY: action_id}
    return {
        CONDITION_KEY: INERT_CONDITION.value,
        ACTION_KEY: INERT_ACTION_ID,
        SHADOW_CONDITION_KEY: condition.value,
        SHADOW_ACTION_KEY: action_id,
    }


def encode_rule(rule: GambitRule, pack_type: PackType) -> Dict[str, Any]:
    """Build the JSON object for a rule, in the key order of its source object."""
    known: Dict[str, Any] = encode_state(rule.enabled, rule.condition, rule.action_id)
    if pack_type is PackType.TIMELINE:
        known[pack_type.timing_key] = rule.timing
    elif rule.cool_down or pack_type.timing_key in rule.key_order or not rule.key_order:
        # coolDown is optional in rule sets; a source rule without it stays without it
        known[pack_type.timing_key] = rule.cool_down
    if rule.write_description:
        known[DESCRIPTION_KEY] = rule.description
    known[ACTION_PARAM_KEY] = rule.action_param
    if rule.radius is not None:
        known[RADIUS_KEY] = rule.radius
    if rule.condition.needs_threshold and rule.hp_threshold is not None:
        known[HP_THRESHOLD_KEY] = rule.hp_threshold

    merged = {k: v for k, v in rule.extra.items() if k not in SHADOW_KEYS}
    merged.update(known)

    ordered: Dict[str, Any] = {}
    for key in rule.key_order:
        if key in merged:
            ordered[key] = merged[key]
    for key, value in merged.items():
        if key not in ordered:
            ordered[key] = value
    return ordered
