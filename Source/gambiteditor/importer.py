"""Build a `GambitPackDocument` from JSON text.

Only two things are fatal: text that is not JSON, and a document without a
top-level category object. Every other problem is recorded as a `LoadIssue`,
a documented default is substituted, and loading continues with the next
field, rule or monster.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from .catalog import ActionCatalog
from .codec import (
    ACTION_KEY,
    ACTION_PARAM_KEY,
    CONDITION_KEY,
    DESCRIPTION_KEY,
    HP_THRESHOLD_KEY,
    RADIUS_KEY,
    SHADOW_ACTION_KEY,
    SHADOW_KEYS,
    decode_state,
    has_stray_shadow,
)
from .issues import GambitDocumentError, IssueSeverity, LoadIssue
from .model import (
    HP_THRESHOLD_MAX,
    HP_THRESHOLD_MIN,
    TIMING_MAX,
    TIMING_MIN,
    Condition,
    GambitPackDocument,
    GambitRule,
    LoopCount,
    MonsterEntry,
    PackType,
    loop_count_from_wire,
)
from .utils import as_bool, as_float, as_int

logger = logging.getLogger(__name__)

GAMBIT_PACK_KEY = "gambitPack"
LOOP_COUNT_KEY = "loopCount"
BASE_ID_KEY = "baseId"
NAME_ID_KEY = "nameId"
ATTACK_RANGE_KEY = "attackRange"
IS_RANGED_KEY = "isRanged"


def parse_document(text: str, category: Optional[str] = None) -> Tuple[Dict[str, Any], str]:
    """Parse JSON text and return (tree, category key).

    The category is the first top-level key unless one is given. Raises
    GambitDocumentError if the text is not JSON or the category does not hold
    an object of monsters.
    """
    if not isinstance(text, str) or not text.strip():
        raise GambitDocumentError("Document is empty")
    try:
        tree = json.loads(text)
    except json.JSONDecodeError as e:
        raise GambitDocumentError(f"Invalid JSON at line {e.lineno} column {e.colno}: {e.msg}") from e
    if not isinstance(tree, dict) or not tree:
        raise GambitDocumentError("Document must be a JSON object with a top-level category key")
    if category is None:
        category = next(iter(tree))
    elif category not in tree:
        raise GambitDocumentError(f"Document has no {category!r} category")
    if not isinstance(tree[category], dict):
        raise GambitDocumentError(f"Category {category!r} must map monster names to objects")
    return tree, category


class PackImporter:
    """Reads one document; collects issues while doing so."""

    def __init__(self, catalog: Optional[ActionCatalog] = None):
        self.catalog = catalog or ActionCatalog()
        self.issues: List[LoadIssue] = []

    def run(self, text: str) -> GambitPackDocument:
        self.issues = []
        tree, category = parse_document(text)
        if len(tree) > 1:
            ignored = ", ".join(repr(k) for k in list(tree)[1:])
            self._note(IssueSeverity.INFO, f"Only category {category!r} is edited; kept as-is: {ignored}")

        document = GambitPackDocument(category=category)
        for name, raw_monster in tree[category].items():
            monster = self._read_monster(name, raw_monster)
            if monster is not None:
                document.add_monster(monster)

        logger.info(
            "Imported category %r: %d monsters, %d rules, %d issues",
            category, len(document.monsters), document.rule_count, len(self.issues),
        )
        return document

    def _note(self, severity: IssueSeverity, message: str, monster: Optional[str] = None,
              rule_index: Optional[int] = None, field: Optional[str] = None) -> None:
        issue = LoadIssue(severity, message, monster=monster, rule_index=rule_index, field=field)
        self.issues.append(issue)
        if severity == IssueSeverity.WARNING:
            logger.warning("Import: %s", issue)
        else:
            logger.info("Import: %s", issue)

    def _warn(self, message: str, monster: Optional[str] = None,
              rule_index: Optional[int] = None, field: Optional[str] = None) -> None:
        self._note(IssueSeverity.WARNING, message, monster, rule_index, field)

    # Monster level

    def _read_monster(self, name: str, raw: Any) -> Optional[MonsterEntry]:
        if not isinstance(raw, dict):
            self._warn(f"Monster {name!r} is not an object; skipped", monster=name)
            return None

        monster = MonsterEntry(name=name)
        monster.base_id = self._read_id(monster, raw, BASE_ID_KEY, "base_id")
        monster.name_id = self._read_id(monster, raw, NAME_ID_KEY, "name_id")
        monster.attack_range = self._read_attack_range(monster, raw)
        monster.is_ranged = self._read_is_ranged(monster, raw)

        pack = raw.get(GAMBIT_PACK_KEY)
        if not isinstance(pack, dict):
            self._warn(f"Monster {name!r} has no {GAMBIT_PACK_KEY} object; loaded with no rules",
                       monster=name, field=GAMBIT_PACK_KEY)
            return monster

        monster.loop_count = self._read_loop_count(monster, pack)

        pack_type = self._detect_pack_type(pack)
        if pack_type is None:
            self._warn(
                f"Monster {name!r} has no {PackType.TIMELINE.container_key} or "
                f"{PackType.RULESET.container_key} list; loaded with no rules",
                monster=name, field=GAMBIT_PACK_KEY,
            )
            return monster
        monster.pack_type = pack_type

        container = pack[pack_type.container_key]
        if not isinstance(container, list):
            self._warn(f"Monster {name!r}: {pack_type.container_key} is not a list; loaded with no rules",
                       monster=name, field=pack_type.container_key)
            return monster

        for index, raw_rule in enumerate(container):
            rule = self._read_rule(name, index, raw_rule, pack_type)
            if rule is not None:
                monster.add_rule(rule)
        logger.debug("Monster %r: %d rules (%s)", name, len(monster), pack_type.value)
        return monster

    # An unreadable monster-level value is replaced by its default in the model
    # and marked unparsed, so synchronizing leaves the document's value alone.

    def _read_id(self, monster: MonsterEntry, raw: Dict[str, Any], key: str, attr: str) -> int:
        if key not in raw:
            return 0
        value = as_int(raw[key])
        if value is None:
            monster.unparsed.add(attr)
            self._warn(f"Invalid {key} {raw[key]!r}; using 0, document value kept",
                       monster=monster.name, field=key)
            return 0
        return value

    def _read_attack_range(self, monster: MonsterEntry, raw: Dict[str, Any]) -> float:
        if ATTACK_RANGE_KEY not in raw:
            return 0.0
        value = raw[ATTACK_RANGE_KEY]
        number = as_float(value)
        if number is None or number < 0 or isinstance(value, str):
            monster.unparsed.add("attack_range")
            self._warn(f"Invalid attackRange {value!r}; using 0, document value kept",
                       monster=monster.name, field=ATTACK_RANGE_KEY)
            return 0.0
        return value

    def _read_is_ranged(self, monster: MonsterEntry, raw: Dict[str, Any]) -> bool:
        if IS_RANGED_KEY not in raw:
            return False
        value = raw[IS_RANGED_KEY]
        if not isinstance(value, bool):
            monster.unparsed.add("is_ranged")
            self._warn(f"Invalid isRanged {value!r}; using false, document value kept",
                       monster=monster.name, field=IS_RANGED_KEY)
            return False
        return value

    def _read_loop_count(self, monster: MonsterEntry, pack: Dict[str, Any]):
        if LOOP_COUNT_KEY not in pack:
            return LoopCount.INFINITE
        value = loop_count_from_wire(pack[LOOP_COUNT_KEY])
        if value is None or isinstance(pack[LOOP_COUNT_KEY], str):
            monster.unparsed.add("loop_count")
            self._warn(f"Invalid loopCount {pack[LOOP_COUNT_KEY]!r}; using infinite, document value kept",
                       monster=monster.name, field=LOOP_COUNT_KEY)
            return LoopCount.INFINITE
        return value

    @staticmethod
    def _detect_pack_type(pack: Dict[str, Any]) -> Optional[PackType]:
        for pack_type in (PackType.TIMELINE, PackType.RULESET):
            if pack_type.container_key in pack:
                return pack_type
        return None

    # Rule level

    def _read_rule(self, name: str, index: int, raw: Any, pack_type: PackType) -> Optional[GambitRule]:
        if not isinstance(raw, dict):
            self._warn("Rule is not an object; skipped", monster=name, rule_index=index)
            return None

        enabled, raw_condition, raw_action = decode_state(raw)
        if has_stray_shadow(raw):
            self._warn(f"{SHADOW_ACTION_KEY} {raw[SHADOW_ACTION_KEY]!r} without originalCondition; "
                       "rule kept enabled and the stray key dropped",
                       monster=name, rule_index=index, field=SHADOW_ACTION_KEY)
        consumed = {CONDITION_KEY, ACTION_KEY, ACTION_PARAM_KEY, pack_type.timing_key, *SHADOW_KEYS}
        rule = GambitRule(enabled=enabled, key_order=list(raw.keys()))

        condition = Condition.parse(raw_condition)
        if condition is None:
            what = "Missing condition" if raw_condition is None else f"Unknown condition {raw_condition!r}"
            self._warn(f"{what}; using None", monster=name, rule_index=index, field=CONDITION_KEY)
            condition = Condition.NONE
        rule.condition = condition

        action_id = as_int(raw_action)
        if action_id is None:
            self._warn(f"Missing or invalid actionId {raw_action!r}; using 0",
                       monster=name, rule_index=index, field=ACTION_KEY)
            action_id = 0
        rule.action_id = action_id

        action_param = as_int(raw.get(ACTION_PARAM_KEY))
        if action_param is None:
            self._warn(f"Missing or invalid actionParam {raw.get(ACTION_PARAM_KEY)!r}; using 0",
                       monster=name, rule_index=index, field=ACTION_PARAM_KEY)
            action_param = 0
        rule.action_param = action_param

        if pack_type is PackType.TIMELINE:
            rule.timing = self._read_timing(name, index, raw)
        else:
            rule.cool_down = self._read_cool_down(name, index, raw)

        if RADIUS_KEY in raw:
            radius = raw[RADIUS_KEY]
            number = as_float(radius)
            if number is None or number < 0 or isinstance(radius, str):
                self._warn(f"Invalid radius {radius!r}; kept as-is and ignored",
                           monster=name, rule_index=index, field=RADIUS_KEY)
            else:
                rule.radius = radius
                consumed.add(RADIUS_KEY)

        if HP_THRESHOLD_KEY in raw and condition.needs_threshold:
            threshold = as_int(raw[HP_THRESHOLD_KEY])
            if threshold is None or not HP_THRESHOLD_MIN <= threshold <= HP_THRESHOLD_MAX:
                self._warn(f"Invalid hpThreshold {raw[HP_THRESHOLD_KEY]!r}; kept as-is and ignored",
                           monster=name, rule_index=index, field=HP_THRESHOLD_KEY)
            else:
                rule.hp_threshold = threshold
                consumed.add(HP_THRESHOLD_KEY)

        description = raw.get(DESCRIPTION_KEY)
        if isinstance(description, str):
            rule.description = description
            rule.write_description = True
            consumed.add(DESCRIPTION_KEY)
        else:
            rule.description = self.catalog.resolve(action_id)

        rule.extra = {k: v for k, v in raw.items() if k not in consumed}
        return rule

    def _read_timing(self, name: str, index: int, raw: Dict[str, Any]) -> int:
        key = PackType.TIMELINE.timing_key
        value = as_int(raw.get(key))
        if value is None:
            self._warn(f"Missing or invalid timing {raw.get(key)!r}; using 0",
                       monster=name, rule_index=index, field=key)
            return 0
        clamped = max(TIMING_MIN, min(TIMING_MAX, value))
        if clamped != value:
            self._warn(f"timing {value} outside {TIMING_MIN}-{TIMING_MAX}; clamped to {clamped}",
                       monster=name, rule_index=index, field=key)
        return clamped

    def _read_cool_down(self, name: str, index: int, raw: Dict[str, Any]) -> int:
        key = PackType.RULESET.timing_key
        if key not in raw:
            return 0
        value = as_int(raw[key])
        if value is None:
            self._warn(f"Invalid coolDown {raw[key]!r}; using 0", monster=name, rule_index=index, field=key)
            return 0
        if value < 0:
            self._warn(f"Negative coolDown {value}; clamped to 0", monster=name, rule_index=index, field=key)
            return 0
        return value


def import_pack(text: str, catalog: Optional[ActionCatalog] = None) -> Tuple[GambitPackDocument, List[LoadIssue]]:
    """Import JSON text into a document model plus the list of recoverable issues."""
    importer = PackImporter(catalog)
    document = importer.run(text)
    return document, importer.issues
