"""Project an edited document model back onto the JSON text it came from.

The previous text is parsed into a plain tree so that everything the model
does not know about (other categories, unknown monster keys, monsters that
were never loaded) passes through untouched. For each monster in the model
the monster-level values are refreshed and the rule list is rebuilt from the
model in its current order.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .codec import encode_rule
from .importer import (
    ATTACK_RANGE_KEY,
    BASE_ID_KEY,
    GAMBIT_PACK_KEY,
    IS_RANGED_KEY,
    LOOP_COUNT_KEY,
    NAME_ID_KEY,
    parse_document,
)
from .issues import IssueSeverity, LoadIssue
from .model import GambitPackDocument, GambitRule, LoopCount, MonsterEntry, loop_count_to_wire
from .utils import as_int, dumps_json, same_json_value

logger = logging.getLogger(__name__)


def _write_scalar(node: Dict[str, Any], key: str, value: Any, default: Any) -> None:
    """Write value unless the tree already holds an equal value (or the key is
    absent and value is the default)."""
    if key in node:
        if not same_json_value(node[key], value):
            node[key] = value
    elif not same_json_value(value, default):
        node[key] = value


class Synchronizer:
    def __init__(self, document: GambitPackDocument, issues: Optional[List[LoadIssue]] = None):
        self.document = document
        self.issues = issues if issues is not None else []

    def _warn(self, message: str, monster: Optional[str] = None, field: Optional[str] = None) -> None:
        issue = LoadIssue(IssueSeverity.WARNING, message, monster=monster, field=field)
        self.issues.append(issue)
        logger.warning("Synchronize: %s", issue)

    def run(self, previous_text: str) -> str:
        tree, category = parse_document(previous_text, self.document.category)
        monsters_node = tree[category]

        updated = 0
        for name, rules in self.document.rules_by_monster().items():
            node = monsters_node.get(name)
            if not isinstance(node, dict):
                self._warn(f"Monster {name!r} is not in the document; its edits were not written", monster=name)
                continue
            self._write_monster(node, self.document.monsters[name], rules)
            updated += 1

        logger.debug("Synchronized %d monsters of %r", updated, category)
        return dumps_json(tree)

    def _write_monster(self, node: Dict[str, Any], monster: MonsterEntry, rules: List[GambitRule]) -> None:
        if not monster.is_consistent():
            logger.warning("Monster %r: rule copies of monster-level values disagree; using the first rule", monster.name)
        # Every rule carries the same copy, so the first one stands for the monster
        source = rules[0] if rules else monster

        unparsed = monster.unparsed
        if not {"base_id", "name_id"} & unparsed:
            base_id = as_int(source.base_id)
            name_id = as_int(source.name_id)
            if base_id is None or name_id is None:
                self._warn(
                    f"baseId {source.base_id!r} / nameId {source.name_id!r} are not both integers; "
                    "kept the values already in the document",
                    monster=monster.name, field=f"{BASE_ID_KEY}/{NAME_ID_KEY}",
                )
            else:
                _write_scalar(node, BASE_ID_KEY, base_id, 0)
                _write_scalar(node, NAME_ID_KEY, name_id, 0)

        if "attack_range" not in unparsed:
            _write_scalar(node, ATTACK_RANGE_KEY, source.attack_range, 0.0)
        if "is_ranged" not in unparsed:
            _write_scalar(node, IS_RANGED_KEY, source.is_ranged, False)

        pack = node.get(GAMBIT_PACK_KEY)
        container_key = monster.pack_type.container_key
        if pack is None:
            if not rules and monster.loop_count is LoopCount.INFINITE:
                return
            pack = node[GAMBIT_PACK_KEY] = {}
        elif not isinstance(pack, dict):
            self._warn(f"{GAMBIT_PACK_KEY} is not an object; rules were not written",
                       monster=monster.name, field=GAMBIT_PACK_KEY)
            return

        if "loop_count" not in unparsed:
            _write_scalar(pack, LOOP_COUNT_KEY, loop_count_to_wire(monster.loop_count),
                          loop_count_to_wire(LoopCount.INFINITE))

        if rules or isinstance(pack.get(container_key), list):
            pack[container_key] = [encode_rule(rule, monster.pack_type) for rule in rules]


def synchronize(document: GambitPackDocument, previous_text: str,
                issues: Optional[List[LoadIssue]] = None) -> str:
    """Return new JSON text for the edited document; previous_text is not modified.

    Raises GambitDocumentError if previous_text is not JSON or lacks the
    document's category. Recoverable problems are appended to issues.
    """
    return Synchronizer(document, issues).run(previous_text)
