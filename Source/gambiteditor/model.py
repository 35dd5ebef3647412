"""In-memory document model for gambit packs.

A pack document is one category (the single top-level key of the JSON text)
holding monsters in file order. Each monster owns its rules in an arena keyed
by handles that never change while the document is loaded, so a view can keep
referring to a rule after other rules were inserted, moved or removed.

Monster-level values (attack range, ranged flag, base/name ids) are copied
onto every rule. `MonsterEntry` is the only writer of those copies.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union

TIMING_MIN = 0
TIMING_MAX = 999
HP_THRESHOLD_MIN = 1
HP_THRESHOLD_MAX = 100
INFINITE_LOOP_WIRE = -1

RuleHandle = int

_HANDLE_SEQ = itertools.count(1)


class Condition(Enum):
    """Targeting condition of a rule; values are the JSON spellings."""
    NONE = "None"
    SELF = "Self"
    PLAYER = "Player"
    PLAYER_AND_ALLY = "PlayerAndAlly"
    ALLY = "Ally"
    BNPC = "BNpc"
    TOP_HATE_TARGET = "TopHateTarget"
    HP_BELOW_THRESHOLD = "HPSelfPctLessThanTarget"

    @property
    def label(self) -> str:
        return _CONDITION_LABELS.get(self, self.value)

    @property
    def needs_threshold(self) -> bool:
        return self is Condition.HP_BELOW_THRESHOLD

    @classmethod
    def parse(cls, value: Any) -> Optional["Condition"]:
        """Resolve a JSON spelling, alias or display label; None if unknown."""
        if isinstance(value, Condition):
            return value
        if not isinstance(value, str):
            return None
        text = value.strip()
        try:
            return cls(text)
        except ValueError:
            pass
        lowered = text.lower()
        for cond in cls:
            if cond.value.lower() == lowered or cond.label.lower() == lowered:
                return cond
        return _CONDITION_ALIASES.get(lowered)


_CONDITION_LABELS = {
    Condition.NONE: "No target",
    Condition.PLAYER_AND_ALLY: "Player & Ally",
    Condition.TOP_HATE_TARGET: "Enemy: Top Aggro",
    Condition.HP_BELOW_THRESHOLD: "HP < X%",
}

_CONDITION_ALIASES = {
    "hpbelowthreshold": Condition.HP_BELOW_THRESHOLD,
}


class PackType(Enum):
    """Which timing field the rules of a pack use."""
    TIMELINE = "TimeLine"
    RULESET = "RuleSet"

    @property
    def container_key(self) -> str:
        return "timeLines" if self is PackType.TIMELINE else "ruleSets"

    @property
    def timing_key(self) -> str:
        return "timing" if self is PackType.TIMELINE else "coolDown"


class LoopCount(Enum):
    """Sentinel for packs that repeat forever."""
    INFINITE = "Infinite"


LoopValue = Union[int, LoopCount]


def loop_count_to_wire(value: LoopValue) -> int:
    if value is LoopCount.INFINITE:
        return INFINITE_LOOP_WIRE
    return int(value)


def loop_count_from_wire(raw: Any) -> Optional[LoopValue]:
    """Decode a JSON loopCount; None when the value is not a valid count."""
    if isinstance(raw, LoopCount):
        return raw
    if isinstance(raw, str) and raw.strip().lower() == LoopCount.INFINITE.value.lower():
        return LoopCount.INFINITE
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        return None
    try:
        number = int(raw)
    except (TypeError, ValueError):
        return None
    if isinstance(raw, float) and raw != number:
        return None
    if number == INFINITE_LOOP_WIRE:
        return LoopCount.INFINITE
    if number >= 1:
        return number
    return None


@dataclass
class GambitRule:
    """One conditional action entry of a monster's pack."""
    condition: Condition = Condition.NONE
    action_id: int = 0
    action_param: int = 0
    timing: int = 0
    cool_down: int = 0
    hp_threshold: Optional[int] = None
    radius: Optional[float] = None
    enabled: bool = True
    description: str = ""
    # Written back only if the source carried one or an edit set it
    write_description: bool = False

    # Cached copies of monster-level values, maintained by MonsterEntry
    attack_range: float = 0.0
    is_ranged: bool = False
    base_id: Any = 0
    name_id: Any = 0

    # Keys the model does not understand, and the key order of the source object
    extra: Dict[str, Any] = field(default_factory=dict)
    key_order: List[str] = field(default_factory=list)

    handle: Optional[RuleHandle] = None


_SHARED_ATTRIBUTES = ("attack_range", "is_ranged", "base_id", "name_id")


@dataclass
class MonsterEntry:
    """A monster of the pack and its ordered rules."""
    name: str
    base_id: Any = 0
    name_id: Any = 0
    attack_range: float = 0.0
    is_ranged: bool = False
    pack_type: PackType = PackType.TIMELINE
    loop_count: LoopValue = LoopCount.INFINITE
    # Attributes whose document value could not be read; left untouched on sync
    unparsed: Set[str] = field(default_factory=set)
    _arena: Dict[RuleHandle, GambitRule] = field(default_factory=dict, init=False, repr=False)
    _order: List[RuleHandle] = field(default_factory=list, init=False, repr=False)

    @property
    def rules(self) -> List[GambitRule]:
        return [self._arena[h] for h in self._order]

    @property
    def handles(self) -> List[RuleHandle]:
        return list(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, handle: object) -> bool:
        return handle in self._arena

    def rule(self, handle: RuleHandle) -> GambitRule:
        try:
            return self._arena[handle]
        except KeyError:
            raise KeyError(f"Monster {self.name!r} has no rule with handle {handle}") from None

    def index_of(self, handle: RuleHandle) -> int:
        self.rule(handle)
        return self._order.index(handle)

    def add_rule(self, rule: GambitRule, index: Optional[int] = None) -> RuleHandle:
        """Insert a rule (append by default) and return its handle."""
        handle = next(_HANDLE_SEQ)
        rule.handle = handle
        self._copy_shared_to(rule)
        self._arena[handle] = rule
        if index is None:
            self._order.append(handle)
        else:
            self._order.insert(index, handle)
        return handle

    def remove_rule(self, handle: RuleHandle) -> GambitRule:
        rule = self.rule(handle)
        self._order.remove(handle)
        del self._arena[handle]
        return rule

    def move_rule(self, handle: RuleHandle, index: int) -> None:
        self.rule(handle)
        self._order.remove(handle)
        index = max(0, min(index, len(self._order)))
        self._order.insert(index, handle)

    def set_shared(self, attribute: str, value: Any) -> None:
        """Write a monster-level value and every rule's cached copy of it."""
        if attribute not in _SHARED_ATTRIBUTES:
            raise KeyError(f"Not a monster-level attribute: {attribute}")
        setattr(self, attribute, value)
        self.unparsed.discard(attribute)
        for rule in self._arena.values():
            setattr(rule, attribute, value)

    def set_loop_count(self, value: LoopValue) -> None:
        self.loop_count = value
        self.unparsed.discard("loop_count")

    def is_consistent(self) -> bool:
        return all(
            getattr(rule, attr) == getattr(self, attr)
            for rule in self._arena.values()
            for attr in _SHARED_ATTRIBUTES
        )

    def _copy_shared_to(self, rule: GambitRule) -> None:
        for attr in _SHARED_ATTRIBUTES:
            setattr(rule, attr, getattr(self, attr))


@dataclass
class GambitPackDocument:
    """All monsters of one category, in file order."""
    category: str
    monsters: Dict[str, MonsterEntry] = field(default_factory=dict)

    def add_monster(self, monster: MonsterEntry) -> MonsterEntry:
        self.monsters[monster.name] = monster
        return monster

    def monster(self, name: str) -> MonsterEntry:
        try:
            return self.monsters[name]
        except KeyError:
            raise KeyError(f"No monster named {name!r} in category {self.category!r}") from None

    def iter_rules(self) -> Iterator[Tuple[MonsterEntry, GambitRule]]:
        for monster in self.monsters.values():
            for rule in monster.rules:
                yield monster, rule

    def locate(self, handle: RuleHandle) -> Tuple[MonsterEntry, GambitRule]:
        for monster in self.monsters.values():
            if handle in monster:
                return monster, monster.rule(handle)
        raise KeyError(f"No rule with handle {handle}")

    def rules_by_monster(self) -> Dict[str, List[GambitRule]]:
        return {name: monster.rules for name, monster in self.monsters.items()}

    @property
    def rule_count(self) -> int:
        return sum(len(m) for m in self.monsters.values())
