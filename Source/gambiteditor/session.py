"""Editing session: one loaded document plus the host text it is tied to.

The session owns the document model explicitly; hosts hold a session and
address rules by handle. Every edit goes through the session, which runs the
model operation and then synchronizes the host text (unless auto_sync is off,
in which case the host calls `sync()` itself).
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from . import editing
from .catalog import ActionCatalog
from .importer import import_pack
from .issues import LoadIssue
from .model import GambitPackDocument, GambitRule, LoopValue, MonsterEntry, RuleHandle
from .synchronizer import synchronize
from .table import RuleRow, build_rows

logger = logging.getLogger(__name__)


class HostSurface:
    """Interface for the text surface that holds the JSON being edited."""

    def get_current_text(self) -> str:
        raise NotImplementedError

    def set_current_text(self, text: str) -> None:
        raise NotImplementedError


class TextBuffer(HostSurface):
    """In-memory host surface."""

    def __init__(self, text: str = ""):
        self.text = text
        self.revision = 0

    def get_current_text(self) -> str:
        return self.text

    def set_current_text(self, text: str) -> None:
        self.text = text
        self.revision += 1


class EditingSession:
    def __init__(self, host: HostSurface, catalog: Optional[ActionCatalog] = None, auto_sync: bool = True):
        self.host = host
        self.catalog = catalog or ActionCatalog()
        self.auto_sync = auto_sync
        self.document: Optional[GambitPackDocument] = None
        self.issues: List[LoadIssue] = []
        self.sync_issues: List[LoadIssue] = []

    @property
    def loaded(self) -> bool:
        return self.document is not None

    def load(self) -> List[LoadIssue]:
        """Import the host's current text, replacing any loaded document.

        A fatal error propagates and leaves the previous document in place.
        """
        text = self.host.get_current_text()
        document, issues = import_pack(text, self.catalog)
        self.document = document
        self.issues = issues
        self.sync_issues = []
        logger.info("Session loaded %r with %d issues", document.category, len(issues))
        return issues

    def close(self) -> None:
        self.document = None
        self.issues = []
        self.sync_issues = []

    def sync(self) -> str:
        """Write the model into the host text. Nothing is written on a fatal error."""
        document = self._require_document()
        issues: List[LoadIssue] = []
        text = synchronize(document, self.host.get_current_text(), issues)
        self.host.set_current_text(text)
        self.sync_issues = issues
        return text

    # Lookup

    def _require_document(self) -> GambitPackDocument:
        if self.document is None:
            raise RuntimeError("No gambit pack loaded. Call load() first.")
        return self.document

    def monster_names(self) -> List[str]:
        return list(self._require_document().monsters)

    def monster(self, name: str) -> MonsterEntry:
        return self._require_document().monster(name)

    def rule(self, handle: RuleHandle) -> GambitRule:
        return self._require_document().locate(handle)[1]

    def rows(self) -> List[RuleRow]:
        return build_rows(self._require_document())

    def _after_edit(self, result: Any = None) -> Any:
        if self.auto_sync:
            self.sync()
        return result

    # Rule edits

    def toggle_enabled(self, handle: RuleHandle) -> bool:
        return self._after_edit(editing.toggle_enabled(self.rule(handle)))

    def set_condition(self, handle: RuleHandle, condition: Any, hp_threshold: Any = None) -> None:
        editing.set_condition(self.rule(handle), condition, hp_threshold)
        self._after_edit()

    def set_timing(self, handle: RuleHandle, value: Any) -> int:
        monster, rule = self._require_document().locate(handle)
        return self._after_edit(editing.set_timing(rule, value, monster.pack_type))

    def set_cool_down(self, handle: RuleHandle, value: Any) -> int:
        monster, rule = self._require_document().locate(handle)
        return self._after_edit(editing.set_cool_down(rule, value, monster.pack_type))

    def set_action(self, handle: RuleHandle, action_id: Any) -> str:
        return self._after_edit(editing.set_action(self.rule(handle), action_id, self.catalog))

    def set_action_param(self, handle: RuleHandle, value: Any) -> None:
        editing.set_action_param(self.rule(handle), value)
        self._after_edit()

    def set_radius(self, handle: RuleHandle, value: Any) -> None:
        editing.set_radius(self.rule(handle), value)
        self._after_edit()

    # Monster edits

    def add_rule(self, monster_name: str, index: Optional[int] = None) -> RuleHandle:
        return self._after_edit(editing.add_rule(self.monster(monster_name), self.catalog, index))

    def remove_rule(self, handle: RuleHandle) -> GambitRule:
        monster, _rule = self._require_document().locate(handle)
        return self._after_edit(editing.remove_rule(monster, handle))

    def move_rule(self, handle: RuleHandle, index: int) -> None:
        monster, _rule = self._require_document().locate(handle)
        editing.move_rule(monster, handle, index)
        self._after_edit()

    def remove_disabled_rules(self, monster_name: str) -> int:
        return self._after_edit(editing.remove_disabled_rules(self.monster(monster_name)))

    def set_monster_attribute(self, monster_name: str, attribute: str, value: Any) -> None:
        editing.set_monster_attribute(self.monster(monster_name), attribute, value)
        self._after_edit()

    def set_loop_count(self, monster_name: str, value: Any) -> LoopValue:
        return self._after_edit(editing.set_loop_count(self.monster(monster_name), value))
