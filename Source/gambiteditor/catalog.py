from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .config import ACTION_CATALOG_PATH, UNKNOWN_ACTION
from .utils import as_int, normalize_name, suggest_from_catalog

logger = logging.getLogger(__name__)

_ACTION_CATALOG_CACHE: Dict[str, "ActionCatalog"] = {}


class ActionCatalog:
    """Read-only action id -> display name lookup.

    Built once from whatever table the host loaded. Keys may be ints or integer
    text; rows with an unparseable id or a blank name are skipped. Lookups never
    raise: an unknown id resolves to the "Unknown" placeholder.
    """

    def __init__(self, id_to_name: Optional[Mapping[Any, Any]] = None):
        self._id_to_name: Dict[int, str] = {}
        self._name_to_id: Dict[str, int] = {}
        skipped = 0
        for raw_id, raw_name in (id_to_name or {}).items():
            action_id = as_int(raw_id)
            name = raw_name.strip() if isinstance(raw_name, str) else ""
            if action_id is None or not name:
                skipped += 1
                continue
            self._id_to_name[action_id] = name
            self._name_to_id.setdefault(normalize_name(name), action_id)
        if skipped:
            logger.debug("Action catalog skipped %d unusable entries", skipped)

    @classmethod
    def from_rows(cls, rows: Iterable[Tuple[Any, Any]]) -> "ActionCatalog":
        """Build from two-column (id, name) rows; short rows are ignored."""
        mapping: Dict[Any, Any] = {}
        for row in rows:
            if len(row) < 2:
                continue
            mapping[row[0]] = row[1]
        return cls(mapping)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ActionCatalog":
        """Accept either {"id_to_name": {...}} or a flat {id: name} mapping."""
        nested = data.get("id_to_name") if isinstance(data, Mapping) else None
        return cls(nested if isinstance(nested, Mapping) else data)

    def __len__(self) -> int:
        return len(self._id_to_name)

    def __contains__(self, action_id: object) -> bool:
        parsed = as_int(action_id)
        return parsed is not None and parsed in self._id_to_name

    def resolve(self, action_id: Any) -> str:
        parsed = as_int(action_id)
        if parsed is None:
            return UNKNOWN_ACTION
        return self._id_to_name.get(parsed, UNKNOWN_ACTION)

    def id_for(self, name: str) -> Optional[int]:
        if not isinstance(name, str):
            return None
        return self._name_to_id.get(normalize_name(name))

    def items(self) -> List[Tuple[int, str]]:
        return sorted(self._id_to_name.items())

    def search(self, text: str) -> List[Tuple[int, str]]:
        """Filter actions whose id or name contains text (case-insensitive), by id."""
        needle = (text or "").strip().lower()
        if not needle:
            return self.items()
        return [
            (action_id, name)
            for action_id, name in self.items()
            if needle in str(action_id) or needle in name.lower()
        ]

    def suggest(self, query: str, limit: int = 10) -> List[Tuple[int, str]]:
        """Fuzzy name suggestions for a partial or misspelt action name."""
        names = suggest_from_catalog(query, self._name_to_id, limit=limit)
        out = []
        for key in names:
            action_id = self._name_to_id[key]
            out.append((action_id, self._id_to_name[action_id]))
        return out


def load_action_catalog(path: Optional[str] = None) -> ActionCatalog:
    """Load an action catalog JSON file with caching to prevent repeated file I/O.

    A missing file yields an empty catalog (every id shows as "Unknown").
    """
    path = os.path.normpath(path or ACTION_CATALOG_PATH)
    cached = _ACTION_CATALOG_CACHE.get(path)
    if cached is not None:
        return cached

    if not os.path.exists(path):
        logger.warning("Action catalog not found at %s; action names will show as %s", path, UNKNOWN_ACTION)
        catalog = ActionCatalog()
    else:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path} must contain a JSON object at the top level.")
        catalog = ActionCatalog.from_mapping(data)
        logger.info("Loaded %d actions from %s", len(catalog), path)
    _ACTION_CATALOG_CACHE[path] = catalog
    return catalog


def clear_catalog_cache() -> None:
    _ACTION_CATALOG_CACHE.clear()
