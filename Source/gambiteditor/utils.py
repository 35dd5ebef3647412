from __future__ import annotations

import difflib
import json
import math
from typing import Any, Optional

from .config import JSON_INDENT


def as_int(value: Any) -> Optional[int]:
    """Return value as an int if it is a syntactically valid integer, else None.

    Accepts ints, integral floats and integer text (surrounding whitespace and a
    sign allowed). Booleans are rejected even though they subclass int.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            return None
    return None


def as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lower_val = value.strip().lower()
        if lower_val in ("true", "1", "yes", "on"):
            return True
        if lower_val in ("false", "0", "no", "off"):
            return False
        return None
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
    return None


def same_json_value(existing: Any, new: Any) -> bool:
    """True when two JSON scalars mean the same thing (3 == 3.0, but True != 1)."""
    if isinstance(existing, bool) or isinstance(new, bool):
        return type(existing) is type(new) and existing == new
    if isinstance(existing, (int, float)) and isinstance(new, (int, float)):
        return existing == new
    return type(existing) is type(new) and existing == new


def dumps_json(data: Any, indent: Optional[int] = None) -> str:
    return json.dumps(data, ensure_ascii=False, indent=JSON_INDENT if indent is None else indent)


def normalize_name(name: str) -> str:
    return " ".join(name.strip().lower().split())


def suggest_from_catalog(query: str, name_to_id: dict[str, int], limit: int = 10) -> list[str]:
    key = normalize_name(query)
    names = list(name_to_id.keys())
    # Substring matches first
    subs = [n for n in names if key in n]
    # Add close matches next
    close = difflib.get_close_matches(key, names, n=limit, cutoff=0.6)
    merged = []
    for n in subs + close:
        if n not in merged:
            merged.append(n)
        if len(merged) >= limit:
            break
    return merged
