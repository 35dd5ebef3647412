"""Error and issue types shared by the importer and the synchronizer.

Fatal problems (the text is not JSON, or it has no category object) raise
`GambitDocumentError` before anything is produced. Everything else is
reported as a `LoadIssue` and processing continues with a default.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class GambitDocumentError(ValueError):
    """The document cannot be imported or synchronized at all."""


class IssueSeverity(Enum):
    """Issue severity levels."""
    WARNING = "warning"      # A default was substituted for bad or missing data
    INFO = "info"            # Informational only


@dataclass
class LoadIssue:
    """A recoverable problem found in one monster or rule."""
    severity: IssueSeverity
    message: str
    monster: Optional[str] = None
    rule_index: Optional[int] = None
    field: Optional[str] = None

    @property
    def location(self) -> str:
        parts = []
        if self.monster is not None:
            parts.append(self.monster)
        if self.rule_index is not None:
            parts.append(f"rule[{self.rule_index}]")
        if self.field:
            parts.append(self.field)
        return ".".join(parts) or "<document>"

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


def warnings_only(issues: List[LoadIssue]) -> List[LoadIssue]:
    return [issue for issue in issues if issue.severity == IssueSeverity.WARNING]
