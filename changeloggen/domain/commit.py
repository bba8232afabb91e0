"""
Commit and Tag domain objects for changeloggen.

Both are read-only projections of what the repository reports:
- Commit: identifier, author timestamp, full message
- Tag: name and the identifier of the commit it points at
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict


@dataclass(frozen=True)
class Commit:
    """
    A recorded change on a branch.

    Attributes:
        id: Commit identifier (full hash), unique within the branch
        timestamp: Author timestamp, timezone-aware
        message: Full commit message, may contain embedded line breaks
    """

    id: str
    timestamp: datetime
    message: str

    @property
    def date(self) -> date:
        """Calendar date of the author timestamp, in the author's offset."""
        return self.timestamp.date()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'timestamp': self.timestamp.isoformat(),
            'message': self.message,
        }

    def __str__(self) -> str:
        return f"{self.id[:8]} {self.message.splitlines()[0] if self.message else ''}"


@dataclass(frozen=True)
class Tag:
    """A named reference pointing at a commit."""

    name: str
    target: str

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'target': self.target}

    def __str__(self) -> str:
        return self.name
