"""
ChangeLog domain objects for changeloggen.

A changelog groups commit messages into buckets keyed by the release tag
that introduced them:
- BucketKey: (display name, date) value with structural equality
- Bucket: a key and its ordered messages (newest first)
- ChangeLog: branch name plus buckets ordered by descending date

The bucket date is the date of the commit that opened the bucket, not
metadata from the tag itself.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterator, Tuple

UNTAGGED = "Untagged"


@dataclass(frozen=True)
class BucketKey:
    """
    Grouping key for a changelog bucket.

    Two keys are equal iff both name and date are equal, so a tag name
    reappearing on a different date opens a separate bucket.
    """

    name: str
    date: date

    @property
    def is_untagged(self) -> bool:
        return self.name == UNTAGGED

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, 'date': self.date.isoformat()}

    def __str__(self) -> str:
        return f"{self.name}@{self.date.isoformat()}"


@dataclass(frozen=True)
class Bucket:
    """A bucket key with the messages assigned to it, in traversal order."""

    key: BucketKey
    messages: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.key.name

    @property
    def date(self) -> date:
        return self.key.date

    @property
    def is_untagged(self) -> bool:
        return self.key.is_untagged

    def to_dict(self) -> Dict[str, Any]:
        return {**self.key.to_dict(), 'messages': list(self.messages)}

    def __len__(self) -> int:
        return len(self.messages)


@dataclass(frozen=True)
class ChangeLog:
    """
    The aggregated changelog for one branch.

    Built once per run and never mutated afterwards; renderers receive it
    by reference.

    Attributes:
        name: Branch name
        buckets: Buckets ordered by descending date (ties keep insertion order)
    """

    name: str
    buckets: Tuple[Bucket, ...] = field(default_factory=tuple)

    @property
    def message_count(self) -> int:
        return sum(len(bucket) for bucket in self.buckets)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'branch': self.name,
            'buckets': [bucket.to_dict() for bucket in self.buckets],
        }

    def __iter__(self) -> Iterator[Bucket]:
        return iter(self.buckets)

    def __len__(self) -> int:
        return len(self.buckets)
