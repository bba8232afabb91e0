"""
Domain layer for changeloggen.

Contains pure domain objects with no I/O or side effects:
- Commit: A recorded change (identifier, author timestamp, message)
- Tag: A named reference to a commit
- BucketKey / Bucket: The grouping unit of a changelog
- ChangeLog: A branch name plus its ordered buckets

These objects are immutable value objects.
"""

from .commit import Commit, Tag
from .changelog import UNTAGGED, BucketKey, Bucket, ChangeLog

__all__ = [
    'Commit',
    'Tag',
    'UNTAGGED',
    'BucketKey',
    'Bucket',
    'ChangeLog',
]
