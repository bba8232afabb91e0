"""
Infrastructure layer for changeloggen.

Contains abstractions for external systems:
- GitClient: Git command execution (branches, commits, tags)

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, parse_log, parse_tags

__all__ = [
    'GitClient',
    'parse_log',
    'parse_tags',
]
