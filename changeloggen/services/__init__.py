"""
Service layer for changeloggen.

Contains the logic that orchestrates domain objects and infrastructure:
- ChangelogService: Reads a branch from the repository and aggregates it
- build_changelog: Pure bucket builder over already-fetched data

Services are the primary API for the CLI to use.
"""

from .changelog_service import (
    ChangelogService,
    ChangelogSource,
    build_changelog,
    index_tags,
    order_commits,
)

__all__ = [
    'ChangelogService',
    'ChangelogSource',
    'build_changelog',
    'index_tags',
    'order_commits',
]
