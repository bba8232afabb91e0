"""
changeloggen - Changelogs from git history, grouped by release tag.

Reads the commits of one branch, assigns each commit to the tag that
introduced it, and renders the result as plain text, Markdown, HTML or
Rich Text Format.

Quick Start:
    from changeloggen import ChangelogService, RenderOptions, get_renderer

    changelog = ChangelogService().generate(".", branch="main")
    get_renderer("md").write(changelog, RenderOptions(), sys.stdout)

    # Or aggregate already-fetched data without touching a repository
    changelog = build_changelog("main", commits, tags)

Domain Objects:
    Commit, Tag - Read-only projections of repository data
    BucketKey, Bucket - Tag name + date, with the messages assigned to it
    ChangeLog - Branch name plus buckets, newest first

Formats:
    txt, md, html, rtf
"""

__version__ = "1.0.0"

from .domain import (
    UNTAGGED,
    Commit,
    Tag,
    BucketKey,
    Bucket,
    ChangeLog,
)

from .services import ChangelogService, build_changelog

from .formats import FORMATS, RenderOptions, get_renderer

from .config import load_config

__all__ = [
    "__version__",
    # Domain objects
    "UNTAGGED",
    "Commit",
    "Tag",
    "BucketKey",
    "Bucket",
    "ChangeLog",
    # Services
    "ChangelogService",
    "build_changelog",
    # Rendering
    "FORMATS",
    "RenderOptions",
    "get_renderer",
    # Configuration
    "load_config",
]
