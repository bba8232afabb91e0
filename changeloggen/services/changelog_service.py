"""
Changelog service for changeloggen.

Splits the work into two steps:
- fetch: read branch, commits and tags from the repository (fallible I/O)
- build: aggregate already-fetched data into a ChangeLog (pure)

The aggregation is a single pass over commits ordered newest first.
A commit that a tag points at opens a new bucket keyed by
(tag name, commit date); commits seen before the first tag match go to
the "Untagged" bucket.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ..domain import UNTAGGED, Bucket, BucketKey, ChangeLog, Commit, Tag
from ..exit_codes import BranchNotFoundError, RepositoryError
from ..infra import GitClient

logger = logging.getLogger(__name__)


@dataclass
class ChangelogSource:
    """Everything read from the repository for one branch."""
    branch: str
    commits: List[Commit] = field(default_factory=list)
    tags: List[Tag] = field(default_factory=list)


def order_commits(commits: Iterable[Commit]) -> List[Commit]:
    """Sort commits newest first by author timestamp (stable for ties)."""
    return sorted(commits, key=lambda c: c.timestamp, reverse=True)


def index_tags(tags: Iterable[Tag]) -> Dict[str, str]:
    """
    Index tag names by target commit.

    When several tags point at the same commit the first one in lookup
    order wins.
    """
    index: Dict[str, str] = {}
    for tag in tags:
        index.setdefault(tag.target, tag.name)
    return index


def build_changelog(name: str, commits: Sequence[Commit], tags: Iterable[Tag]) -> ChangeLog:
    """
    Aggregate commits into tag-keyed buckets.

    Args:
        name: Branch name
        commits: Commits ordered by descending author timestamp
        tags: Tags of the repository

    Returns:
        ChangeLog with buckets ordered by descending date
    """
    tag_index = index_tags(tags)
    buckets: Dict[BucketKey, List[str]] = {}
    current: Optional[BucketKey] = None

    for commit in commits:
        tag_name = tag_index.get(commit.id)

        if tag_name is not None:
            current = BucketKey(tag_name, commit.date)
        elif current is None:
            current = BucketKey(UNTAGGED, commit.date)

        buckets.setdefault(current, []).append(commit.message.rstrip('\r\n'))

    # sorted() is stable: equal dates keep insertion order
    ordered = sorted(buckets.items(), key=lambda item: item[0].date, reverse=True)

    return ChangeLog(
        name=name,
        buckets=tuple(Bucket(key, tuple(messages)) for key, messages in ordered),
    )


class ChangelogService:
    """
    Service for turning a repository branch into a ChangeLog.

    Example:
        service = ChangelogService()
        changelog = service.generate(".", branch="main")
        for bucket in changelog:
            print(bucket.name, len(bucket))
    """

    def __init__(self, git_client: Optional[GitClient] = None):
        """
        Initialize ChangelogService.

        Args:
            git_client: Git client instance (creates default if None)
        """
        self.git = git_client or GitClient()

    def fetch(self, repo_path: str, branch: Optional[str] = None) -> ChangelogSource:
        """
        Read commits and tags for a branch.

        Args:
            repo_path: Path to the git repository
            branch: Local or remote-tracking (``origin/develop``) branch name,
                or None for the primary branch

        Returns:
            ChangelogSource with commits ordered newest first

        Raises:
            RepositoryError: Path is not a readable repository
            BranchNotFoundError: Named branch does not exist
        """
        if not self.git.is_git_repo(repo_path):
            raise RepositoryError(f"Not a git repository: {repo_path}")

        branches = self.git.branches(repo_path)
        if branch is None:
            if not branches:
                raise RepositoryError(f"Repository has no branches: {repo_path}")
            branch, ref = branches[0]
        else:
            refs = {}
            for name, full_ref in branches:
                refs.setdefault(name, full_ref)
            if branch not in refs:
                raise BranchNotFoundError(branch)
            ref = refs[branch]

        commits = self.git.log(repo_path, ref)
        if commits is None:
            raise RepositoryError(f"Unable to read commits of {branch}")

        tags = self.git.tags(repo_path)
        if tags is None:
            raise RepositoryError(f"Unable to read tags of {repo_path}")

        logger.info(f"{branch} commits {len(commits):,} tags {len(tags):,}")

        return ChangelogSource(branch=branch, commits=order_commits(commits), tags=tags)

    def build(self, source: ChangelogSource) -> ChangeLog:
        """Aggregate fetched data into a ChangeLog."""
        started = time.monotonic()
        changelog = build_changelog(source.branch, source.commits, source.tags)
        elapsed = int(time.monotonic() - started)

        hours, rest = divmod(elapsed, 3600)
        minutes, seconds = divmod(rest, 60)
        logger.info(f"Duration {hours:02}:{minutes:02}:{seconds:02}")
        logger.debug(f"{len(changelog)} buckets, {changelog.message_count} messages")

        return changelog

    def generate(self, repo_path: str, branch: Optional[str] = None) -> ChangeLog:
        """Fetch a branch and build its ChangeLog."""
        return self.build(self.fetch(repo_path, branch))
