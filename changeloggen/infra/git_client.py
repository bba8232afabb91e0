"""
Git client infrastructure for changeloggen.

Provides a clean abstraction over git command execution.
All repository reads go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from the changelog aggregation
"""

import subprocess
from typing import Optional, List, Tuple
from pathlib import Path
from datetime import datetime
import logging

from ..domain import Commit, Tag

logger = logging.getLogger(__name__)

# Field and record separators for machine-readable git output
FIELD_SEP = '\x1f'
RECORD_SEP = '\x1e'

LOCAL_PREFIX = 'refs/heads/'
REMOTE_PREFIX = 'refs/remotes/'


class GitClient:
    """
    Abstraction over git commands.

    Example:
        client = GitClient()
        name, ref = client.branches("/path/to/repo")[0]
        for commit in client.log("/path/to/repo", ref):
            print(commit.id, commit.message)
    """

    def __init__(self, timeout: Optional[int] = 120):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 120, None for no limit)
        """
        self.timeout = timeout

    def _run(self, args: List[str], cwd: str) -> Tuple[Optional[str], int]:
        """
        Run a git command.

        Args:
            args: Arguments passed to git
            cwd: Working directory

        Returns:
            Tuple of (stdout, returncode)
        """
        cmd = ['git', *args]
        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding='utf-8',
                errors='replace',
                timeout=self.timeout
            )
            if result.returncode != 0 and result.stderr:
                logger.debug(f"git {' '.join(args)}: {result.stderr.strip()}")
            return result.stdout, result.returncode

        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(cmd)}")
            return None, -1
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(cmd)} - {e}")
            return None, -1

    def is_git_repo(self, path: str) -> bool:
        """Check if path is inside a git work tree or is a bare repository."""
        if not Path(path).is_dir():
            return False
        output, code = self._run(['rev-parse', '--git-dir'], cwd=path)
        return code == 0 and bool(output and output.strip())

    def current_branch(self, path: str) -> Optional[str]:
        """Get current branch name (None when HEAD is detached)."""
        output, code = self._run(['symbolic-ref', '--quiet', 'HEAD'], cwd=path)
        ref = output.strip() if code == 0 and output else ''
        if ref.startswith(LOCAL_PREFIX):
            return ref[len(LOCAL_PREFIX):]
        return None

    def branches(self, path: str) -> List[Tuple[str, str]]:
        """
        List branches as (name, full ref) pairs.

        Local branches come first, with the checked-out branch leading as
        the primary branch. Remote-tracking branches follow under their
        ``<remote>/<name>`` names; symbolic ``<remote>/HEAD`` refs are skipped.
        """
        output, code = self._run(
            ['for-each-ref', '--format=%(refname)', 'refs/heads', 'refs/remotes'], cwd=path
        )
        if code != 0 or not output:
            return []

        local, remote = [], []
        for ref in (line.strip() for line in output.splitlines()):
            if ref.startswith(LOCAL_PREFIX):
                local.append((ref[len(LOCAL_PREFIX):], ref))
            elif ref.startswith(REMOTE_PREFIX):
                name = ref[len(REMOTE_PREFIX):]
                if not name.endswith('/HEAD'):
                    remote.append((name, ref))

        current = self.current_branch(path)
        local.sort(key=lambda pair: pair[0] != current)
        return local + remote

    def log(self, path: str, ref: str) -> Optional[List[Commit]]:
        """
        Get every commit reachable from a branch.

        Args:
            path: Path to git repository
            ref: Fully qualified branch ref, e.g. ``refs/heads/main``

        Returns:
            List of Commit objects in git's traversal order,
            or None if git failed
        """
        fmt = f'--format=%H{FIELD_SEP}%aI{FIELD_SEP}%B{RECORD_SEP}'
        output, code = self._run(['log', fmt, ref, '--'], cwd=path)
        if code != 0 or output is None:
            return None
        return parse_log(output)

    def tags(self, path: str) -> Optional[List[Tag]]:
        """
        List tags with the commit each one points at.

        Annotated tags are peeled to their commit.

        Returns:
            List of Tag objects in ref order, or None if git failed
        """
        fmt = '--format=%(refname:lstrip=2)%1f%(objectname)%1f%(*objectname)'
        output, code = self._run(['for-each-ref', fmt, 'refs/tags'], cwd=path)
        if code != 0 or output is None:
            return None
        return parse_tags(output)


def parse_log(output: str) -> List[Commit]:
    """Parse ``git log`` output produced with the record format above."""
    commits = []
    for record in output.split(RECORD_SEP):
        record = record.lstrip('\r\n')
        if not record:
            continue

        parts = record.split(FIELD_SEP, 2)
        if len(parts) < 3:
            logger.debug(f"Skipping malformed log record: {record[:40]!r}")
            continue

        commit_hash, date_str, message = parts
        try:
            timestamp = datetime.fromisoformat(date_str.strip().replace('Z', '+00:00'))
        except ValueError:
            logger.warning(f"Unparseable author date {date_str!r} on {commit_hash}")
            continue

        commits.append(Commit(
            id=commit_hash.strip(),
            timestamp=timestamp,
            message=message.rstrip('\r\n'),
        ))

    return commits


def parse_tags(output: str) -> List[Tag]:
    """Parse ``git for-each-ref refs/tags`` output."""
    tags = []
    for line in output.splitlines():
        if not line or FIELD_SEP not in line:
            continue

        parts = line.split(FIELD_SEP)
        name = parts[0].strip()
        target = parts[1].strip()
        peeled = parts[2].strip() if len(parts) > 2 else ''

        tags.append(Tag(name=name, target=peeled or target))

    return tags
