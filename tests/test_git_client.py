"""
Tests for GitClient and its output parsers.

Parsers are tested on canned git output; GitClient methods are tested
with ``_run`` patched so no git binary is needed.
"""

import subprocess
from unittest.mock import patch, MagicMock

from changeloggen.domain import Tag
from changeloggen.infra import GitClient, parse_log, parse_tags
from changeloggen.infra.git_client import FIELD_SEP as F, RECORD_SEP as R


class TestParseLog:
    """Tests for parse_log."""

    def test_single_and_multiline_messages(self):
        output = (
            f"aaa{F}2024-01-15T10:30:00+01:00{F}Fix crash\n{R}\n"
            f"bbb{F}2024-01-10T08:00:00-05:00{F}Add parser\n\nLonger body\n{R}\n"
        )
        commits = parse_log(output)

        assert [c.id for c in commits] == ["aaa", "bbb"]
        assert commits[0].message == "Fix crash"
        assert commits[1].message == "Add parser\n\nLonger body"
        assert commits[0].timestamp.utcoffset().total_seconds() == 3600
        assert commits[1].date.isoformat() == "2024-01-10"

    def test_zulu_timestamp(self):
        commits = parse_log(f"aaa{F}2024-01-15T10:30:00Z{F}Fix\n{R}\n")
        assert commits[0].timestamp.utcoffset().total_seconds() == 0

    def test_empty_output(self):
        assert parse_log("") == []

    def test_skips_malformed_records(self):
        output = f"garbage{R}\naaa{F}not-a-date{F}Fix\n{R}\nbbb{F}2024-01-15T10:30:00+00:00{F}Ok\n{R}\n"
        commits = parse_log(output)
        assert [c.id for c in commits] == ["bbb"]


class TestParseTags:
    """Tests for parse_tags."""

    def test_lightweight_and_annotated(self):
        output = (
            f"v1.0{F}1111{F}\n"
            f"v2.0{F}tagobject{F}2222\n"
        )
        tags = parse_tags(output)

        assert [(t.name, t.target) for t in tags] == [("v1.0", "1111"), ("v2.0", "2222")]

    def test_ignores_blank_lines(self):
        assert parse_tags("\n\n") == []


class TestGitClient:
    """Tests for GitClient with _run patched."""

    def test_branches_primary_first(self):
        client = GitClient()
        responses = {
            'for-each-ref': (
                "refs/heads/develop\nrefs/heads/main\nrefs/heads/release\n", 0
            ),
            'symbolic-ref': ("refs/heads/main\n", 0),
        }
        with patch.object(client, '_run', side_effect=lambda args, cwd: responses[args[0]]):
            assert client.branches("/repo") == [
                ("main", "refs/heads/main"),
                ("develop", "refs/heads/develop"),
                ("release", "refs/heads/release"),
            ]

    def test_branches_include_remote_tracking(self):
        client = GitClient()
        responses = {
            'for-each-ref': (
                "refs/heads/main\n"
                "refs/remotes/origin/HEAD\n"
                "refs/remotes/origin/develop\n"
                "refs/remotes/origin/main\n", 0
            ),
            'symbolic-ref': ("refs/heads/main\n", 0),
        }
        with patch.object(client, '_run', side_effect=lambda args, cwd: responses[args[0]]) as run:
            assert client.branches("/repo") == [
                ("main", "refs/heads/main"),
                ("origin/develop", "refs/remotes/origin/develop"),
                ("origin/main", "refs/remotes/origin/main"),
            ]
        assert run.call_args_list[0][0][0][-2:] == ['refs/heads', 'refs/remotes']

    def test_branches_detached_head(self):
        client = GitClient()
        responses = {
            'for-each-ref': ("refs/heads/develop\nrefs/heads/main\n", 0),
            'symbolic-ref': ("", 1),
        }
        with patch.object(client, '_run', side_effect=lambda args, cwd: responses[args[0]]):
            assert [name for name, _ in client.branches("/repo")] == ["develop", "main"]
            assert client.current_branch("/repo") is None

    def test_current_branch_is_unambiguous(self):
        # A tag named like the branch must not turn "main" into "heads/main"
        client = GitClient()
        with patch.object(client, '_run', return_value=("refs/heads/main\n", 0)) as run:
            assert client.current_branch("/repo") == "main"
        assert run.call_args[0][0] == ['symbolic-ref', '--quiet', 'HEAD']

    def test_branches_empty_repository(self):
        client = GitClient()
        with patch.object(client, '_run', return_value=("", 0)):
            assert client.branches("/repo") == []

    def test_log_failure_returns_none(self):
        client = GitClient()
        with patch.object(client, '_run', return_value=(None, -1)):
            assert client.log("/repo", "refs/heads/main") is None

    def test_log_passes_qualified_ref(self):
        client = GitClient()
        with patch.object(client, '_run', return_value=("", 0)) as run:
            assert client.log("/repo", "refs/heads/main") == []
        args = run.call_args[0][0]
        assert args[0] == 'log'
        assert args[-2:] == ['refs/heads/main', '--']

    def test_tags_use_full_tag_name(self):
        client = GitClient()
        with patch.object(client, '_run', return_value=(f"main{F}abc{F}\n", 0)) as run:
            assert client.tags("/repo") == [Tag(name="main", target="abc")]
        fmt = run.call_args[0][0][1]
        assert fmt.startswith('--format=%(refname:lstrip=2)')

    def test_tags_failure_returns_none(self):
        client = GitClient()
        with patch.object(client, '_run', return_value=("", 128)):
            assert client.tags("/repo") is None

    def test_is_git_repo_missing_directory(self, tmp_path):
        assert not GitClient().is_git_repo(str(tmp_path / "missing"))

    def test_run_handles_timeout(self):
        client = GitClient(timeout=1)
        with patch('changeloggen.infra.git_client.subprocess.run',
                   side_effect=subprocess.TimeoutExpired(cmd='git', timeout=1)):
            assert client._run(['status'], cwd='.') == (None, -1)

    def test_run_handles_missing_git(self):
        client = GitClient()
        with patch('changeloggen.infra.git_client.subprocess.run',
                   side_effect=FileNotFoundError("git")):
            assert client._run(['status'], cwd='.') == (None, -1)

    def test_run_returns_stdout_and_code(self):
        client = GitClient()
        result = MagicMock(stdout="out\n", stderr="", returncode=0)
        with patch('changeloggen.infra.git_client.subprocess.run', return_value=result) as run:
            assert client._run(['status'], cwd='/repo') == ("out\n", 0)
        assert run.call_args[0][0] == ['git', 'status']
        assert run.call_args[1]['cwd'] == '/repo'
