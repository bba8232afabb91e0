"""
Tests for the changeloggen command line.

The repository layer is replaced by a mocked ChangelogService so these
tests exercise argument handling, output sinks and error reporting.
"""

import pytest
from datetime import date
from click.testing import CliRunner
from unittest.mock import patch, MagicMock

from changeloggen import __version__
from changeloggen.cli import cli, select_format, resolve_output_path, USAGE
from changeloggen.config import get_default_config
from changeloggen.domain import UNTAGGED, Bucket, BucketKey, ChangeLog
from changeloggen.exit_codes import (
    BRANCH_NOT_FOUND, GENERAL_ERROR, REPOSITORY_ERROR, USAGE_ERROR,
    BranchNotFoundError, InvalidExtensionError, RepositoryError,
)
from changeloggen.formats import RenderOptions, get_renderer


CHANGELOG = ChangeLog("main", (
    Bucket(BucketKey(UNTAGGED, date(2024, 3, 1)), ("Fix crash",)),
    Bucket(BucketKey("v1.0", date(2024, 1, 15)), ("Release 1.0",)),
))


def expected(fmt, **options):
    return get_renderer(fmt).render_text(CHANGELOG, RenderOptions(**options))


@pytest.fixture(autouse=True)
def default_config():
    with patch('changeloggen.cli.load_config', return_value=get_default_config()):
        yield


@pytest.fixture
def service():
    with patch('changeloggen.cli.ChangelogService') as cls:
        instance = MagicMock()
        instance.generate.return_value = CHANGELOG
        cls.return_value = instance
        yield instance


@pytest.fixture
def runner():
    return CliRunner()


class TestSelectFormat:
    """Tests for select_format."""

    def test_none_selected(self):
        assert select_format(html=False, rtf=False, md=False, txt=False) is None

    @pytest.mark.parametrize("flag", ["html", "rtf", "md", "txt"])
    def test_single_flag(self, flag):
        assert select_format(**{flag: True}) == flag

    def test_priority_order(self):
        assert select_format(html=True, rtf=True, md=True, txt=True) == "html"
        assert select_format(rtf=True, md=True, txt=True) == "rtf"
        assert select_format(md=True, txt=True) == "md"

    def test_several_flags_logged(self, caplog):
        with caplog.at_level("WARNING", logger="changeloggen"):
            select_format(md=True, txt=True)
        assert "using --md" in caplog.text


class TestResolveOutputPath:
    """Tests for resolve_output_path."""

    def test_extension_added(self):
        assert resolve_output_path("log", "md") == "log.md"

    def test_extension_added_in_directory(self, tmp_path):
        assert resolve_output_path(str(tmp_path / "log"), "html") == str(tmp_path / "log.html")

    def test_matching_extension_kept(self):
        assert resolve_output_path("log.md", "md") == "log.md"

    def test_extension_case_insensitive(self):
        assert resolve_output_path("CHANGES.RTF", "rtf") == "CHANGES.RTF"

    def test_mismatched_extension(self):
        with pytest.raises(InvalidExtensionError, match=r"Invalid extension \.txt"):
            resolve_output_path("log.txt", "md")

    def test_trailing_dot(self):
        assert resolve_output_path("log.", "txt") == "log.txt"

    def test_bare_extension_is_an_extension(self, tmp_path):
        assert resolve_output_path(".md", "md") == ".md"
        assert resolve_output_path(str(tmp_path / ".md"), "md") == str(tmp_path / ".md")
        with pytest.raises(InvalidExtensionError, match=r"Invalid extension \.txt"):
            resolve_output_path(".txt", "md")


class TestCli:
    """Tests for the cli command."""

    def test_no_arguments_shows_usage(self, runner, service):
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert USAGE in result.output
        service.generate.assert_not_called()

    def test_version(self, runner, service):
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert f"changeloggen {__version__}" in result.output
        service.generate.assert_not_called()

    def test_missing_format_is_usage_error(self, runner, service):
        result = runner.invoke(cli, ['--repo', '.'])
        assert result.exit_code == USAGE_ERROR
        assert "Error: Specify file format --txt | --rtf | --md | --html" in result.output
        assert USAGE in result.output
        service.generate.assert_not_called()

    def test_unknown_option(self, runner, service):
        result = runner.invoke(cli, ['--md', '--pdf'])
        assert result.exit_code == USAGE_ERROR
        service.generate.assert_not_called()

    @pytest.mark.parametrize("flag, fmt", [
        ('--txt', 'txt'),
        ('--text', 'txt'),
        ('--md', 'md'),
        ('--html', 'html'),
        ('--rtf', 'rtf'),
    ])
    def test_format_to_stdout(self, runner, service, flag, fmt):
        result = runner.invoke(cli, [flag])
        assert result.exit_code == 0, result.output
        assert result.output == expected(fmt)

    def test_nocredit(self, runner, service):
        result = runner.invoke(cli, ['--md', '--nocredit'])
        assert result.exit_code == 0
        assert result.output == expected('md', suppress_credit=True)
        assert "Generated with" not in result.output

    def test_several_formats_use_priority(self, runner, service):
        result = runner.invoke(cli, ['--txt', '--html'])
        assert result.exit_code == 0
        assert result.output.startswith("<html>")

    def test_repo_and_branch_passed_to_service(self, runner, service):
        result = runner.invoke(cli, ['--md', '--repo', '/some/repo', '--branch', 'dev'])
        assert result.exit_code == 0
        service.generate.assert_called_once_with('/some/repo', 'dev')

    def test_default_repo_is_current_directory(self, runner, service):
        runner.invoke(cli, ['--md'])
        service.generate.assert_called_once_with('.', None)

    def test_output_file_gets_extension(self, runner, service, tmp_path):
        target = tmp_path / "log"
        result = runner.invoke(cli, ['--md', '--output', str(target)])

        assert result.exit_code == 0, result.output
        assert not target.exists()
        assert (tmp_path / "log.md").read_text(encoding='utf-8') == expected('md')
        assert result.output == ""

    def test_output_file_with_matching_extension(self, runner, service, tmp_path):
        target = tmp_path / "CHANGES.HTML"
        result = runner.invoke(cli, ['--html', '--output', str(target)])

        assert result.exit_code == 0
        assert target.read_text(encoding='utf-8') == expected('html')

    def test_text_file_has_no_ansi(self, runner, service, tmp_path):
        target = tmp_path / "log.txt"
        runner.invoke(cli, ['--txt', '--output', str(target)])
        assert "\x1b[" not in target.read_text(encoding='utf-8')

    def test_invalid_extension_before_repository_access(self, runner, service, tmp_path):
        result = runner.invoke(cli, ['--md', '--output', str(tmp_path / "log.txt")])

        assert result.exit_code == USAGE_ERROR
        assert "Invalid extension .txt" in result.output
        service.generate.assert_not_called()
        assert not (tmp_path / "log.txt").exists()

    def test_branch_not_found(self, runner, service):
        service.generate.side_effect = BranchNotFoundError("feature")
        result = runner.invoke(cli, ['--md', '--branch', 'feature'])

        assert result.exit_code == BRANCH_NOT_FOUND
        assert "Error: Branch feature not found" in result.output

    def test_repository_error(self, runner, service):
        service.generate.side_effect = RepositoryError("Not a git repository: /tmp/x")
        result = runner.invoke(cli, ['--md', '--repo', '/tmp/x'])

        assert result.exit_code == REPOSITORY_ERROR
        assert "Error: Not a git repository: /tmp/x" in result.output

    def test_unexpected_error_reported(self, runner, service):
        service.generate.side_effect = RuntimeError("boom")
        result = runner.invoke(cli, ['--md'])

        assert result.exit_code == GENERAL_ERROR
        assert "Error: boom" in result.output

    def test_unwritable_output(self, runner, service, tmp_path):
        target = tmp_path / "missing" / "dir" / "log.md"
        result = runner.invoke(cli, ['--md', '--output', str(target)])

        assert result.exit_code != 0
        assert "Error:" in result.output
        assert not target.exists()

    def test_page_flag_without_terminal_writes_plainly(self, runner, service):
        result = runner.invoke(cli, ['--md', '--page'])
        assert result.exit_code == 0
        assert result.output == expected('md')
