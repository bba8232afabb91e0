#!/usr/bin/env python3
"""
Command-line entry point for changeloggen.

Usage errors are raised before the repository is touched; the report is
only rendered once the whole branch has been read and aggregated, so a
failure never leaves a half-written changelog behind.
"""

import logging
import os
import shutil
import sys
from contextlib import nullcontext
from typing import Optional

import click
from click.core import ParameterSource

from . import __version__
from .config import load_config, configure_logging
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    CommandError, InvalidExtensionError, UsageError,
    get_exit_code_for_exception,
)
from .formats import FORMATS, RenderOptions, Renderer, get_renderer
from .pager import Pager
from .services import ChangelogService
from .domain import ChangeLog

logger = logging.getLogger(__name__)

PROG = "changeloggen"
USAGE = (
    f"Usage: {PROG} --txt | --rtf | --md | --html [--nocredit] "
    "[--repo path] [--branch name] [--output filename]"
)

# Several format flags resolve to the first one listed here
FORMAT_PRIORITY = ("html", "rtf", "md", "txt")


def select_format(**flags: bool) -> Optional[str]:
    """
    Pick the output format from the format flags.

    Returns:
        Format token, or None when no format flag is set
    """
    chosen = [fmt for fmt in FORMAT_PRIORITY if flags.get(fmt)]
    if not chosen:
        return None
    if len(chosen) > 1:
        logger.warning(
            f"Several formats given ({', '.join('--' + f for f in chosen)}), using --{chosen[0]}"
        )
    return chosen[0]


def resolve_output_path(path: str, fmt: str) -> str:
    """
    Apply the output file extension rules.

    A path without an extension gets ``.<fmt>`` appended; an existing
    extension must match the format token, ignoring case.

    Raises:
        InvalidExtensionError: Extension does not match the format
    """
    if fmt not in FORMATS:
        raise ValueError(f"Unknown format: {fmt}")

    root, ext = os.path.splitext(path)
    base = os.path.basename(root)
    # A bare ".md" is an extension, not a hidden file name
    if not ext and len(base) > 1 and base.startswith(".") and "." not in base[1:]:
        root, ext = root[:-len(base)], base

    if ext in ("", "."):
        resolved = f"{root}.{fmt}"
        logger.info(f"Outfile: {resolved}")
        return resolved

    if ext[1:].lower() != fmt.lower():
        raise InvalidExtensionError(ext)
    return path


def write_report(
    renderer: Renderer,
    changelog: ChangeLog,
    options: RenderOptions,
    output: Optional[str] = None,
    page: bool = False
) -> None:
    """
    Render a changelog to a file or to stdout.

    The output file is closed on every exit path; stdout is left open.
    """
    if output is not None:
        sink = click.open_file(output, 'w', encoding='utf-8', lazy=False)
        color = False
    else:
        sink = nullcontext(sys.stdout)
        color = sys.stdout.isatty() and os.environ.get('NO_COLOR') is None

    with sink as stream:
        if page and output is None and sys.stdout.isatty():
            total = len(renderer.render_text(changelog, options).splitlines())
            pager = Pager(height=shutil.get_terminal_size().lines, total=total, out=stream)
            try:
                renderer.write(changelog, options, pager, color=color)
            finally:
                pager.close()
        else:
            renderer.write(changelog, options, stream, color=color)
        stream.flush()


def _all_defaults(ctx: click.Context) -> bool:
    return all(
        ctx.get_parameter_source(name) in (ParameterSource.DEFAULT, None)
        for name in ctx.params
    )


@click.command(PROG, context_settings={'help_option_names': ['-h', '--help']})
@click.option('--txt', is_flag=True, help='Plain text output (coloured on a terminal)')
@click.option('--text', is_flag=True, help='Alias for --txt')
@click.option('--rtf', is_flag=True, help='Rich Text Format output')
@click.option('--md', is_flag=True, help='Markdown output')
@click.option('--html', is_flag=True, help='HTML output')
@click.option('--repo', default='.', show_default=True, help='Path to the git repository')
@click.option('--branch', default=None, help='Branch name (default: the checked-out branch)')
@click.option('--nocredit', is_flag=True, help='Omit the "Generated with" line')
@click.option('--output', default=None,
              help='Output file; the format extension is added when missing')
@click.option('--version', 'show_version', is_flag=True, help='Show the version and exit')
@click.option('--page', is_flag=True, help='Page terminal output one screen at a time')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(
    ctx: click.Context,
    txt: bool,
    text: bool,
    rtf: bool,
    md: bool,
    html: bool,
    repo: str,
    branch: Optional[str],
    nocredit: bool,
    output: Optional[str],
    show_version: bool,
    page: bool,
    debug: bool,
):
    """
    Generate a changelog from git history, grouped by release tag.

    Commits are listed newest first under the tag that introduced them;
    commits newer than the latest tag appear under "Untagged".

    \b
    Examples:
        # Markdown changelog of the current branch to stdout
        changeloggen --md
        # HTML changelog of another repository written to CHANGES.html
        changeloggen --html --repo ~/src/project --output CHANGES
        # Plain text for a named branch, without the credit line
        changeloggen --txt --branch release/2.x --nocredit
    """
    config = load_config()
    configure_logging(config, debug=debug)

    if _all_defaults(ctx):
        click.echo(USAGE, err=True)
        return

    if show_version:
        click.echo(f"{PROG} {__version__}", err=True)
        return

    try:
        fmt = select_format(html=html, rtf=rtf, md=md, txt=txt or text)
        if fmt is None:
            raise UsageError("Specify file format --txt | --rtf | --md | --html")

        if output is not None:
            output = resolve_output_path(output, fmt)

        changelog = ChangelogService().generate(repo, branch)
        options = RenderOptions.from_config(config, suppress_credit=nocredit)
        write_report(get_renderer(fmt), changelog, options, output=output, page=page)
        code = SUCCESS

    except KeyboardInterrupt:
        code = INTERRUPTED
    except CommandError as e:
        click.echo(f"Error: {e}", err=True)
        if isinstance(e, UsageError) and not isinstance(e, InvalidExtensionError):
            click.echo(USAGE, err=True)
        code = e.exit_code
    except Exception as e:
        logger.debug("Unhandled error", exc_info=True)
        click.echo(f"Error: {e}", err=True)
        code = get_exit_code_for_exception(e)

    ctx.exit(code)


def main():
    cli()


if __name__ == "__main__":
    main()
