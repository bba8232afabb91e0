"""Markdown changelog renderer."""

from typing import Iterator

from ..domain import ChangeLog
from .base import CREDIT_TEXT, Renderer, RenderOptions, StyledLine


class MarkdownRenderer(Renderer):
    """Level-4 heading with an inline-styled span, bold date, bullet list."""

    name = "md"

    def render(self, changelog: ChangeLog, options: RenderOptions) -> Iterator[StyledLine]:
        fg = options.palette.foreground

        for bucket in changelog:
            bg = options.palette.background(bucket)
            yield StyledLine(
                f'#### <span style="background-color:rgb({bg[0]},{bg[1]},{bg[2]});'
                f'color:rgb({fg[0]},{fg[1]},{fg[2]})">{bucket.name}</span>'
            )
            yield StyledLine(f"**{options.format_date(bucket.date)}**")

            for message in bucket.messages:
                # Two trailing spaces force a hard line break
                yield StyledLine("- " + message.replace("\n", "  \n&ensp;"))

        yield StyledLine("")
        yield StyledLine(f"Branch: {options.branch(changelog)}<br>")

        if not options.suppress_credit:
            yield StyledLine(f"{CREDIT_TEXT}: [{options.credit_url}]({options.credit_url})")
