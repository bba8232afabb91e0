"""Plain-text changelog renderer."""

from typing import Iterator

from ..domain import ChangeLog
from .base import (
    CREDIT_TEXT, STYLE_DATE, STYLE_TAG, STYLE_UNTAGGED,
    Renderer, RenderOptions, StyledLine,
)


class TextRenderer(Renderer):
    """
    Banner per bucket, then an indented message list.

    The banner and date lines carry style tokens; continuation lines of a
    multi-line message are tab-indented.
    """

    name = "txt"

    def render(self, changelog: ChangeLog, options: RenderOptions) -> Iterator[StyledLine]:
        for bucket in changelog:
            yield StyledLine(f" {bucket.name} ", STYLE_UNTAGGED if bucket.is_untagged else STYLE_TAG)
            yield StyledLine(f" {options.format_date(bucket.date)} ", STYLE_DATE)

            for message in bucket.messages:
                yield StyledLine("  " + message.replace("\n", "\n\t"))

            yield StyledLine("")

        yield StyledLine(f"Branch: {options.branch(changelog)}")

        if not options.suppress_credit:
            yield StyledLine("")
            yield StyledLine(f"{CREDIT_TEXT}: {options.credit_url}")
