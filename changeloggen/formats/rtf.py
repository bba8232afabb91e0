"""Rich Text Format changelog renderer."""

from typing import Iterator

from ..domain import ChangeLog
from .base import CREDIT_TEXT, Renderer, RenderOptions, StyledLine

# Colour table indices (1-based, index 0 is the auto colour)
FOREGROUND_INDEX = 1
TAGGED_INDEX = 2
UNTAGGED_INDEX = 3


def escape_rtf(message: str) -> str:
    """
    Escape RTF control characters as hex codepoints.

    Backslash goes first so the escapes introduced for braces are not
    escaped again.
    """
    message = message.replace("\\", "\\'5c")
    message = message.replace("{", "\\'7b")
    message = message.replace("}", "\\'7d")
    if message.count("\n") > 1:
        message = message.replace("\n", "\\line\\tab\n")
    return message


class RtfRenderer(Renderer):
    """Preamble with a 3-entry colour table, one highlighted block per bucket."""

    name = "rtf"

    def render(self, changelog: ChangeLog, options: RenderOptions) -> Iterator[StyledLine]:
        palette = options.palette
        colors = "".join(
            f"\\red{r}\\green{g}\\blue{b};"
            for r, g, b in (palette.foreground, palette.tagged, palette.untagged)
        )

        yield StyledLine("{\\rtf1\\ansi{\\fonttbl\\f0\\fCourier New;}")
        yield StyledLine(f"{{\\colortbl;{colors}}}")

        for bucket in changelog:
            highlight = UNTAGGED_INDEX if bucket.is_untagged else TAGGED_INDEX
            yield StyledLine(
                f"{{\\pard\\li0\\highlight{FOREGROUND_INDEX}\\cf{FOREGROUND_INDEX}"
                f"\\highlight{highlight}\\b1  {bucket.name} }}"
                f"\\line\\b1 {options.format_date(bucket.date)}\\b0\\par"
            )
            yield StyledLine("{\\pard\\li400")

            for message in bucket.messages:
                yield StyledLine(f"\\bullet  {escape_rtf(message)}\\line")

            yield StyledLine("\\par}")

        yield StyledLine(f"\\fs20Branch: {options.branch(changelog)}\\line")

        if not options.suppress_credit:
            yield StyledLine(
                f'\\fs20{CREDIT_TEXT}: {{\\field{{\\*\\fldinst HYPERLINK "{options.credit_url}"}}}}\\line'
            )

        yield StyledLine("}")
