"""HTML changelog renderer."""

from html import escape
from typing import Iterator

from ..domain import ChangeLog
from .base import CREDIT_TEXT, Renderer, RenderOptions, StyledLine


def _text(value: str) -> str:
    return escape(value, quote=False)


class HtmlRenderer(Renderer):
    """Styled banner and one table per bucket, one row per message."""

    name = "html"

    def render(self, changelog: ChangeLog, options: RenderOptions) -> Iterator[StyledLine]:
        fg = options.palette.foreground

        yield StyledLine("<html>\n<body>")

        for bucket in changelog:
            bg = options.palette.background(bucket)
            yield StyledLine(
                f'<b style="background-color:rgb({bg[0]},{bg[1]},{bg[2]});'
                f'color:rgb({fg[0]},{fg[1]},{fg[2]})">&nbsp;{_text(bucket.name)}&nbsp;</b>'
            )
            yield StyledLine(f"<table>\n<tr><td><b>{options.format_date(bucket.date)}</b></td></tr>")

            for message in bucket.messages:
                body = _text(message).replace("\n", "<br>\n&ensp;&ensp;")
                yield StyledLine(f"<tr><td>&nbsp;&#x2022;&nbsp;{body}</td></tr>")

            yield StyledLine("</table>\n<br>")

        yield StyledLine(f"Branch: {_text(options.branch(changelog))}<br>")

        if not options.suppress_credit:
            url = options.credit_url
            yield StyledLine(f'{CREDIT_TEXT}: <a href="{escape(url)}">{_text(url)}</a>')

        yield StyledLine("</body>\n</html>")
