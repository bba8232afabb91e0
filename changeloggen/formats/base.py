"""
Shared pieces of the changelog renderers.

A renderer is a pure function of (ChangeLog, RenderOptions): ``render``
yields StyledLine objects and never touches the terminal. ``write``
streams those lines to a text sink, interpreting style tokens through
Rich only when colour output is requested.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterator, Optional, TextIO, Tuple

from rich.console import Console
from rich.text import Text

from ..config import DEFAULT_CREDIT_URL
from ..domain import Bucket, ChangeLog

RGB = Tuple[int, int, int]

CREDIT_TEXT = "Generated with"

# Symbolic style tokens attached to rendered lines
STYLE_TAG = "tag"
STYLE_UNTAGGED = "untagged"
STYLE_DATE = "date"

# How the terminal adapter paints each token
TERMINAL_STYLES = {
    STYLE_TAG: "white on green",
    STYLE_UNTAGGED: "white on yellow",
    STYLE_DATE: "white on bright_black",
}

_DAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
_MONTHS = ("January", "February", "March", "April", "May", "June", "July",
           "August", "September", "October", "November", "December")


def format_long_date(value: date, fmt: Optional[str] = None) -> str:
    """
    Format a bucket date.

    Without ``fmt`` the result is a locale-independent English long date,
    e.g. ``Monday, January 15, 2024``. ``fmt`` is a strftime pattern.
    """
    if fmt:
        return value.strftime(fmt)
    return f"{_DAYS[value.weekday()]}, {_MONTHS[value.month - 1]} {value.day}, {value.year}"


def _rgb(value: Any) -> RGB:
    r, g, b = (int(part) for part in value)
    return (r, g, b)


@dataclass(frozen=True)
class Palette:
    """Banner colours: text foreground, tagged and untagged backgrounds."""
    foreground: RGB = (255, 255, 255)
    tagged: RGB = (0, 100, 0)
    untagged: RGB = (255, 165, 0)

    def background(self, bucket: Bucket) -> RGB:
        return self.untagged if bucket.is_untagged else self.tagged

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'Palette':
        colors = config.get("colors", {})
        defaults = cls()
        return cls(
            foreground=_rgb(colors.get("foreground", defaults.foreground)),
            tagged=_rgb(colors.get("tagged", defaults.tagged)),
            untagged=_rgb(colors.get("untagged", defaults.untagged)),
        )


@dataclass(frozen=True)
class RenderOptions:
    """
    Presentation options shared by every renderer.

    Attributes:
        suppress_credit: Omit the trailing attribution line
        branch_name: Echoed in the footer (defaults to the ChangeLog name)
        credit_url: Link used in the attribution line
        date_format: strftime pattern for bucket dates (None = long date)
        palette: Banner colours
    """
    suppress_credit: bool = False
    branch_name: Optional[str] = None
    credit_url: str = DEFAULT_CREDIT_URL
    date_format: Optional[str] = None
    palette: Palette = field(default_factory=Palette)

    @classmethod
    def from_config(cls, config: Dict[str, Any], **overrides) -> 'RenderOptions':
        output = config.get("output", {})
        kwargs = {
            "credit_url": output.get("credit_url") or DEFAULT_CREDIT_URL,
            "date_format": output.get("date_format") or None,
            "palette": Palette.from_config(config),
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    def branch(self, changelog: ChangeLog) -> str:
        return self.branch_name if self.branch_name is not None else changelog.name

    def format_date(self, value: date) -> str:
        return format_long_date(value, self.date_format)


@dataclass(frozen=True)
class StyledLine:
    """One output line and an optional symbolic style token."""
    text: str
    style: Optional[str] = None

    def __str__(self) -> str:
        return self.text


class Renderer:
    """Base class for format-specific changelog serializers."""

    #: Format token, also the output file extension
    name = ""

    def render(self, changelog: ChangeLog, options: RenderOptions) -> Iterator[StyledLine]:
        raise NotImplementedError

    def render_text(self, changelog: ChangeLog, options: RenderOptions) -> str:
        """Render to a single string (styles dropped)."""
        return "".join(f"{line.text}\n" for line in self.render(changelog, options))

    def write(
        self,
        changelog: ChangeLog,
        options: RenderOptions,
        stream: TextIO,
        color: bool = False
    ) -> None:
        """
        Write rendered lines to a text stream.

        Args:
            changelog: Aggregated changelog
            options: Presentation options
            stream: Writable text sink; write errors propagate
            color: Paint styled lines with ANSI colours
        """
        console = None
        if color:
            console = Console(
                file=stream,
                force_terminal=True,
                color_system="standard",
                no_color=False,
                highlight=False,
                markup=False,
                emoji=False,
                soft_wrap=True,
            )

        for line in self.render(changelog, options):
            if console is not None and line.style:
                console.print(Text(line.text, style=TERMINAL_STYLES.get(line.style, "")))
            else:
                stream.write(f"{line.text}\n")
