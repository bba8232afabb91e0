"""
Terminal pager for changeloggen output.

A text sink that shows one screenful at a time, like ``more``.
It is an explicit three-state machine:

- STREAMING: lines pass through until the page fills
- AWAITING_INPUT: the next line blocks on one key press
- DONE: the user quit (or the pager was closed); writes are dropped

Keys at the prompt: ``q`` quits, space shows the next page, enter shows
one more line. The line that triggered the prompt is held back and shown
after the key press, so nothing is lost across a page boundary.
"""

import io
from enum import Enum
from typing import Callable, Optional, TextIO

import click


class PagerState(Enum):
    """Pager states."""
    STREAMING = "streaming"
    AWAITING_INPUT = "awaiting_input"
    DONE = "done"


QUIT_KEYS = ('q', 'Q')
NEXT_PAGE_KEYS = (' ',)
NEXT_LINE_KEYS = ('\r', '\n')


class Pager(io.TextIOBase):
    """
    Paginating text stream.

    Example:
        pager = Pager(height=24, total=120)
        renderer.write(changelog, options, pager)
        pager.close()
    """

    def __init__(
        self,
        height: int,
        total: int = 0,
        getchar: Callable[[], str] = click.getchar,
        out: Optional[TextIO] = None
    ):
        """
        Initialize Pager.

        Args:
            height: Terminal height in lines; one line is kept for the prompt
            total: Expected number of lines, used for the percentage shown
            getchar: Blocking single-key reader
            out: Destination stream (defaults to stdout)
        """
        super().__init__()
        self.page_size = max(height - 1, 1)
        self.total = total
        self.getchar = getchar
        self.out = out if out is not None else click.get_text_stream('stdout')
        self.state = PagerState.STREAMING
        self.shown = 0
        self._window = 0
        self._partial = ""

    def writable(self) -> bool:
        return True

    def write(self, text: str) -> int:
        if self.state is PagerState.DONE:
            return len(text)

        data = self._partial + text
        *lines, self._partial = data.split("\n")
        for line in lines:
            self._emit(line)
            if self.state is PagerState.DONE:
                self._partial = ""
                break
        return len(text)

    def flush(self) -> None:
        if not self.out.closed:
            self.out.flush()

    def close(self) -> None:
        """Emit any unterminated trailing text and stop paging."""
        if self._partial and self.state is not PagerState.DONE:
            self._emit(self._partial)
        self._partial = ""
        self.state = PagerState.DONE
        super().close()

    def _emit(self, line: str) -> None:
        if self.state is PagerState.AWAITING_INPUT:
            self._prompt()
            if self.state is PagerState.DONE:
                return

        self.out.write(line + "\n")
        self.shown += 1
        self._window += 1

        if self._window >= self.page_size:
            self.state = PagerState.AWAITING_INPUT

    def _prompt(self) -> None:
        """Block for one key and move to the next state."""
        if self.total:
            percent = round(self.shown / self.total * 100)
            prompt = f"-- More ({percent}%) -- "
        else:
            prompt = "-- More -- "

        self.out.write(prompt)
        self.out.flush()

        while True:
            key = self.getchar()
            if key in QUIT_KEYS:
                self.state = PagerState.DONE
                break
            if key in NEXT_PAGE_KEYS:
                self._window = 0
                self.state = PagerState.STREAMING
                break
            if key in NEXT_LINE_KEYS:
                self._window = self.page_size - 1
                self.state = PagerState.STREAMING
                break

        # Erase the prompt
        self.out.write("\r" + " " * len(prompt) + "\r")
        if self.state is PagerState.DONE:
            self.out.flush()
