"""Terminal context passed explicitly to prompts and formatting."""

import shutil
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TextIO

MIN_PAGE_SIZE = 3


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, kw_only=True)
class TerminalContext:
    """Terminal properties and output stream used by the navigator.

    Nothing here reads ambient process state after construction, so tests can
    build one with fixed rows, a capture stream and a frozen clock.
    """

    rows: int = 24
    stdout: TextIO = field(default_factory=lambda: sys.stdout)
    clock: Callable[[], datetime] = utc_now

    @classmethod
    def from_environment(cls) -> "TerminalContext":
        """Build a context from the current terminal size and stdout."""
        return cls(rows=shutil.get_terminal_size().lines, stdout=sys.stdout)

    @property
    def page_size(self) -> int:
        """Number of choices shown at once, leaving room for the prompt lines."""
        return max(self.rows - 2, MIN_PAGE_SIZE)

    def now(self) -> datetime:
        return self.clock()

    def echo(self, text: str) -> None:
        print(text, file=self.stdout, flush=True)
