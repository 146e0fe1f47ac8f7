"""Protocol definition for the line-oriented log resource."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Protocol


class LineLog(Protocol):
    """A named resource read as lines and written whole or by appending."""

    path: str

    def ensure_exists(self) -> None:
        """Create the resource if it does not exist yet."""
        ...

    def iter_lines(self) -> Iterator[str]:
        """Yield lines in file order, without line terminators.

        Raises DeserializeError for a line that is not valid text.
        """
        ...

    def append_line(self, line: str) -> None:
        """Durably append one line in a single write."""
        ...

    def replace_lines(self, lines: Iterable[str]) -> None:
        """Durably replace the whole content with ``lines``."""
        ...
