"""File-backed line log.

Reads a text file as lines, appends single lines, and replaces the whole
content through write-temp-then-rename.
"""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Iterable, Iterator
from pathlib import Path

from ..core.errors import DeserializeError, StorageIOError

logger = logging.getLogger(__name__)


class FileLineLog:
    """Line-oriented access to a single log file.

    Args:
        path: Path to the log file
        encoding: Text encoding of the file
        fsync: Whether to fsync after every write
        atomic_replace: Replace content via temp file + ``os.replace``

    Invariants:
        - Every line written is newline-terminated
        - An append never joins a previous unterminated line
        - With atomic_replace, readers see either the old or the new content
    """

    def __init__(self, path: str | Path, encoding: str = "utf-8", fsync: bool = True, atomic_replace: bool = True):
        self.path = str(path)
        self.encoding = encoding
        self.fsync = fsync
        self.atomic_replace = atomic_replace

    def ensure_exists(self) -> None:
        """Create the file and its parent directories if missing."""
        try:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "ab"):
                pass
        except OSError as e:
            raise StorageIOError(f"Cannot create log {self.path}: {e}", self.path) from e

    def iter_lines(self) -> Iterator[str]:
        """Yield lines in file order, without the trailing newline.

        Lines are decoded one at a time, so an undecodable line is reported
        with its line number.

        Raises:
            StorageIOError: If the file cannot be read
            DeserializeError: If a line is not valid text in ``encoding``
        """
        try:
            with open(self.path, "rb") as f:
                for line_number, raw in enumerate(f, start=1):
                    raw = raw.rstrip(b"\n")
                    try:
                        line = raw.decode(self.encoding)
                    except UnicodeDecodeError as e:
                        shown = raw.decode(self.encoding, errors="backslashreplace")
                        raise DeserializeError(f"Invalid {self.encoding} text: {e.reason}", self.path, line_number, shown) from e
                    yield line
        except OSError as e:
            raise StorageIOError(f"Cannot read log {self.path}: {e}", self.path) from e

    def append_line(self, line: str) -> None:
        """Append one line with a single write call."""
        try:
            with open(self.path, "a+b") as f:
                f.seek(0, os.SEEK_END)
                prefix = ""
                if f.tell() > 0:
                    f.seek(-1, os.SEEK_END)
                    if f.read(1) != b"\n":
                        prefix = "\n"
                f.write(f"{prefix}{line}\n".encode(self.encoding))
                f.flush()
                if self.fsync:
                    os.fsync(f.fileno())
        except OSError as e:
            raise StorageIOError(f"Cannot append to log {self.path}: {e}", self.path) from e
        logger.debug(f"Appended {len(line)} chars to {self.path}")

    def replace_lines(self, lines: Iterable[str]) -> None:
        """Replace the whole file content with ``lines``."""
        data = "".join(f"{line}\n" for line in lines).encode(self.encoding)
        try:
            if self.atomic_replace:
                self._replace_atomic(data)
            else:
                with open(self.path, "wb") as f:
                    f.write(data)
                    f.flush()
                    if self.fsync:
                        os.fsync(f.fileno())
        except OSError as e:
            raise StorageIOError(f"Cannot rewrite log {self.path}: {e}", self.path) from e
        logger.debug(f"Rewrote {self.path} ({len(data)} bytes)")

    def _replace_atomic(self, data: bytes) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        fd, temp_path = tempfile.mkstemp(dir=directory, prefix=f".{os.path.basename(self.path)}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                if self.fsync:
                    os.fsync(f.fileno())
            os.replace(temp_path, self.path)
        except BaseException:
            try:
                os.unlink(temp_path)
            except OSError as cleanup_error:
                logger.warning(f"Failed to remove temp file {temp_path}: {cleanup_error}")
            raise
