"""FileSource: object content read from a file on disk."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import BinaryIO


class FileSource:
    """Byte source over a file path.

    The size is taken from ``stat`` when requested, so a file that changes
    between negotiation and transfer is caught by the transfer size check.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize with the file path."""
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Return the file path."""
        return self._path

    @property
    def size(self) -> int:
        """Return the current file size in bytes."""
        return self._path.stat().st_size

    def open(self) -> BinaryIO:
        """Open the file for binary reading."""
        return self._path.open("rb")
