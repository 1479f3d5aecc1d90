"""BytesSource: in-memory content for development and testing."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import BinaryIO


class BytesSource:
    """Byte source over an in-memory ``bytes`` value."""

    def __init__(self, data: bytes) -> None:
        """Initialize with the object content."""
        self._data = bytes(data)

    @property
    def size(self) -> int:
        """Return the content length in bytes."""
        return len(self._data)

    def open(self) -> BinaryIO:
        """Open a new stream over the content."""
        return io.BytesIO(self._data)
