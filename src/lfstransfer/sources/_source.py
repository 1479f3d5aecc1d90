"""ByteSource and SourceProvider: protocols for local object content."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from typing import BinaryIO


@runtime_checkable
class ByteSource(Protocol):
    """Readable object content of a known length.

    ``open()`` returns a fresh binary stream positioned at the start; the
    caller reads it sequentially and closes it.
    """

    @property
    def size(self) -> int:
        """Return the content length in bytes."""
        ...

    def open(self) -> BinaryIO:
        """Open a new binary stream over the content."""
        ...


@runtime_checkable
class SourceProvider(Protocol):
    """Resolve an oid to its local ByteSource."""

    def source_for(self, oid: str) -> ByteSource:
        """Return the ByteSource for ``oid``. Raise ObjectNotFoundError when absent."""
        ...
