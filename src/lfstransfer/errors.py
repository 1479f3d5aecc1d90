"""Typed errors for lfstransfer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lfstransfer.classify import ClassifiedError


class LfsTransferError(Exception):
    """Base exception for all lfstransfer errors."""


class ConfigurationError(LfsTransferError):
    """Raised when the transfer configuration is missing or invalid."""


class ObjectNotFoundError(LfsTransferError):
    """Raised when a SourceProvider has no local content for an oid."""

    def __init__(self, oid: str) -> None:
        """Initialize with the missing object's oid."""
        self.oid = oid
        super().__init__(f"Object not found: {oid}")


class SizeMismatchError(LfsTransferError):
    """Raised when a byte source disagrees with the negotiated object size."""

    def __init__(self, oid: str, expected: int, actual: int) -> None:
        """Initialize with the oid and mismatched byte counts."""
        self.oid = oid
        self.expected = expected
        self.actual = actual
        super().__init__(f"Size mismatch for {oid}: expected {expected} bytes, got {actual}")


class TransferCancelledError(LfsTransferError):
    """Raised inside a transfer when the caller's cancel event is set."""


class UploadError(LfsTransferError):
    """Raised by UploadResult.raise_for_error() for a failed upload."""

    def __init__(self, error: ClassifiedError) -> None:
        """Initialize with the classified failure."""
        self.error = error
        super().__init__(error.message)

    @property
    def fatal(self) -> bool:
        """Return whether the failure indicates a client-side defect."""
        return self.error.fatal
