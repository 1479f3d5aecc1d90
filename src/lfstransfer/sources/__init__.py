"""Byte sources: local object content handed to the transfer step."""

from lfstransfer.sources._directory import ObjectDirectory
from lfstransfer.sources._file import FileSource
from lfstransfer.sources._memory import BytesSource
from lfstransfer.sources._source import ByteSource, SourceProvider

__all__ = [
    "ByteSource",
    "BytesSource",
    "FileSource",
    "ObjectDirectory",
    "SourceProvider",
]
