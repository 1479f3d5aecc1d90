"""lfstransfer: client-side upload engine for Git LFS style object stores."""

import importlib.metadata as importlib_metadata

from lfstransfer.classify import DEFAULT_ERROR_TABLE, ClassifiedError, ErrorClassifier, ErrorTable
from lfstransfer.client import ProgressCallback, TransferClient
from lfstransfer.config import TransferConfig, endpoint_from_clone_url
from lfstransfer.errors import (
    ConfigurationError,
    LfsTransferError,
    ObjectNotFoundError,
    SizeMismatchError,
    TransferCancelledError,
    UploadError,
)
from lfstransfer.sources import ByteSource, BytesSource, FileSource, ObjectDirectory, SourceProvider
from lfstransfer.types import MEDIA_TYPE, Link, ObjectResource
from lfstransfer.upload import UploadResult, upload, upload_file, upload_object


def _detect_version() -> str:
    """Return installed package version or a local fallback when metadata is unavailable."""
    try:
        return importlib_metadata.version("lfstransfer")
    except importlib_metadata.PackageNotFoundError:
        return "0.0.0+unknown"


__version__ = _detect_version()

__all__ = [
    "DEFAULT_ERROR_TABLE",
    "MEDIA_TYPE",
    "ByteSource",
    "BytesSource",
    "ClassifiedError",
    "ConfigurationError",
    "ErrorClassifier",
    "ErrorTable",
    "FileSource",
    "LfsTransferError",
    "Link",
    "ObjectDirectory",
    "ObjectNotFoundError",
    "ObjectResource",
    "ProgressCallback",
    "SizeMismatchError",
    "SourceProvider",
    "TransferCancelledError",
    "TransferClient",
    "TransferConfig",
    "UploadError",
    "UploadResult",
    "endpoint_from_clone_url",
    "upload",
    "upload_file",
    "upload_object",
]
