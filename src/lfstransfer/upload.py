"""Upload orchestration: negotiate -> transfer -> verify for one object."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from lfstransfer.classify import ClassifiedError
from lfstransfer.errors import ObjectNotFoundError, UploadError
from lfstransfer.sources import FileSource
from lfstransfer.types import UPLOAD, VERIFY, ObjectResource

if TYPE_CHECKING:
    import threading
    from collections.abc import Callable

    from lfstransfer.client import ProgressCallback, TransferClient
    from lfstransfer.sources import ByteSource, SourceProvider
    from lfstransfer.types import Link

logger = logging.getLogger(__name__)

Stage = Literal["negotiate", "transfer", "verify", "done"]


@dataclass(frozen=True, slots=True)
class UploadResult:
    """Outcome of one upload.

    `stored` is True once the transfer step succeeded, so a verification
    failure reports ``ok=False, stored=True``.
    """

    ok: bool
    error: ClassifiedError | None = None
    resource: ObjectResource | None = None
    stored: bool = False
    verified: bool = False

    def raise_for_error(self) -> None:
        """Raise UploadError when the upload failed."""
        if self.error is not None:
            raise UploadError(self.error)


class _UploadRun:
    """One pass through the upload state machine.

    Each stage handler returns the next stage or the ClassifiedError that ends
    the run. No stage runs after a failure.
    """

    # assigned by negotiate; TransferClient.negotiate rejects resources without an upload link
    _upload_link: Link

    def __init__(
        self,
        client: TransferClient,
        request: ObjectResource,
        source: ByteSource,
        *,
        progress: ProgressCallback | None,
        cancel: threading.Event | None,
    ) -> None:
        self._client = client
        self._request = request
        self._source = source
        self._progress = progress
        self._cancel = cancel
        self.resource: ObjectResource | None = None
        self.stored = False
        self.verified = False
        self._verify_link: Link | None = None

    def _cancelled(self) -> bool:
        return self._cancel is not None and self._cancel.is_set()

    def negotiate(self) -> Stage | ClassifiedError:
        if self._cancelled():
            return self._client.classifier.cancelled("negotiate", self._client.objects_url)
        outcome = self._client.negotiate(self._request)
        if isinstance(outcome, ClassifiedError):
            return outcome
        self.resource = outcome
        self._upload_link = outcome.links[UPLOAD]
        self._verify_link = outcome.rel(VERIFY)
        return "transfer"

    def transfer(self) -> Stage | ClassifiedError:
        link = self._upload_link
        if self._cancelled():
            return self._client.classifier.cancelled("transfer", link.href)
        error = self._client.transfer(link, self._request, self._source, progress=self._progress, cancel=self._cancel)
        if error is not None:
            return error
        self.stored = True
        return "verify"

    def verify(self) -> Stage | ClassifiedError:
        link = self._verify_link
        if link is None:
            return "done"
        if self._cancelled():
            return self._client.classifier.cancelled("verify", link.href)
        error = self._client.verify(link, self._request)
        if error is not None:
            return error
        self.verified = True
        return "done"

    def run(self) -> UploadResult:
        handlers: dict[Stage, Callable[[], Stage | ClassifiedError]] = {
            "negotiate": self.negotiate,
            "transfer": self.transfer,
            "verify": self.verify,
        }
        stage: Stage = "negotiate"
        while stage != "done":
            outcome = handlers[stage]()
            if isinstance(outcome, ClassifiedError):
                return UploadResult(
                    ok=False,
                    error=outcome,
                    resource=self.resource,
                    stored=self.stored,
                    verified=False,
                )
            stage = outcome
        return UploadResult(ok=True, resource=self.resource, stored=True, verified=self.verified)


def upload(
    client: TransferClient,
    source: ByteSource,
    oid: str,
    size: int,
    *,
    progress: ProgressCallback | None = None,
    cancel: threading.Event | None = None,
) -> UploadResult:
    """Upload one object: negotiate, transfer its bytes, then verify if the server asks for it.

    The first failing step ends the upload and its ClassifiedError is
    returned in the result. Nothing is retried.
    """
    try:
        request = ObjectResource(oid=oid, size=size)
    except (TypeError, ValueError) as exc:
        error = client.classifier.invalid_request("negotiate", client.objects_url, str(exc))
        return UploadResult(ok=False, error=error)

    result = _UploadRun(client, request, source, progress=progress, cancel=cancel).run()
    if result.ok:
        logger.info("uploaded %s (%d bytes, verified=%s)", oid, size, result.verified)
    return result


def upload_file(
    client: TransferClient,
    path: str | Path,
    oid: str | None = None,
    *,
    progress: ProgressCallback | None = None,
    cancel: threading.Event | None = None,
) -> UploadResult:
    """Upload a file on disk.

    Local object files are named by their oid, so ``oid`` defaults to the
    file's base name.
    """
    path = Path(path)
    source = FileSource(path)
    try:
        size = source.size
    except OSError as exc:
        error = client.classifier.source("negotiate", str(path), str(exc))
        return UploadResult(ok=False, error=error)
    return upload(client, source, oid or path.name, size, progress=progress, cancel=cancel)


def upload_object(
    client: TransferClient,
    provider: SourceProvider,
    oid: str,
    *,
    progress: ProgressCallback | None = None,
    cancel: threading.Event | None = None,
) -> UploadResult:
    """Upload the local content a SourceProvider holds for ``oid``."""
    try:
        source = provider.source_for(oid)
        size = source.size
    except (ObjectNotFoundError, OSError) as exc:
        error = client.classifier.source("negotiate", oid, str(exc))
        return UploadResult(ok=False, error=error)
    return upload(client, source, oid, size, progress=progress, cancel=cancel)
