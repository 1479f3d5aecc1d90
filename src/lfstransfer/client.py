"""TransferClient: the three HTTP exchanges of an object upload.

``negotiate`` asks the object API where to send the bytes, ``transfer`` PUTs
the raw content to the server-issued upload link, and ``verify`` confirms the
stored object through the optional verify link. Each method returns a
ClassifiedError instead of raising when the exchange fails.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Final

import httpx

from lfstransfer.classify import ClassifiedError, ErrorClassifier
from lfstransfer.errors import SizeMismatchError, TransferCancelledError
from lfstransfer.serde import to_plain_data
from lfstransfer.types import MEDIA_TYPE, OCTET_STREAM, UPLOAD, ObjectResource

if TYPE_CHECKING:
    import threading
    from collections.abc import Iterator, Mapping
    from types import TracebackType
    from typing import BinaryIO

    from lfstransfer.config import TransferConfig
    from lfstransfer.sources import ByteSource
    from lfstransfer.types import Link

logger = logging.getLogger(__name__)

CHUNK_SIZE: Final = 64 * 1024
DEFAULT_USER_AGENT: Final = "lfstransfer"

# Called as progress(total, transferred) after each chunk is handed to the transport.
ProgressCallback = Callable[[int, int], None]


def _json_body(payload: Mapping[str, object]) -> bytes:
    """Encode a JSON request body."""
    return json.dumps(to_plain_data(payload), separators=(",", ":")).encode("utf-8")


def _link_headers(base: Mapping[str, str], link: Link) -> httpx.Headers:
    """Apply server-issued link headers over ``base``, replacing case-insensitively."""
    headers = httpx.Headers(dict(base))
    headers.update(link.header)
    return headers


def _iter_content(
    stream: BinaryIO,
    *,
    oid: str,
    size: int,
    progress: ProgressCallback | None,
    cancel: threading.Event | None,
) -> Iterator[bytes]:
    """Yield the stream in chunks, enforcing the declared size and honoring cancellation."""
    sent = 0
    while True:
        if cancel is not None and cancel.is_set():
            msg = f"Upload of {oid} cancelled after {sent} bytes."
            raise TransferCancelledError(msg)
        chunk = stream.read(CHUNK_SIZE)
        if not chunk:
            break
        sent += len(chunk)
        if sent > size:
            raise SizeMismatchError(oid, size, sent)
        yield chunk
        if progress is not None:
            progress(size, sent)
    if sent != size:
        raise SizeMismatchError(oid, size, sent)


class TransferClient:
    """Issue negotiate/transfer/verify requests against one object API.

    Pass an ``httpx.Client`` to control transport, timeouts or proxies; it is
    left open on close(). Without one, the client creates and owns its own.
    """

    def __init__(
        self,
        config: TransferConfig,
        *,
        http: httpx.Client | None = None,
        classifier: ErrorClassifier | None = None,
    ) -> None:
        """Initialize with configuration, an optional httpx client and classifier."""
        self._config = config
        self._owns_http = http is None
        self._http = http if http is not None else httpx.Client(timeout=config.timeout)
        self._classifier = classifier if classifier is not None else ErrorClassifier()

    @property
    def config(self) -> TransferConfig:
        """Return the transfer configuration."""
        return self._config

    @property
    def classifier(self) -> ErrorClassifier:
        """Return the error classifier."""
        return self._classifier

    @property
    def objects_url(self) -> str:
        """Return the negotiation endpoint."""
        return self._config.objects_url

    def close(self) -> None:
        """Close the underlying httpx client when this TransferClient owns it."""
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> TransferClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _api_headers(self) -> httpx.Headers:
        headers = httpx.Headers(dict(self._config.headers))
        headers["User-Agent"] = self._config.user_agent or DEFAULT_USER_AGENT
        headers["Accept"] = MEDIA_TYPE
        headers["Content-Type"] = MEDIA_TYPE
        return headers

    def negotiate(self, request: ObjectResource) -> ObjectResource | ClassifiedError:
        """POST ``{oid, size}`` to the objects endpoint and decode the returned links."""
        url = self.objects_url
        logger.debug("negotiate %s (%d bytes): POST %s", request.oid, request.size, url)
        try:
            response = self._http.post(url, content=_json_body(request.request_payload()), headers=self._api_headers())
        except httpx.RequestError as exc:
            return self._classifier.transport("negotiate", exc, url)
        except httpx.InvalidURL as exc:
            return self._classifier.invalid_request("negotiate", url, str(exc))

        if response.status_code != httpx.codes.OK:
            return self._classifier.http_status("negotiate", response.status_code, url)

        try:
            payload = response.json()
        except ValueError as exc:
            return self._classifier.decode("negotiate", url, str(exc))

        try:
            resource = ObjectResource.from_dict(payload, request=request)
        except (TypeError, ValueError) as exc:
            return self._classifier.decode("negotiate", url, str(exc))

        if resource.rel(UPLOAD) is None:
            return self._classifier.invalid_response("negotiate", url, f"no {UPLOAD!r} link for {request.oid}")
        return resource

    def transfer(
        self,
        link: Link,
        request: ObjectResource,
        source: ByteSource,
        *,
        progress: ProgressCallback | None = None,
        cancel: threading.Event | None = None,
    ) -> ClassifiedError | None:
        """PUT exactly ``request.size`` bytes from ``source`` to the upload link."""
        url = link.href
        try:
            actual = source.size
        except OSError as exc:
            return self._classifier.source("transfer", url, str(exc))
        if actual != request.size:
            return self._classifier.size_mismatch("transfer", url, expected=request.size, actual=actual)

        try:
            headers = _link_headers({"Content-Type": OCTET_STREAM, "Content-Length": str(request.size)}, link)
        except (TypeError, ValueError) as exc:
            return self._classifier.invalid_link("transfer", url, str(exc))

        try:
            stream = source.open()
        except OSError as exc:
            return self._classifier.source("transfer", url, str(exc))

        logger.debug("transfer %s (%d bytes): PUT %s", request.oid, request.size, url)
        with stream:
            content = _iter_content(stream, oid=request.oid, size=request.size, progress=progress, cancel=cancel)
            try:
                response = self._http.put(url, content=content, headers=headers)
            except TransferCancelledError:
                return self._classifier.cancelled("transfer", url)
            except SizeMismatchError as exc:
                return self._classifier.size_mismatch("transfer", url, expected=exc.expected, actual=exc.actual)
            except httpx.RequestError as exc:
                return self._classifier.transport("transfer", exc, url)
            except httpx.InvalidURL as exc:
                return self._classifier.invalid_link("transfer", url, str(exc))
            except OSError as exc:
                return self._classifier.source("transfer", url, str(exc))

        if not response.is_success:
            return self._classifier.http_status("transfer", response.status_code, url)
        return None

    def verify(self, link: Link, request: ObjectResource) -> ClassifiedError | None:
        """POST ``{oid, size}`` to the verify link."""
        url = link.href
        payload: dict[str, object] = dict(link.body)
        payload.update(request.request_payload())

        try:
            headers = _link_headers({"Content-Type": MEDIA_TYPE}, link)
        except (TypeError, ValueError) as exc:
            return self._classifier.invalid_link("verify", url, str(exc))

        logger.debug("verify %s: POST %s", request.oid, url)
        try:
            response = self._http.post(url, content=_json_body(payload), headers=headers)
        except httpx.RequestError as exc:
            return self._classifier.transport("verify", exc, url)
        except httpx.InvalidURL as exc:
            return self._classifier.invalid_link("verify", url, str(exc))

        if not response.is_success:
            return self._classifier.http_status("verify", response.status_code, url)
        return None
