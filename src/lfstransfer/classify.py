"""Error Classifier: map transfer outcomes to typed, user-facing errors.

Every failed step becomes one ``ClassifiedError`` value. Messages come from an
``ErrorTable`` owned by the classifier; ``DEFAULT_ERROR_TABLE`` is built once
at import time and shared by reference.

``fatal`` is reserved for violations of this client's own contract (a byte
source that disagrees with the negotiated size, an argument that can never
form a valid request). HTTP statuses, network failures and malformed server
payloads are operational failures and are never fatal.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, Literal

import httpx

logger = logging.getLogger(__name__)

Step = Literal["negotiate", "transfer", "verify"]
ErrorKind = Literal[
    "http",
    "timeout",
    "network",
    "protocol",
    "decode",
    "invalid_response",
    "invalid_link",
    "source",
    "cancelled",
    "size_mismatch",
    "invalid_request",
]

_FATAL_KINDS: Final = frozenset({"size_mismatch", "invalid_request"})
_CONVERSION: Final = re.compile(r"%(.?)", re.DOTALL)


def _conversions(template: str) -> list[str]:
    """Return the conversion characters of a %-template, ignoring escaped ``%%``."""
    return _CONVERSION.findall(template.replace("%%", ""))


def _freeze_templates(templates: Mapping[object, str], *, field_name: str) -> Mapping[object, str]:
    """Validate that each template's only conversion is one ``%s`` for the URL, then freeze."""
    frozen: dict[object, str] = {}
    for key, template in templates.items():
        if not isinstance(template, str):
            msg = f"{field_name}[{key!r}] must be a string."
            raise TypeError(msg)
        if _conversions(template) != ["s"]:
            msg = f"{field_name}[{key!r}] must contain exactly one %s placeholder (the URL) and nothing else."
            raise ValueError(msg)
        frozen[key] = template
    return MappingProxyType(frozen)


@dataclass(frozen=True, slots=True)
class ErrorTable:
    """Message templates keyed by HTTP status and by local failure kind.

    - `templates`: HTTP status -> template with one ``%s`` for the URL
    - `fallback`: template for unknown statuses, ``%d`` (status) then ``%s`` (URL)
    - `local`: failure kind -> template with one ``%s`` for the URL
    """

    templates: Mapping[int, str]
    fallback: str
    local: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        """Validate placeholders and freeze the template mappings."""
        for status in self.templates:
            if not isinstance(status, int) or isinstance(status, bool):
                msg = f"ErrorTable.templates keys must be int status codes; got {status!r}."
                raise TypeError(msg)
        if not isinstance(self.fallback, str) or _conversions(self.fallback) != ["d", "s"]:
            msg = "ErrorTable.fallback must contain one %d (status) followed by one %s (URL) placeholder."
            raise ValueError(msg)
        object.__setattr__(self, "templates", _freeze_templates(self.templates, field_name="ErrorTable.templates"))
        object.__setattr__(self, "local", _freeze_templates(self.local, field_name="ErrorTable.local"))

    def format_status(self, status: int, url: str) -> str:
        """Render the message for an HTTP status."""
        template = self.templates.get(status)
        if template is None:
            return self.fallback % (status, url)
        return template % url

    def format_local(self, kind: str, url: str) -> str:
        """Render the message for a local failure kind."""
        template = self.local.get(kind)
        if template is None:
            return f"Transfer failed ({kind}): {url}"
        return template % url


DEFAULT_ERROR_TABLE: Final = ErrorTable(
    templates={
        400: "Client error: %s",
        401: "Authorization error: %s\nCheck that you have proper access to the repository",
        403: "Authorization error: %s\nCheck that you have proper access to the repository",
        404: "Repository or object not found: %s\nCheck that it exists and that you have proper access to it",
        422: "Object rejected by server: %s\nThe server could not process the object metadata",
        429: "Rate limit exceeded: %s\nWait before retrying the transfer",
        500: "Server error: %s",
        503: "Service unavailable: %s\nThe server is temporarily unable to handle the request",
    },
    fallback="Server error %d: %s",
    local={
        "timeout": "Request timed out: %s",
        "network": "Network error while connecting to %s",
        "protocol": "HTTP protocol error from %s",
        "decode": "Invalid response body from %s",
        "invalid_response": "Invalid object resource from %s\nThe response is missing an upload link",
        "invalid_link": "Invalid link issued by server: %s\nThe link URL or its headers cannot be sent",
        "source": "Unable to read local object content for %s",
        "cancelled": "Transfer cancelled: %s",
        "size_mismatch": "Object size does not match the negotiated size for %s",
        "invalid_request": "Unable to build transfer request for %s",
    },
)


@dataclass(frozen=True, slots=True)
class ClassifiedError:
    """A typed failure from one transfer step."""

    status: int
    message: str
    fatal: bool
    step: Step
    url: str
    kind: ErrorKind = "http"
    detail: str | None = None

    def __str__(self) -> str:
        """Return the user-facing message."""
        return self.message


class ErrorClassifier:
    """Build ClassifiedError values from transfer outcomes using one ErrorTable."""

    def __init__(self, table: ErrorTable = DEFAULT_ERROR_TABLE) -> None:
        """Initialize with the message table to render errors from."""
        self._table = table

    @property
    def table(self) -> ErrorTable:
        """Return the message table."""
        return self._table

    def _local(self, kind: ErrorKind, step: Step, url: str, detail: str | None) -> ClassifiedError:
        error = ClassifiedError(
            status=0,
            message=self._table.format_local(kind, url),
            fatal=kind in _FATAL_KINDS,
            step=step,
            url=url,
            kind=kind,
            detail=detail,
        )
        logger.warning("%s step failed (%s): %s", step, kind, url)
        return error

    def http_status(self, step: Step, status: int, url: str) -> ClassifiedError:
        """Classify a non-success HTTP status."""
        logger.warning("%s step failed with HTTP %d: %s", step, status, url)
        return ClassifiedError(
            status=status,
            message=self._table.format_status(status, url),
            fatal=False,
            step=step,
            url=url,
            kind="http",
        )

    def transport(self, step: Step, exc: httpx.RequestError, url: str) -> ClassifiedError:
        """Classify a request failure raised by httpx."""
        kind: ErrorKind
        if isinstance(exc, httpx.DecodingError):
            kind = "decode"
        elif isinstance(exc, httpx.TimeoutException):
            kind = "timeout"
        elif isinstance(exc, httpx.ProtocolError):
            kind = "protocol"
        else:
            kind = "network"
        return self._local(kind, step, url, str(exc) or type(exc).__name__)

    def decode(self, step: Step, url: str, detail: str | None = None) -> ClassifiedError:
        """Classify a response body that could not be decoded."""
        return self._local("decode", step, url, detail)

    def invalid_response(self, step: Step, url: str, detail: str | None = None) -> ClassifiedError:
        """Classify a decodable response that violates the object resource contract."""
        return self._local("invalid_response", step, url, detail)

    def invalid_link(self, step: Step, url: str, detail: str | None = None) -> ClassifiedError:
        """Classify a server-issued link whose URL or headers cannot form a request."""
        return self._local("invalid_link", step, url, detail)

    def source(self, step: Step, url: str, detail: str | None = None) -> ClassifiedError:
        """Classify a failure to open or read the local byte source."""
        return self._local("source", step, url, detail)

    def cancelled(self, step: Step, url: str) -> ClassifiedError:
        """Classify a caller-requested cancellation."""
        return self._local("cancelled", step, url, None)

    def size_mismatch(self, step: Step, url: str, *, expected: int, actual: int) -> ClassifiedError:
        """Classify a byte source whose length contradicts the negotiated size."""
        return self._local("size_mismatch", step, url, f"expected {expected} bytes, got {actual}")

    def invalid_request(self, step: Step, url: str, detail: str | None = None) -> ClassifiedError:
        """Classify arguments that cannot form a valid request."""
        return self._local("invalid_request", step, url, detail)
