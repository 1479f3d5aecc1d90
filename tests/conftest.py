"""Shared fixtures: an in-process object API served through httpx.MockTransport."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator

import httpx
import pytest

from lfstransfer import MEDIA_TYPE, TransferClient, TransferConfig

BASE_URL = "https://lfs.test/media"
UPLOAD_URL = "https://storage.test/upload"
VERIFY_URL = "https://lfs.test/verify"

Handler = Callable[[httpx.Request], httpx.Response]


def links_body(*, verify: bool = True, upload_header: dict[str, str] | None = None) -> dict[str, object]:
    """Build a negotiation response carrying an upload link and optionally a verify link."""
    links: dict[str, object] = {
        "upload": {"href": UPLOAD_URL, "header": upload_header if upload_header is not None else {"A": "1"}},
    }
    if verify:
        links["verify"] = {"href": VERIFY_URL, "header": {"B": "2"}}
    return {"_links": links}


def negotiated(body: dict[str, object]) -> Handler:
    """Return a handler answering negotiation with ``body``."""

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body, headers={"Content-Type": MEDIA_TYPE})

    return _handler


def status(code: int) -> Handler:
    """Return a handler answering with a bare status code."""

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(code)

    return _handler


class FakeObjectAPI:
    """Route table plus a log of every request the client sent."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Handler] = {}

    def route(self, method: str, url: str, handler: Handler) -> None:
        self._routes[(method, url)] = handler

    def on_negotiate(self, handler: Handler) -> None:
        self.route("POST", f"{BASE_URL}/objects", handler)

    def on_upload(self, handler: Handler) -> None:
        self.route("PUT", UPLOAD_URL, handler)

    def on_verify(self, handler: Handler) -> None:
        self.route("POST", VERIFY_URL, handler)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url.copy_with(query=None))
        handler = self._routes.get((request.method, url))
        if handler is None:
            return httpx.Response(405)
        return handler(request)

    def calls(self) -> list[tuple[str, str]]:
        return [(request.method, str(request.url)) for request in self.requests]

    def request_to(self, method: str, url: str) -> httpx.Request:
        matches = [r for r in self.requests if r.method == method and str(r.url) == url]
        assert len(matches) == 1, f"expected one {method} {url}, got {len(matches)}"
        return matches[0]

    @staticmethod
    def json_of(request: httpx.Request) -> object:
        return json.loads(request.content)


@pytest.fixture
def api() -> FakeObjectAPI:
    return FakeObjectAPI()


@pytest.fixture
def client(api: FakeObjectAPI) -> Iterator[TransferClient]:
    http = httpx.Client(transport=httpx.MockTransport(api.handle))
    transfer_client = TransferClient(TransferConfig(url=BASE_URL), http=http)
    yield transfer_client
    http.close()
