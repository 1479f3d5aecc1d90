"""Upload one object against an in-process object API, then show each failure class."""

import hashlib
import json

import httpx

from lfstransfer import MEDIA_TYPE, BytesSource, TransferClient, TransferConfig, upload

BASE_URL = "https://lfs.example/org/repo.git/info/lfs"

# ---- A tiny object API ----
# Negotiation hands out an upload link and a verify link, each with its own headers.

stored: dict[str, bytes] = {}
fail_verify = False


def handler(request: httpx.Request) -> httpx.Response:
    url = str(request.url)
    if url == f"{BASE_URL}/objects":
        obj = json.loads(request.content)
        links = {
            "upload": {"href": f"https://storage.example/{obj['oid']}", "header": {"X-Signature": "sig"}},
            "verify": {"href": f"{BASE_URL}/verify", "header": {"X-Verify": "1"}},
        }
        return httpx.Response(200, json={"_links": links}, headers={"Content-Type": MEDIA_TYPE})
    if url.startswith("https://storage.example/"):
        stored[url.rsplit("/", 1)[1]] = request.content
        return httpx.Response(200)
    if url == f"{BASE_URL}/verify":
        return httpx.Response(404 if fail_verify else 200)
    return httpx.Response(404)


http = httpx.Client(transport=httpx.MockTransport(handler))
client = TransferClient(TransferConfig(url=BASE_URL), http=http)

content = b"hello large file"
oid = hashlib.sha256(content).hexdigest()

# ---- Happy path ----

result = upload(client, BytesSource(content), oid, len(content), progress=lambda total, sent: print(f"  {sent}/{total}"))
print(f"ok={result.ok}, stored={result.stored}, verified={result.verified}")
print(f"  server has {len(stored[oid])} bytes for {oid[:12]}...")

# ---- Verify failure: bytes are stored, verification is not ----

fail_verify = True
result = upload(client, BytesSource(content), oid, len(content))
print(f"\nok={result.ok}, stored={result.stored}")
if result.error is not None:
    print(f"  step={result.error.step}, status={result.error.status}, fatal={result.error.fatal}")
    print(f"  {result.error.message}")

# ---- Local contract violation: declared size disagrees with the content ----

result = upload(client, BytesSource(content), oid, len(content) + 1)
if result.error is not None:
    print(f"\nok={result.ok}, kind={result.error.kind}, fatal={result.error.fatal}")

http.close()
