"""Core data types: Link and ObjectResource."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from lfstransfer.serde import as_str_object_dict, require_int, require_string, string_mapping, to_plain_data

MEDIA_TYPE: Final = "application/vnd.git-lfs+json"
OCTET_STREAM: Final = "application/octet-stream"

UPLOAD: Final = "upload"
VERIFY: Final = "verify"

# Servers in the wild emit either key; "_links" is what we write.
_LINKS_KEYS = ("_links", "links")


def _freeze_str_mapping(value: Mapping[str, str]) -> Mapping[str, str]:
    """Freeze a string mapping into a read-only mappingproxy."""
    return MappingProxyType({str(key): str(item) for key, item in value.items()})


def _freeze_value(value: object) -> object:
    """Freeze nested JSON containers."""
    if isinstance(value, Mapping):
        return MappingProxyType({str(key): _freeze_value(item) for key, item in value.items()})
    if isinstance(value, (tuple, list)):
        return tuple(_freeze_value(item) for item in value)
    return value


@dataclass(frozen=True, slots=True)
class Link:
    """A server-issued transfer step: target URL plus per-step request additions."""

    href: str
    header: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    # extra JSON fields for a follow-up body (verify)
    body: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        """Validate href and freeze header/body mappings."""
        if not isinstance(self.href, str) or not self.href:
            msg = "Link.href must be a non-empty string."
            raise ValueError(msg)
        object.__setattr__(self, "header", _freeze_str_mapping(self.header))
        object.__setattr__(self, "body", _freeze_value(self.body))

    def to_dict(self) -> dict[str, object]:
        """Serialize Link to its wire dictionary."""
        payload: dict[str, object] = {"href": self.href}
        if self.header:
            payload["header"] = dict(self.header)
        if self.body:
            payload["body"] = to_plain_data(self.body)
        return payload

    @classmethod
    def from_dict(cls, value: object, *, field_name: str = "Link") -> Link:
        """Deserialize Link from its wire dictionary."""
        data = as_str_object_dict(value, field_name=field_name)
        href = require_string(data.get("href"), field_name=f"{field_name}.href")
        header = string_mapping(data.get("header"), field_name=f"{field_name}.header")
        body_raw = data.get("body")
        body = {} if body_raw is None else as_str_object_dict(body_raw, field_name=f"{field_name}.body")
        return cls(href=href, header=header, body=body)


@dataclass(frozen=True, slots=True)
class ObjectResource:
    """Negotiation payload: oid, size and the link relations issued by the server.

    A request payload carries only ``oid`` and ``size``. A negotiation response
    adds ``links`` keyed by relation name (``"upload"``, ``"verify"``, ...).
    Unknown relations are kept as-is.
    """

    oid: str
    size: int
    links: Mapping[str, Link] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        """Validate oid/size and freeze the relation mapping."""
        if not isinstance(self.oid, str) or not self.oid:
            msg = "ObjectResource.oid must be a non-empty string."
            raise ValueError(msg)
        if not isinstance(self.size, int) or isinstance(self.size, bool):
            msg = "ObjectResource.size must be an int."
            raise TypeError(msg)
        if self.size < 0:
            msg = f"ObjectResource.size must be >= 0, got {self.size}."
            raise ValueError(msg)
        for rel, link in self.links.items():
            if not isinstance(link, Link):
                msg = f"ObjectResource.links[{rel!r}] must be a Link; got {type(link).__name__}."
                raise TypeError(msg)
        object.__setattr__(self, "links", MappingProxyType({str(rel): link for rel, link in self.links.items()}))

    def rel(self, name: str) -> Link | None:
        """Return the link for a relation name, or None when the server did not issue it."""
        return self.links.get(name)

    def request_payload(self) -> dict[str, object]:
        """Return the ``{oid, size}`` body sent for negotiation and verification."""
        return {"oid": self.oid, "size": self.size}

    def to_dict(self) -> dict[str, object]:
        """Serialize ObjectResource to its wire dictionary."""
        payload = self.request_payload()
        if self.links:
            payload["_links"] = {rel: link.to_dict() for rel, link in self.links.items()}
        return payload

    @classmethod
    def from_dict(cls, value: object, *, request: ObjectResource | None = None) -> ObjectResource:
        """Deserialize ObjectResource from its wire dictionary.

        When decoding a negotiation response, pass the original ``request``:
        servers may omit ``oid``/``size`` and only send links, in which case
        the requested values are carried over.
        """
        data = as_str_object_dict(value, field_name="ObjectResource")
        oid_raw = data.get("oid")
        size_raw = data.get("size")
        if request is not None:
            if oid_raw in (None, ""):
                oid_raw = request.oid
            if size_raw is None:
                size_raw = request.size
        oid = require_string(oid_raw, field_name="ObjectResource.oid")
        size = require_int(size_raw, field_name="ObjectResource.size")

        links_raw: object = None
        for key in _LINKS_KEYS:
            if data.get(key) is not None:
                links_raw = data[key]
                break

        links: dict[str, Link] = {}
        if links_raw is not None:
            for rel, item in as_str_object_dict(links_raw, field_name="ObjectResource.links").items():
                links[rel] = Link.from_dict(item, field_name=f"ObjectResource.links[{rel!r}]")
        return cls(oid=oid, size=size, links=links)
