"""TransferConfig: where the object API lives and what to send with it."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final

from lfstransfer.errors import ConfigurationError
from lfstransfer.serde import as_str_object_dict, optional_float, optional_string, string_mapping

DEFAULT_TIMEOUT: Final = 30.0

ENV_URL: Final = "LFS_URL"
ENV_AUTHORIZATION: Final = "LFS_AUTHORIZATION"
ENV_TIMEOUT: Final = "LFS_TIMEOUT"

_URL_KEYS = ("url", "lfs.url")


def endpoint_from_clone_url(clone_url: str) -> str:
    """Derive the object API base URL from a repository clone URL.

    ``https://host/org/repo`` -> ``https://host/org/repo.git/info/lfs``;
    a clone URL already ending in ``.git`` only gets ``/info/lfs``.
    """
    url = clone_url.rstrip("/")
    if not url:
        msg = "Clone URL must be a non-empty string."
        raise ConfigurationError(msg)
    if not url.endswith(".git"):
        url = f"{url}.git"
    return f"{url}/info/lfs"


@dataclass(frozen=True, slots=True)
class TransferConfig:
    """Configuration consumed by TransferClient.

    `headers` are static request headers (typically ``Authorization``) sent
    with negotiation requests only. Per-step headers for upload and verify
    come from the server's links.
    """

    url: str
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    timeout: float | None = DEFAULT_TIMEOUT
    user_agent: str | None = None

    def __post_init__(self) -> None:
        """Validate the base URL and freeze headers."""
        if not isinstance(self.url, str) or not self.url.strip():
            msg = "TransferConfig.url must be a non-empty string."
            raise ConfigurationError(msg)
        if not self.url.startswith(("http://", "https://")):
            msg = f"TransferConfig.url must be an http(s) URL; got {self.url!r}."
            raise ConfigurationError(msg)
        if self.timeout is not None and self.timeout <= 0:
            msg = "TransferConfig.timeout must be > 0 or None."
            raise ConfigurationError(msg)
        object.__setattr__(self, "url", self.url.rstrip("/"))
        object.__setattr__(self, "headers", MappingProxyType({str(k): str(v) for k, v in self.headers.items()}))

    @property
    def objects_url(self) -> str:
        """Return the negotiation endpoint."""
        return f"{self.url}/objects"

    def to_dict(self) -> dict[str, object]:
        """Serialize TransferConfig to a plain dictionary."""
        return {
            "url": self.url,
            "headers": dict(self.headers),
            "timeout": self.timeout,
            "user_agent": self.user_agent,
        }

    @classmethod
    def from_dict(cls, value: Mapping[str, object]) -> TransferConfig:
        """Deserialize TransferConfig from a plain dictionary.

        The base URL is read from ``url`` or, git-config style, ``lfs.url``.
        """
        data = as_str_object_dict(value, field_name="TransferConfig")
        url: object = None
        for key in _URL_KEYS:
            if data.get(key) is not None:
                url = data[key]
                break
        if not isinstance(url, str):
            msg = "TransferConfig requires a 'url' (or 'lfs.url') string."
            raise ConfigurationError(msg)

        headers = string_mapping(data.get("headers"), field_name="TransferConfig.headers")
        timeout = (
            optional_float(data["timeout"], field_name="TransferConfig.timeout") if "timeout" in data else DEFAULT_TIMEOUT
        )
        user_agent = optional_string(data.get("user_agent"), field_name="TransferConfig.user_agent")
        return cls(url=url, headers=headers, timeout=timeout, user_agent=user_agent)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TransferConfig:
        """Build TransferConfig from ``LFS_URL``, ``LFS_AUTHORIZATION`` and ``LFS_TIMEOUT``."""
        env = os.environ if environ is None else environ
        url = env.get(ENV_URL)
        if not url:
            msg = f"{ENV_URL} is not configured."
            raise ConfigurationError(msg)

        headers: dict[str, str] = {}
        authorization = env.get(ENV_AUTHORIZATION)
        if authorization:
            headers["Authorization"] = authorization

        timeout: float | None = DEFAULT_TIMEOUT
        raw_timeout = env.get(ENV_TIMEOUT)
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as exc:
                msg = f"{ENV_TIMEOUT} must be a number; got {raw_timeout!r}."
                raise ConfigurationError(msg) from exc
        return cls(url=url, headers=headers, timeout=timeout)

    @classmethod
    def from_clone_url(cls, clone_url: str, *, headers: Mapping[str, str] | None = None) -> TransferConfig:
        """Build TransferConfig for the object API of a repository clone URL."""
        return cls(url=endpoint_from_clone_url(clone_url), headers=headers or {})
