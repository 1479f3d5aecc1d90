"""Tests for TransferConfig."""

import pytest

from lfstransfer.config import DEFAULT_TIMEOUT, TransferConfig, endpoint_from_clone_url
from lfstransfer.errors import ConfigurationError


def test_objects_url_strips_trailing_slash() -> None:
    config = TransferConfig(url="https://lfs.test/media/")
    assert config.url == "https://lfs.test/media"
    assert config.objects_url == "https://lfs.test/media/objects"


@pytest.mark.parametrize(
    "url",
    [
        pytest.param("", id="empty"),
        pytest.param("   ", id="blank"),
        pytest.param("ssh://git@host/repo", id="ssh"),
        pytest.param("lfs.test/media", id="no-scheme"),
    ],
)
def test_rejects_invalid_url(url: str) -> None:
    with pytest.raises(ConfigurationError):
        TransferConfig(url=url)


def test_rejects_non_positive_timeout() -> None:
    with pytest.raises(ConfigurationError, match="timeout"):
        TransferConfig(url="https://lfs.test", timeout=0)


def test_headers_are_frozen() -> None:
    headers = {"Authorization": "Basic abc"}
    config = TransferConfig(url="https://lfs.test", headers=headers)
    headers["Authorization"] = "changed"
    assert config.headers["Authorization"] == "Basic abc"
    with pytest.raises(TypeError):
        config.headers["X"] = "y"  # type: ignore[index]


def test_to_dict_from_dict_roundtrip() -> None:
    config = TransferConfig(url="https://lfs.test", headers={"Authorization": "t"}, timeout=5.0, user_agent="ua")
    assert TransferConfig.from_dict(config.to_dict()) == config


def test_from_dict_accepts_git_config_key() -> None:
    config = TransferConfig.from_dict({"lfs.url": "https://lfs.test/media"})
    assert config.url == "https://lfs.test/media"
    assert config.timeout == DEFAULT_TIMEOUT


def test_from_dict_allows_no_timeout() -> None:
    assert TransferConfig.from_dict({"url": "https://lfs.test", "timeout": None}).timeout is None


def test_from_dict_requires_url() -> None:
    with pytest.raises(ConfigurationError, match="url"):
        TransferConfig.from_dict({"headers": {}})


def test_from_dict_rejects_non_string_headers() -> None:
    with pytest.raises(TypeError, match="headers"):
        TransferConfig.from_dict({"url": "https://lfs.test", "headers": {"X": 1}})


def test_from_env() -> None:
    config = TransferConfig.from_env(
        {"LFS_URL": "https://lfs.test/media", "LFS_AUTHORIZATION": "Bearer t", "LFS_TIMEOUT": "12.5"}
    )
    assert config.url == "https://lfs.test/media"
    assert dict(config.headers) == {"Authorization": "Bearer t"}
    assert config.timeout == 12.5


def test_from_env_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LFS_URL", "https://lfs.test/env")
    monkeypatch.delenv("LFS_AUTHORIZATION", raising=False)
    monkeypatch.delenv("LFS_TIMEOUT", raising=False)
    config = TransferConfig.from_env()
    assert config.url == "https://lfs.test/env"
    assert dict(config.headers) == {}


def test_from_env_requires_url() -> None:
    with pytest.raises(ConfigurationError, match="LFS_URL"):
        TransferConfig.from_env({})


def test_from_env_rejects_bad_timeout() -> None:
    with pytest.raises(ConfigurationError, match="LFS_TIMEOUT"):
        TransferConfig.from_env({"LFS_URL": "https://lfs.test", "LFS_TIMEOUT": "soon"})


@pytest.mark.parametrize(
    ("clone_url", "expected"),
    [
        pytest.param("https://git.test/org/repo", "https://git.test/org/repo.git/info/lfs", id="bare"),
        pytest.param("https://git.test/org/repo.git", "https://git.test/org/repo.git/info/lfs", id="dot-git"),
        pytest.param("https://git.test/org/repo/", "https://git.test/org/repo.git/info/lfs", id="trailing-slash"),
    ],
)
def test_endpoint_from_clone_url(clone_url: str, expected: str) -> None:
    assert endpoint_from_clone_url(clone_url) == expected


def test_endpoint_from_empty_clone_url() -> None:
    with pytest.raises(ConfigurationError):
        endpoint_from_clone_url("/")


def test_from_clone_url() -> None:
    config = TransferConfig.from_clone_url("https://git.test/org/repo", headers={"Authorization": "t"})
    assert config.objects_url == "https://git.test/org/repo.git/info/lfs/objects"
    assert config.headers["Authorization"] == "t"
