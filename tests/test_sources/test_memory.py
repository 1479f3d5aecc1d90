"""Tests for BytesSource."""

from lfstransfer.sources import ByteSource, BytesSource


def test_size_and_content() -> None:
    source = BytesSource(b"test")
    assert source.size == 4
    with source.open() as stream:
        assert stream.read() == b"test"


def test_open_returns_fresh_stream() -> None:
    source = BytesSource(b"abc")
    with source.open() as first:
        first.read()
    with source.open() as second:
        assert second.read() == b"abc"


def test_empty_source() -> None:
    source = BytesSource(b"")
    assert source.size == 0
    with source.open() as stream:
        assert stream.read() == b""


def test_copies_mutable_input() -> None:
    data = bytearray(b"abc")
    source = BytesSource(data)  # type: ignore[arg-type]
    data[0] = ord("z")
    with source.open() as stream:
        assert stream.read() == b"abc"


def test_satisfies_protocol() -> None:
    assert isinstance(BytesSource(b""), ByteSource)
