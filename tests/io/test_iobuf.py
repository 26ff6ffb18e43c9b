import io
from pathlib import Path

import pytest

from vwlabel.io import IOBuf


class TrickleStream(io.RawIOBase):
    """Returns at most two bytes per read call."""

    def __init__(self, data: bytes) -> None:
        self._data = data

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        chunk = self._data[:2]
        self._data = self._data[2:]
        buffer[: len(chunk)] = chunk
        return len(chunk)


def test_read_collects_partial_chunks() -> None:
    buf = IOBuf(TrickleStream(b"abcdefg"))

    assert buf.read(5) == b"abcde"
    assert buf.read(5) == b"fg"
    assert buf.read(5) == b""
    assert buf.bytes_read == 7


def test_peek_eof_does_not_consume() -> None:
    buf = IOBuf.from_bytes(b"x")

    assert not buf.peek_eof()
    assert buf.read(1) == b"x"
    assert buf.peek_eof()


def test_write_counts_bytes() -> None:
    buf = IOBuf()
    buf.write(b"abc")
    buf.write(b"de")

    assert buf.getvalue() == b"abcde"
    assert buf.bytes_written == 5


def test_open_file_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "data.bin"
    with IOBuf.open(path, "w") as out:
        out.write(b"\x01\x02")

    with IOBuf.open(path) as cache:
        assert cache.read(4) == b"\x01\x02"


def test_getvalue_requires_memory_stream(tmp_path: Path) -> None:
    with IOBuf.open(tmp_path / "f.bin", "wb") as out:
        with pytest.raises(TypeError):
            out.getvalue()
