"""Thin buffered wrapper over binary streams for cache reads and writes."""

from __future__ import annotations

import io
from pathlib import Path
from typing import BinaryIO, Optional, Union


class IOBuf:
    """Binary stream wrapper that counts bytes and tolerates short reads."""

    def __init__(self, stream: Optional[BinaryIO] = None, *, owns_stream: bool = False) -> None:
        self._stream: BinaryIO = stream if stream is not None else io.BytesIO()
        self._owns_stream = owns_stream
        self.bytes_read = 0
        self.bytes_written = 0

    @classmethod
    def open(cls, path: Union[str, Path], mode: str = "rb") -> "IOBuf":
        if "b" not in mode:
            mode += "b"
        return cls(open(path, mode), owns_stream=True)

    @classmethod
    def from_bytes(cls, data: bytes) -> "IOBuf":
        return cls(io.BytesIO(data))

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; fewer are returned only at end of stream."""

        if size <= 0:
            return b""
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = self._stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        data = b"".join(chunks)
        self.bytes_read += len(data)
        return data

    def peek_eof(self) -> bool:
        if self._stream.seekable():
            position = self._stream.tell()
            at_end = not self._stream.read(1)
            self._stream.seek(position)
            return at_end
        peek = getattr(self._stream, "peek", None)
        if peek is None:
            raise io.UnsupportedOperation("stream supports neither seek nor peek")
        return not peek(1)

    def write(self, data: bytes) -> int:
        written = self._stream.write(data)
        if written is None:
            written = len(data)
        self.bytes_written += written
        return written

    def flush(self) -> None:
        self._stream.flush()

    def getvalue(self) -> bytes:
        if not isinstance(self._stream, io.BytesIO):
            raise TypeError("getvalue() is only available on in-memory buffers")
        return self._stream.getvalue()

    def close(self) -> None:
        if self._owns_stream:
            self._stream.close()

    def __enter__(self) -> "IOBuf":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.flush()
        self.close()
