"""Binary example cache: a header followed by one record per example."""

from __future__ import annotations

import struct
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional, Union

from vwlabel.errors import CacheCorruptionError
from vwlabel.io import IOBuf
from vwlabel.models.example import Example

if TYPE_CHECKING:
    from vwlabel.pipeline.session import LabelSession

CACHE_MAGIC = b"VWLC"
CACHE_VERSION = 1
HEADER_STRUCT = struct.Struct("<4s H B")
TAG_LEN_STRUCT = struct.Struct("<H")
TEXT_LEN_STRUCT = struct.Struct("<I")
FEATURE_COUNT_STRUCT = struct.Struct("<I")


def _read_exact(cache: IOBuf, size: int, what: str) -> bytes:
    data = cache.read(size)
    if len(data) != size:
        raise CacheCorruptionError(
            f"cache is truncated while reading {what}: expected {size} bytes, got {len(data)}",
            expected=size,
            available=len(data),
        )
    return data


class CacheWriter:
    """Writes examples of one session to a cache stream."""

    def __init__(self, session: "LabelSession", cache: IOBuf) -> None:
        self.session = session
        self.cache = cache
        self.records_written = 0
        self._write_header()

    @classmethod
    def create(cls, session: "LabelSession", path: Union[str, Path]) -> "CacheWriter":
        return cls(session, IOBuf.open(path, "wb"))

    def _write_header(self) -> None:
        kind = self.session.label_parser.name.encode("ascii")
        self.cache.write(HEADER_STRUCT.pack(CACHE_MAGIC, CACHE_VERSION, len(kind)) + kind)

    def write(self, ec: Example) -> int:
        written = self.session.label_parser.cache_write(ec.label, self.cache)
        tag = (ec.tag or "").encode("utf-8")
        text = ec.feature_text.encode("utf-8")
        written += self.cache.write(TAG_LEN_STRUCT.pack(len(tag)) + tag)
        written += self.cache.write(TEXT_LEN_STRUCT.pack(len(text)) + text)
        written += self.cache.write(FEATURE_COUNT_STRUCT.pack(ec.num_features))
        self.records_written += 1
        return written

    def close(self) -> None:
        self.cache.flush()
        self.cache.close()

    def __enter__(self) -> "CacheWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class CacheReader:
    """Reads cached examples back into pooled examples."""

    def __init__(self, session: "LabelSession", cache: IOBuf) -> None:
        self.session = session
        self.cache = cache
        self.records_read = 0
        self._read_header()

    @classmethod
    def open(cls, session: "LabelSession", path: Union[str, Path]) -> "CacheReader":
        cache = IOBuf.open(path, "rb")
        try:
            return cls(session, cache)
        except CacheCorruptionError:
            cache.close()
            raise

    def _read_header(self) -> None:
        raw = _read_exact(self.cache, HEADER_STRUCT.size, "header")
        magic, version, kind_len = HEADER_STRUCT.unpack(raw)
        if magic != CACHE_MAGIC:
            raise CacheCorruptionError(f"not a label cache (magic {magic!r})")
        if version != CACHE_VERSION:
            raise CacheCorruptionError(f"unsupported cache version {version}")
        kind = _read_exact(self.cache, kind_len, "label kind").decode("ascii", "replace")
        expected = self.session.label_parser.name
        if kind != expected:
            raise CacheCorruptionError(f"cache holds {kind!r} labels, session expects {expected!r}")

    def read(self) -> Optional[Example]:
        """Return the next example, or None at a clean end of the cache."""

        ec = self.session.pool.get()
        try:
            consumed = self.session.label_parser.cache_read(self.session.shared, ec.label, self.cache)
            if consumed == 0:
                self.session.pool.release(ec)
                return None
            (tag_len,) = TAG_LEN_STRUCT.unpack(_read_exact(self.cache, TAG_LEN_STRUCT.size, "tag length"))
            tag = _read_exact(self.cache, tag_len, "tag").decode("utf-8")
            (text_len,) = TEXT_LEN_STRUCT.unpack(_read_exact(self.cache, TEXT_LEN_STRUCT.size, "feature length"))
            ec.feature_text = _read_exact(self.cache, text_len, "features").decode("utf-8")
            (ec.num_features,) = FEATURE_COUNT_STRUCT.unpack(
                _read_exact(self.cache, FEATURE_COUNT_STRUCT.size, "feature count")
            )
        except CacheCorruptionError:
            self.session.pool.release(ec)
            raise
        except UnicodeDecodeError as exc:
            self.session.pool.release(ec)
            raise CacheCorruptionError(f"cache record {self.records_read + 1} is not valid UTF-8") from exc
        ec.tag = tag or None
        self.records_read += 1
        return ec

    def __iter__(self) -> Iterator[Example]:
        while True:
            ec = self.read()
            if ec is None:
                return
            yield ec

    def close(self) -> None:
        self.cache.close()

    def __enter__(self) -> "CacheReader":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
