"""Buffered byte-stream helpers used by the cache codec."""

from .buffer import IOBuf

__all__ = ["IOBuf"]
