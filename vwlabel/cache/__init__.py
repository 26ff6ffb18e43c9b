"""Binary example cache reading and writing."""

from .file import CACHE_MAGIC, CACHE_VERSION, CacheReader, CacheWriter

__all__ = ["CACHE_MAGIC", "CACHE_VERSION", "CacheReader", "CacheWriter"]
