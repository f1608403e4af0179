"""Dependency record sources."""

from podwhy.sources.cache import CachedRecord, dump_records, load_records, parse_records

__all__ = ["CachedRecord", "dump_records", "load_records", "parse_records"]
