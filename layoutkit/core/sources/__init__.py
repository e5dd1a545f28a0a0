# layoutkit/core/sources/__init__.py
"""
Read-only file sources the composition engine walks.

All backends share the walk in ``base.FileSource``, so enumeration order and
the NotFoundError raised for a missing path are identical whichever is active.
"""
from .base import FileSource, SourceEntry
from .disk import DiskFileSource
from .embedded import EmbeddedFileSource
from .memory import MemoryFileSource

__all__ = [
    "FileSource",
    "SourceEntry",
    "DiskFileSource",
    "EmbeddedFileSource",
    "MemoryFileSource",
]
