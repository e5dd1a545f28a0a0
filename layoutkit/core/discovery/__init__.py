# layoutkit/core/discovery/__init__.py
"""
Template discovery for layoutkit.

Walks a FileSource and keeps the files whose base name matches one of the
configured glob patterns.
"""
from .walker import discover_templates

__all__ = ["discover_templates"]
