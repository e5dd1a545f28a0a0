# layoutkit/core/templating/__init__.py
"""
Templating module for layoutkit.

Provides the TemplateSet (a shared namespace of parsed fragments), compose()
to build one from a FileSource, and render()/render_fragment() to execute a
page against a cloned layout. Engine bundles the three for applications.
"""
from .template_set import Fragment, TemplateOptions, TemplateSet
from .composer import compose
from .renderer import render, render_fragment
from .engine import Engine

__all__ = [
    "Fragment",
    "TemplateOptions",
    "TemplateSet",
    "compose",
    "render",
    "render_fragment",
    "Engine",
]
