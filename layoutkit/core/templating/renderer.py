# layoutkit/core/templating/renderer.py
"""
Renders a page fragment against a shared layout.

The layout is never touched: each call clones it, adds the page fragment to
the clone and executes the page there. Concurrent renders against the same
layout therefore need no locking.
"""
from typing import Any, IO, Optional

import structlog

from layoutkit.core.sources.base import FileSource
from layoutkit.core.templating.template_set import TemplateSet
from layoutkit.exceptions import EmptyLayoutError, NotFoundError, SourceReadError
from layoutkit.util import decode_template_bytes

log = structlog.get_logger(__name__)


def render_fragment(
    layout: Optional[TemplateSet],
    fragment_text: str,
    target_name: str,
    data: Any,
    sink: IO,
) -> None:
    """Adds ``fragment_text`` as ``target_name`` to a clone of ``layout`` and executes it."""
    if layout is None or len(layout) == 0:
        raise EmptyLayoutError()

    page_set = layout.clone()
    page_set.add_fragment(target_name, fragment_text)
    log.info("rendering_template", name=target_name, layout_primary=layout.primary_name)
    page_set.execute(target_name, data, sink)


def render(
    layout: Optional[TemplateSet],
    source: FileSource,
    target_name: str,
    data: Any,
    sink: IO,
) -> None:
    """Reads ``target_name`` from ``source`` and renders it with :func:`render_fragment`.

    Raises:
        EmptyLayoutError: ``layout`` is unset or empty; nothing is written.
        SourceReadError: the page could not be read; nothing is written.
        ParseError: the page is not a valid template.
        ExecutionError: rendering failed; earlier output stays in ``sink``.
    """
    if layout is None or len(layout) == 0:
        raise EmptyLayoutError()

    try:
        text = decode_template_bytes(source.read(target_name))
    except NotFoundError as e:
        log.error("page_template_not_found", name=target_name, source=repr(source))
        raise SourceReadError(target_name, e) from e
    except UnicodeDecodeError as e:
        raise SourceReadError(target_name, e) from e

    render_fragment(layout, text, target_name, data, sink)
