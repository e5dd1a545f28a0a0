# layoutkit/core/templating/composer.py
"""
Composes template fragments discovered in a FileSource into one TemplateSet.

Naming: every matching file is named by its full relative path. The first
match in walk order becomes the primary fragment of a fresh set. When
extending an existing set, a match named like the existing primary replaces
the primary's body and every other match is added alongside it.
"""
from typing import Optional, Sequence

import structlog

from layoutkit.core.discovery import discover_templates
from layoutkit.core.sources.base import FileSource
from layoutkit.core.templating.template_set import TemplateOptions, TemplateSet
from layoutkit.exceptions import EmptySetError, NotFoundError, SourceReadError, TemplateError
from layoutkit.util import decode_template_bytes

log = structlog.get_logger(__name__)


def compose(
    source: FileSource,
    patterns: Sequence[str],
    into: Optional[TemplateSet] = None,
    options: Optional[TemplateOptions] = None,
) -> TemplateSet:
    """Builds (or extends ``into``) a TemplateSet from the files matching ``patterns``.

    The result is frozen. ``into`` itself is never modified: extension works
    on a clone, so a failure leaves no partially composed set behind. An
    extended set keeps the options of ``into``; passing different ``options``
    alongside ``into`` is rejected.

    Raises:
        PatternError: ``patterns`` is empty or malformed.
        SourceReadError: the source root could not be listed, or a matching
            file could not be read.
        ParseError: a matching file is not a valid template.
        EmptySetError: no file matched any pattern.
        TemplateError: ``options`` conflict with the options of ``into``.
    """
    if into is not None:
        if options is not None and options != into.options:
            raise TemplateError("cannot change the options of an existing template set while extending it")
        target = into.clone()
        existing_primary = into.primary_name
    else:
        target = TemplateSet(options)
        existing_primary = None

    log.info("template_composition_started", source=repr(source), extending=into is not None,
             primary=existing_primary)

    try:
        paths = list(discover_templates(source, patterns))
    except NotFoundError as e:
        log.error("template_source_root_missing", source=repr(source), error=str(e))
        raise SourceReadError(".", e) from e

    matched = 0
    for path in paths:
        try:
            raw = source.read(path)
        except NotFoundError as e:
            raise SourceReadError(path, e) from e
        try:
            text = decode_template_bytes(raw)
        except UnicodeDecodeError as e:
            raise SourceReadError(path, e) from e

        fragment = target.add_fragment(path, text)
        if existing_primary is not None and fragment.name == existing_primary:
            log.info("primary_template_overridden", name=fragment.name)
        matched += 1

    if matched == 0:
        log.warning("template_composition_found_nothing", source=repr(source), patterns=list(patterns))
        raise EmptySetError()

    target.freeze()
    log.info("template_composition_complete", primary=target.primary_name, fragments=len(target))
    return target
