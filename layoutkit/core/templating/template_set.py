# layoutkit/core/templating/template_set.py
"""
A TemplateSet is a collection of named Jinja2 fragments sharing one namespace.

Each set owns its own ``jinja2.Environment`` whose loader resolves names
against the set's fragments, so ``{% include %}``, ``{% extends %}`` and
``{% import %}`` are resolved at execution time against whichever set is
executing. Fragments hold the compiled code object, which is immutable: a
clone shares the fragments by reference and only copies the name mapping.
"""
import io
from dataclasses import dataclass, field
from types import CodeType
from collections.abc import Mapping
from typing import Any, Callable, Dict, IO, List, Optional, Tuple

import jinja2
import structlog

from layoutkit.exceptions import (
    ExecutionError,
    LayoutKitError,
    NotFoundError,
    OutputError,
    ParseError,
    TemplateError,
)

log = structlog.get_logger(__name__)

OUTPUT_ENCODING = "utf-8"


@dataclass(frozen=True)
class TemplateOptions:
    """Environment settings shared by a set and all of its clones."""
    autoescape: bool = True
    strict_undefined: bool = True
    trim_blocks: bool = False
    lstrip_blocks: bool = False
    keep_trailing_newline: bool = True


@dataclass(frozen=True)
class Fragment:
    name: str
    source: str
    code: CodeType = field(repr=False, compare=False)


class _FragmentLoader(jinja2.BaseLoader):
    # resolves template names against one set's fragment mapping.
    def __init__(self, fragments: Dict[str, Fragment]):
        self._fragments = fragments

    def get_source(self, environment: jinja2.Environment, template: str) -> Tuple[str, str, Callable[[], bool]]:
        fragment = self._lookup(template)
        return fragment.source, fragment.name, self._uptodate(fragment)

    def load(self, environment: jinja2.Environment, name: str, globals: Optional[Mapping[str, Any]] = None) -> jinja2.Template:
        fragment = self._lookup(name)
        if globals is None:
            globals = {}
        return environment.template_class.from_code(
            environment, fragment.code, globals, self._uptodate(fragment)
        )

    def list_templates(self) -> List[str]:
        return list(self._fragments)

    def _lookup(self, name: str) -> Fragment:
        fragment = self._fragments.get(name)
        if fragment is None:
            raise jinja2.TemplateNotFound(name)
        return fragment

    def _uptodate(self, fragment: Fragment) -> Callable[[], bool]:
        # a cached template goes stale once its name is rebound to a new fragment.
        fragments = self._fragments
        return lambda: fragments.get(fragment.name) is fragment


def _build_environment(options: TemplateOptions, loader: jinja2.BaseLoader) -> jinja2.Environment:
    return jinja2.Environment(
        loader=loader,
        autoescape=options.autoescape,
        undefined=jinja2.StrictUndefined if options.strict_undefined else jinja2.Undefined,
        trim_blocks=options.trim_blocks,
        lstrip_blocks=options.lstrip_blocks,
        keep_trailing_newline=options.keep_trailing_newline,
        auto_reload=True,
    )


def _as_context(data: Any) -> Dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    return {"data": data}


class TemplateSet:
    """Named, parsed fragments that can invoke each other by name."""

    def __init__(self, options: Optional[TemplateOptions] = None):
        self.options = options or TemplateOptions()
        self._fragments: Dict[str, Fragment] = {}
        self._primary_name: Optional[str] = None
        self._frozen = False
        self._environment = _build_environment(self.options, _FragmentLoader(self._fragments))

    @property
    def primary_name(self) -> Optional[str]:
        return self._primary_name

    @property
    def primary(self) -> Fragment:
        if self._primary_name is None:
            raise NotFoundError("<primary>", "template set is empty")
        return self._fragments[self._primary_name]

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "TemplateSet":
        # marks the set read-only; further changes must go through clone().
        self._frozen = True
        return self

    def names(self) -> List[str]:
        return list(self._fragments)

    def get(self, name: str) -> Fragment:
        try:
            return self._fragments[name]
        except KeyError:
            raise NotFoundError(name, f"no template named '{name}' in set") from None

    def __contains__(self, name: object) -> bool:
        return name in self._fragments

    def __len__(self) -> int:
        return len(self._fragments)

    def __repr__(self) -> str:
        return f"TemplateSet(primary={self._primary_name!r}, fragments={len(self._fragments)})"

    def clone(self) -> "TemplateSet":
        cloned = TemplateSet(self.options)
        cloned._fragments.update(self._fragments)
        cloned._primary_name = self._primary_name
        return cloned

    def parse(self, name: str, source_text: str) -> Fragment:
        """Compiles ``source_text`` as fragment ``name`` without inserting it."""
        try:
            code = self._environment.compile(source_text, name=name, filename=name)
        except jinja2.TemplateSyntaxError as e:
            log.error("template_parse_failed", name=name, line=e.lineno, error=e.message)
            raise ParseError(name, f"line {e.lineno}: {e.message}") from e
        return Fragment(name=name, source=source_text, code=code)

    def insert(self, fragment: Fragment) -> Fragment:
        """Inserts an already parsed fragment, replacing any fragment of that name."""
        if self._frozen:
            raise TemplateError(f"cannot add '{fragment.name}' to a frozen template set; clone it first")
        replaced = fragment.name in self._fragments
        self._fragments[fragment.name] = fragment
        if self._primary_name is None:
            self._primary_name = fragment.name
        log.debug("template_fragment_added", name=fragment.name, replaced=replaced,
                  primary=fragment.name == self._primary_name)
        return fragment

    def add_fragment(self, name: str, source_text: str) -> Fragment:
        """Parses ``source_text`` and inserts it into this set only."""
        if self._frozen:
            raise TemplateError(f"cannot add '{name}' to a frozen template set; clone it first")
        return self.insert(self.parse(name, source_text))

    def execute(self, name: str, data: Any, sink: IO) -> None:
        """Executes fragment ``name`` against ``data``, streaming chunks into ``sink``.

        Text sinks receive ``str``; anything else receives UTF-8 bytes. Output
        already written stays written if execution fails partway.
        """
        self.get(name)
        text_sink = isinstance(sink, io.TextIOBase)
        log.debug("template_execution_started", name=name, text_sink=text_sink)
        try:
            template = self._environment.get_template(name)
            for chunk in template.generate(_as_context(data)):
                sink.write(chunk if text_sink else chunk.encode(OUTPUT_ENCODING))
        except LayoutKitError:
            raise
        except OSError as e:
            log.error("template_output_write_failed", name=name, error=str(e))
            raise OutputError(f"failed to write output of template '{name}': {e}") from e
        except Exception as e:
            log.error("template_execution_failed", name=name, error_type=type(e).__name__, error=str(e))
            raise ExecutionError(name, f"{type(e).__name__}: {e}") from e
        log.debug("template_execution_complete", name=name)
