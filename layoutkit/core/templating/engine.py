# layoutkit/core/templating/engine.py
import io
from pathlib import Path
from typing import Any, IO, List, Optional

import structlog

from layoutkit.core.sources.base import FileSource
from layoutkit.core.sources.disk import DiskFileSource
from layoutkit.core.templating.composer import compose
from layoutkit.core.templating.renderer import render
from layoutkit.core.templating.template_set import TemplateOptions, TemplateSet

log = structlog.get_logger(__name__)


class Engine:
    """Holds a layout composed once at construction and renders pages against it.

    Page templates are read from ``page_source`` (the working directory by
    default), named by the path they are requested under, and executed in a
    private clone of the layout.
    """

    def __init__(
        self,
        layout_source: FileSource,
        *layout_patterns: str,
        options: Optional[TemplateOptions] = None,
        page_source: Optional[FileSource] = None,
    ):
        self.options = options or TemplateOptions()
        self.page_source = page_source or DiskFileSource(Path("."))
        self._layout = self.parse_source(None, layout_source, *layout_patterns)
        log.info("engine_ready", primary=self._layout.primary_name, fragments=len(self._layout))

    @property
    def layout(self) -> TemplateSet:
        return self._layout

    def names(self) -> List[str]:
        return self._layout.names()

    def parse_source(self, into: Optional[TemplateSet], source: FileSource, *patterns: str) -> TemplateSet:
        return compose(source, list(patterns), into=into, options=self.options)

    def execute_template(self, sink: IO, template_path: str, data: Any = None) -> None:
        render(self._layout, self.page_source, template_path, data, sink)

    def render_to_string(self, template_path: str, data: Any = None) -> str:
        # buffered variant: nothing is returned unless the whole page rendered.
        buffer = io.StringIO()
        self.execute_template(buffer, template_path, data)
        return buffer.getvalue()
