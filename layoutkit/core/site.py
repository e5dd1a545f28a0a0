# layoutkit/core/site.py
"""
Startup wiring: picks the template source from configuration and builds the engine.

The backend is chosen once per process. Embedded templates ship as package
data of an installed distribution; disk templates are read live from
``templates_dir``. Both walk identically, so the composed layout does not
depend on which one is active.
"""
import structlog

from layoutkit.config.settings import LayoutConfig, SourceBackend
from layoutkit.core.sources import DiskFileSource, EmbeddedFileSource, FileSource
from layoutkit.core.templating.engine import Engine
from layoutkit.exceptions import ConfigError

log = structlog.get_logger(__name__)


def select_file_source(config: LayoutConfig) -> FileSource:
    if config.source_backend is SourceBackend.EMBEDDED:
        if not config.embedded_package:
            raise ConfigError("the embedded template source needs 'embedded_package'")
        source: FileSource = EmbeddedFileSource(config.embedded_package, config.embedded_root)
    else:
        source = DiskFileSource(config.templates_dir)
    log.info("template_source_selected", backend=config.source_backend.value, source=repr(source))
    return source


def build_engine(config: LayoutConfig) -> Engine:
    # composition errors propagate: a service should refuse to start without a layout.
    return Engine(
        select_file_source(config),
        *config.patterns,
        options=config.template_options(),
        page_source=DiskFileSource(config.page_root),
    )
