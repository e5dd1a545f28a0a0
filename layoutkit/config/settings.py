from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from layoutkit.core.templating.template_set import TemplateOptions

class SourceBackend(Enum):
    # where layout templates are read from.
    DISK = "disk"
    EMBEDDED = "embedded"

DEFAULT_TEMPLATES_DIR = Path("templates")
DEFAULT_PATTERNS = ["*.html"]
DEFAULT_EMBEDDED_ROOT = "templates"

@dataclass
class LayoutConfig:
    # holds all configuration parameters for composing and rendering.
    templates_dir: Path = DEFAULT_TEMPLATES_DIR
    patterns: List[str] = field(default_factory=lambda: list(DEFAULT_PATTERNS))
    source_backend: SourceBackend = SourceBackend.DISK
    embedded_package: Optional[str] = None
    embedded_root: str = DEFAULT_EMBEDDED_ROOT
    page_root: Path = Path(".")
    autoescape: bool = True
    strict_undefined: bool = True
    trim_blocks: bool = False
    lstrip_blocks: bool = False

    def template_options(self) -> TemplateOptions:
        return TemplateOptions(
            autoescape=self.autoescape,
            strict_undefined=self.strict_undefined,
            trim_blocks=self.trim_blocks,
            lstrip_blocks=self.lstrip_blocks,
        )
