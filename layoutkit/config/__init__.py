from .settings import LayoutConfig, SourceBackend
from .loader import build_config, load_and_merge_configs

__all__ = ["LayoutConfig", "SourceBackend", "build_config", "load_and_merge_configs"]
