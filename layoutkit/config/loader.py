# layoutkit/config/loader.py
"""
Handles loading and merging of configuration from TOML files into a LayoutConfig.
"""
import toml
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import fields as dataclass_fields
import structlog

from layoutkit.exceptions import ConfigError

from .settings import LayoutConfig, SourceBackend

log = structlog.get_logger(__name__)

PROJECT_CONFIG_FILENAMES = [".layoutkit.toml", "layoutkit.toml", "pyproject.toml"]
USER_CONFIG_DIR = Path.home() / ".config" / "layoutkit"
USER_CONFIG_FILE = USER_CONFIG_DIR / "config.toml"

# map keys used in the config file to LayoutConfig attribute names.
CONFIG_KEY_TO_LAYOUTCONFIG_ATTR_MAP: Dict[str, str] = {
    "templates_dir": "templates_dir",
    "patterns": "patterns",
    "source": "source_backend",
    "embedded_package": "embedded_package",
    "embedded_root": "embedded_root",
    "page_root": "page_root",
    "autoescape": "autoescape",
    "strict_undefined": "strict_undefined",
    "trim_blocks": "trim_blocks",
    "lstrip_blocks": "lstrip_blocks",
}

def _load_toml_file_data(file_path: Path) -> Dict[str, Any]:
    if not file_path.is_file():
        return {}
    log.debug("loading_toml_config_file", path=str(file_path))
    try:
        data = toml.load(file_path)
    except Exception as e:
        log.error("config_file_load_error", path=str(file_path), error=str(e))
        raise ConfigError(f"could not read config file {file_path}: {e}") from e
    if file_path.name == "pyproject.toml":
        return data.get("tool", {}).get("layoutkit", {})
    return data

def load_and_merge_configs(cwd: Optional[Path] = None, user_config_file: Optional[Path] = None) -> Dict[str, Any]:
    # user-global settings first, then the first project-local file found in cwd.
    cwd = cwd or Path.cwd()
    user_config_file = user_config_file or USER_CONFIG_FILE
    merged_toml_data: Dict[str, Any] = {}
    if user_config_file.is_file():
        log.info("loading_user_global_config", path=str(user_config_file))
        merged_toml_data.update(_load_toml_file_data(user_config_file))

    for filename in PROJECT_CONFIG_FILENAMES:
        candidate = cwd / filename
        if candidate.is_file():
            project_settings = _load_toml_file_data(candidate)
            if project_settings:
                log.info("loading_project_local_config", path=str(candidate))
                merged_toml_data.update(project_settings)
                break
    if not merged_toml_data:
        log.debug("no_configuration_files_loaded")
    return merged_toml_data

def _coerce(attr: str, value: Any) -> Any:
    if attr in ("templates_dir", "page_root"):
        if isinstance(value, Path):
            return value
        if not isinstance(value, str):
            raise ConfigError(f"'{attr}' must be a path string, got {value!r}")
        return Path(value)
    if attr == "patterns":
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list) or not value or not all(isinstance(p, str) for p in value):
            raise ConfigError(f"'patterns' must be a non-empty list of glob strings, got {value!r}")
        return list(value)
    if attr == "source_backend":
        if isinstance(value, SourceBackend):
            return value
        try:
            return SourceBackend(str(value).lower())
        except ValueError:
            raise ConfigError(f"unknown template source {value!r}; expected one of "
                              f"{[b.value for b in SourceBackend]}") from None
    if attr in ("autoescape", "strict_undefined", "trim_blocks", "lstrip_blocks"):
        if not isinstance(value, bool):
            raise ConfigError(f"'{attr}' must be true or false, got {value!r}")
        return value
    return value

def build_config(raw_settings: Dict[str, Any], overrides: Optional[Dict[str, Any]] = None) -> LayoutConfig:
    # layers raw toml settings and then explicit overrides (e.g. cli flags) onto the defaults.
    known_attrs = {f.name for f in dataclass_fields(LayoutConfig)}
    kwargs: Dict[str, Any] = {}
    for toml_key, value in raw_settings.items():
        attr = CONFIG_KEY_TO_LAYOUTCONFIG_ATTR_MAP.get(toml_key)
        if attr is None:
            log.warning("unknown_config_key_ignored", key=toml_key)
            continue
        kwargs[attr] = _coerce(attr, value)
    for attr, value in (overrides or {}).items():
        if attr not in known_attrs:
            raise ConfigError(f"unknown configuration option '{attr}'")
        if value is not None:
            kwargs[attr] = _coerce(attr, value)

    config = LayoutConfig(**kwargs)
    if config.source_backend is SourceBackend.EMBEDDED and not config.embedded_package:
        raise ConfigError("the embedded template source needs 'embedded_package'")
    log.debug("layout_config_built", config=str(config))
    return config
