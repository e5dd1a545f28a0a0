# layoutkit/cli/interface.py
import io
import sys
import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import click
from click_option_group import optgroup
from rich.console import Console as RichConsole
from rich.table import Table
import structlog

from layoutkit import __version__ as app_version
from layoutkit.config.loader import build_config, load_and_merge_configs
from layoutkit.config.settings import LayoutConfig, SourceBackend, DEFAULT_PATTERNS, DEFAULT_TEMPLATES_DIR
from layoutkit.core.output import stdout_sink, write_to_file
from layoutkit.core.site import build_engine
from layoutkit.core.templating.engine import Engine
from layoutkit.exceptions import LayoutKitError
from layoutkit.logging_setup import configure_logging, level_for_verbosity

log = structlog.get_logger(__name__)

def _fail(error: LayoutKitError):
    log.error("handled_application_error_in_cli", error_type=type(error).__name__, message=str(error))
    click.secho(f"Error: {error}", fg="red", err=True)
    sys.exit(1)

def _build_engine_or_exit(config: LayoutConfig) -> Engine:
    try:
        return build_engine(config)
    except LayoutKitError as e:
        _fail(e)

def _parse_user_vars(user_vars: Tuple[str, ...]) -> Dict[str, str]:
    parsed: Dict[str, str] = {}
    for item in user_vars:
        if "=" not in item:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--var")
        key, value = item.split("=", 1)
        parsed[key.strip()] = value
    return parsed

def _load_data_json(data_json: Optional[Path]) -> Dict[str, Any]:
    if data_json is None:
        return {}
    try:
        data = json.loads(data_json.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise click.BadParameter(f"could not load {data_json}: {e}", param_hint="--data-json")
    if not isinstance(data, dict):
        raise click.BadParameter(f"{data_json} must contain a JSON object", param_hint="--data-json")
    return data


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@optgroup.group("Template Source Options", help="Where layout and page templates are read from.")
@optgroup.option("-d", "--templates-dir", "templates_dir", type=click.Path(file_okay=False, path_type=Path), default=None, help=f"Directory holding the layout templates. Default: {DEFAULT_TEMPLATES_DIR}.")
@optgroup.option("-p", "--pattern", "patterns", multiple=True, help=f"Glob pattern matched against template base names (repeatable). Default: {' '.join(DEFAULT_PATTERNS)}.")
@optgroup.option("--embedded", "embedded_package", default=None, metavar="PACKAGE", help="Read layout templates bundled in an installed package instead of from disk.")
@optgroup.option("--embedded-root", "embedded_root", default=None, help="Resource directory inside the embedded package. Default: templates.")
@optgroup.option("--page-root", "page_root", type=click.Path(file_okay=False, path_type=Path), default=None, help="Directory page templates are read from. Default: current directory.")
@optgroup.group("Rendering Options", help="How templates are compiled and executed.")
@optgroup.option("--autoescape/--no-autoescape", "autoescape", default=None, help="HTML-escape variable output. Default: on.")
@optgroup.option("--strict/--lenient", "strict_undefined", default=None, help="Fail on undefined variables instead of rendering them empty. Default: strict.")
@optgroup.group("Application Behavior", help="Logging and diagnostics.")
@optgroup.option("--verbose", "-v", "verbosity_level", count=True, help="Verbosity: -v info, -vv debug.")
@optgroup.option("--force-json-logs", "force_json_logs_cli", is_flag=True, default=False, help="Force JSON logs.")
@click.version_option(version=app_version, prog_name="layoutkit", help="Show version and exit.")
@click.pass_context
def main_cli_group(ctx: click.Context, **cli_params: Any):
    """layoutkit: compose HTML template fragments into a shared layout
    and render pages against it."""

    log_level = level_for_verbosity(cli_params.get("verbosity_level", 0))
    configure_logging(log_level_str=log_level, force_json_logs=cli_params.get("force_json_logs_cli", False))

    log.debug("cli_command_invoked", params=cli_params)

    overrides: Dict[str, Any] = {
        "templates_dir": cli_params.get("templates_dir"),
        "patterns": list(cli_params["patterns"]) if cli_params.get("patterns") else None,
        "embedded_package": cli_params.get("embedded_package"),
        "embedded_root": cli_params.get("embedded_root"),
        "page_root": cli_params.get("page_root"),
        "autoescape": cli_params.get("autoescape"),
        "strict_undefined": cli_params.get("strict_undefined"),
    }
    if cli_params.get("embedded_package"):
        overrides["source_backend"] = SourceBackend.EMBEDDED

    try:
        ctx.obj = build_config(load_and_merge_configs(), overrides)
    except LayoutKitError as e:
        _fail(e)


@main_cli_group.command("list")
@click.pass_obj
def list_command(config: LayoutConfig):
    """List the fragments of the composed layout in walk order."""
    engine = _build_engine_or_exit(config)
    primary = engine.layout.primary_name

    table = Table(title="layout templates", show_lines=False)
    table.add_column("name", no_wrap=True)
    table.add_column("role")
    for name in engine.names():
        table.add_row(name, "primary" if name == primary else "")
    RichConsole(soft_wrap=True).print(table)


@main_cli_group.command("render")
@click.argument("page")
@click.option("--var", "user_vars", multiple=True, metavar="KEY=VALUE", help="Template variable (repeatable).")
@click.option("--data-json", "data_json", type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None, help="JSON object file used as template data; --var entries override its keys.")
@click.option("-o", "--output", "output_file", type=click.Path(dir_okay=False, writable=True, path_type=Path), default=None, help="Write the rendered page to this file instead of stdout.")
@click.pass_obj
def render_command(config: LayoutConfig, page: str, user_vars: Tuple[str, ...], data_json: Optional[Path], output_file: Optional[Path]):
    """Render PAGE (a path below the page root) against the layout."""
    data = _load_data_json(data_json)
    data.update(_parse_user_vars(user_vars))

    engine = _build_engine_or_exit(config)
    try:
        if output_file is None:
            with stdout_sink() as sink:
                engine.execute_template(sink, page, data)
        else:
            # a failed render must not leave an empty or truncated file behind.
            buffer = io.BytesIO()
            engine.execute_template(buffer, page, data)
            write_to_file(output_file, buffer.getvalue())
    except LayoutKitError as e:
        _fail(e)
    if output_file:
        click.echo(f"Info: Output written to: {output_file}", err=True)
