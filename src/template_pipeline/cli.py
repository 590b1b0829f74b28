import json
import sys
import logging
from pathlib import Path
from typing import Any, Optional

import typer
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import load_config
from .error.exceptions import TemplatePipelineError
from .logging.config import LogConfig
from .templates.minifier import default_minifier
from .templates.mime import MimeClassifier
from .templates.renderer import Renderer

app = typer.Typer(help="Template pipeline CLI")

console = Console()
logger = logging.getLogger(__name__)


def _fail(message: str) -> None:
    console.print(f"[bold red]{escape(message)}[/bold red]", soft_wrap=True)
    raise typer.Exit(code=1)


def _build_renderer(config_path: Optional[Path], **overrides: Any) -> Renderer:
    config = load_config(str(config_path) if config_path else None, **overrides)
    LogConfig.from_configuration(config).configure()
    return Renderer(config)


def _parse_data(data: Optional[str], data_file: Optional[Path]) -> Any:
    if data is not None and data_file is not None:
        _fail("Use either --data or --data-file, not both.")
    if data_file is not None:
        if not data_file.exists():
            _fail(f"Data file not found: {data_file}")
        try:
            return yaml.safe_load(data_file.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            _fail(f"Error loading data file: {e}")
    if data is None:
        return None
    try:
        return json.loads(data)
    except json.JSONDecodeError:
        # Plain strings are passed through as the data value
        return data


@app.command("render")
def render(
    root: Path = typer.Argument(..., help="Template directory"),
    name: str = typer.Argument(..., help="Template name relative to the directory"),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="Data value as JSON (or a plain string)"),
    data_file: Optional[Path] = typer.Option(None, "--data-file", "-f", help="Data value from a YAML or JSON file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write output to this file"),
    no_minify: bool = typer.Option(False, "--no-minify", help="Render sources without minifying them"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config file")
):
    """Render one template."""
    value = _parse_data(data, data_file)
    overrides = {"minify": False} if no_minify else {}
    try:
        renderer = _build_renderer(config_path, **overrides)
        renderer.load(root)
        if output is None:
            renderer.execute(sys.stdout, name, value)
            sys.stdout.flush()
        else:
            with open(output, "w", encoding=renderer.config.encoding) as sink:
                renderer.execute(sink, name, value)
            console.print(f"[bold green]Rendered {name} to {output}[/bold green]")
    except TemplatePipelineError as e:
        logger.debug("Render failed", exc_info=True)
        _fail(str(e))


@app.command("list")
def list_templates(
    root: Path = typer.Argument(..., help="Template directory"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config file")
):
    """List the templates found in a directory."""
    try:
        renderer = _build_renderer(config_path)
        renderer.load(root)
    except TemplatePipelineError as e:
        _fail(str(e))

    entries = renderer.registry.entries
    if not entries:
        console.print("[bold yellow]No templates found.[/bold yellow]")
        return

    table = Table(title=f"Templates in {root}")
    table.add_column("Name")
    table.add_column("Class")
    table.add_column("MIME type")
    for name in renderer.template_names():
        entry = entries[name]
        table.add_row(name, entry.content_class.value, entry.mime_type or "-")
    console.print(table)


@app.command("minify")
def minify_file(
    path: Path = typer.Argument(..., help="File to minify"),
    mime_type: Optional[str] = typer.Option(None, "--mime", "-m", help="Override the MIME type")
):
    """Print the minified form of one file."""
    if not path.is_file():
        _fail(f"File not found: {path}")
    mime = mime_type or MimeClassifier().type_for(path.name)
    try:
        sys.stdout.write(default_minifier().minify(mime, path.read_text(encoding="utf-8"), template_name=path.name))
    except TemplatePipelineError as e:
        _fail(str(e))
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Error reading {path}: {e}")


if __name__ == "__main__":
    app()
