"""
Command-line interface for richmark.

Usage:
    richmark convert notes.md -o notes.html
    cat notes.md | richmark convert --no-prologue
    richmark preview notes.md
    richmark view notes.md
    richmark config set style.blockquote_color "#808080"
"""

import sys
import os
import logging
from pathlib import Path
from typing import Optional

# Windows encoding
if sys.platform == "win32":
    os.environ.setdefault("PYTHONIOENCODING", "utf-8")

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from richmark.config import get_config_manager, ConfigManager
from richmark.exceptions import ConfigError, InputError
from richmark.markdown_formatter import markdown_to_html

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def error(message: str) -> None:
    """Print an error."""
    err_console.print(f"[red]✗[/red] {message}")


def success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def info(message: str) -> None:
    """Print an informational message."""
    console.print(f"[blue]ℹ[/blue] {message}")


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def read_markdown(source: str) -> str:
    """Read Markdown from a file path, or stdin for ``-``."""
    if source == "-":
        return click.get_text_stream("stdin").read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InputError(f"Cannot read {source}: {e}", details={"path": source}) from e


def get_manager(ctx: click.Context) -> ConfigManager:
    return get_config_manager(ctx.obj.get("config_dir"))


@click.group()
@click.option(
    "--config-dir",
    envvar="RICHMARK_CONFIG_DIR",
    type=click.Path(file_okay=False, path_type=Path),
    help="Configuration directory (default: ~/.richmark)"
)
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
@click.pass_context
def main(ctx, config_dir: Optional[Path], verbose: bool):
    """richmark - Markdown to rich text for Qt/QML text widgets."""
    ctx.ensure_object(dict)
    ctx.obj["config_dir"] = config_dir
    setup_logging(verbose)


# ===== CONVERSION COMMANDS =====

@main.command()
@click.argument("source", default="-")
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write markup to a file instead of stdout"
)
@click.option("--no-prologue", is_flag=True, help="Omit the <style> prologue")
@click.pass_context
def convert(ctx, source: str, output: Optional[Path], no_prologue: bool):
    """Convert Markdown to rich text markup."""
    try:
        text = read_markdown(source)
    except InputError as e:
        error(e.message)
        sys.exit(1)
    logger.debug(f"Read {len(text)} chars from {source}")

    style = get_manager(ctx).get_config().style
    if no_prologue:
        style = style.model_copy(update={"include_prologue": False})

    html = markdown_to_html(text, style)

    if output is None:
        click.echo(html)
        return

    output.write_text(html, encoding="utf-8")
    success(f"Written to [bold]{output}[/bold]")


@main.command()
@click.argument("source", default="-")
@click.pass_context
def preview(ctx, source: str):
    """Show the Markdown and the generated markup in the terminal."""
    try:
        text = read_markdown(source)
    except InputError as e:
        error(e.message)
        sys.exit(1)

    html = markdown_to_html(text, get_manager(ctx).get_config().style)

    console.print(Panel(Markdown(text), title="Markdown"))
    console.print(Panel(Syntax(html, "html", word_wrap=True), title="Rich text"))


@main.command()
@click.argument("source", default="-")
@click.option("--title", "-t", help="Window title")
@click.pass_context
def view(ctx, source: str, title: Optional[str]):
    """Open the Markdown in a Qt window."""
    try:
        text = read_markdown(source)
    except InputError as e:
        error(e.message)
        sys.exit(1)

    try:
        from richmark.viewer import run_viewer
    except ImportError as e:
        error(f"Qt viewer unavailable: {e}")
        sys.exit(1)

    config = get_manager(ctx).get_config()
    window_title = title or ("stdin" if source == "-" else Path(source).name)
    sys.exit(run_viewer(text, window_title, style=config.style, options=config.viewer))


# ===== CONFIG COMMANDS =====

@main.group("config")
def config_group():
    """Manage render and viewer settings."""
    pass


@config_group.command("show")
@click.pass_context
def config_show(ctx):
    """Show the current configuration."""
    manager = get_manager(ctx)
    config = manager.get_config()
    if not manager.config_file.exists():
        info("No config file yet, showing defaults")

    table = Table(title=str(manager.config_file))
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for section_name, section in config.model_dump(mode="json").items():
        for field_name, value in section.items():
            table.add_row(f"{section_name}.{field_name}", str(value))

    console.print(table)


@config_group.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx, key: str, value: str):
    """Set an option, e.g. style.include_prologue false."""
    try:
        get_manager(ctx).set_value(key, value)
    except ConfigError as e:
        error(e.message)
        sys.exit(1)
    success(f"{key} = {value}")


@config_group.command("reset")
@click.confirmation_option(prompt="Reset all settings to defaults?")
@click.pass_context
def config_reset(ctx):
    """Restore default settings."""
    get_manager(ctx).reset()
    success("Settings reset")


if __name__ == "__main__":
    main()
