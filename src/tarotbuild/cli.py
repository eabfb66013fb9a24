"""
Command line interface for the tarot site build.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .build import clean_directories, content_hash, default_clean_targets
from .config import BuildConfig, get_settings, load_config
from .config.models import DEFAULT_CONFIG_FILENAME, config_paths
from .content import ContentTable, load_content
from .errors import BuildError
from .pipeline import BuildReport, execute_build
from .render import load_templates

console = Console()
app = typer.Typer(help="Bundle the client app and generate the static tarot spread pages.")
logger = logging.getLogger(__name__)

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]


def _configure_logging(level_name: str) -> None:
    env_override = get_settings().log_level
    level_str = (env_override or level_name or "info").upper()
    if level_str not in {lvl.upper() for lvl in LOG_LEVELS}:
        level_str = "INFO"
    logging.basicConfig(
        level=getattr(logging, level_str, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.debug("Logging configured at %s", level_str)


def _resolve_config_path(value: Path) -> Path:
    """Ensure config path exists and return absolute path."""
    resolved = value.expanduser().resolve()
    if not resolved.exists():
        raise typer.BadParameter(f"No config file found at {resolved}")
    if not resolved.is_file():
        raise typer.BadParameter(f"Config path must be a file, got directory: {resolved}")
    return resolved


def _fail(exc: Exception) -> typer.Exit:
    logger.error("Build failed: %s", exc)
    console.print(f"[bold red]Build failed:[/] {exc}")
    return typer.Exit(code=1)


def _load_inputs(path: Path) -> tuple[BuildConfig, ContentTable]:
    config = load_config(path)
    content = load_content(config.resolve(config.content))
    return config, content


def _print_build_report(report: BuildReport) -> None:
    table = Table(title="Build Summary")
    table.add_column("Key")
    table.add_column("Value", overflow="fold")
    for key, value in report.summary_rows():
        table.add_row(key, value)
    console.print(table)


_CONFIG_OPTION = typer.Option(
    Path(DEFAULT_CONFIG_FILENAME),
    "--config",
    "-c",
    help="Path to the build configuration TOML.",
    callback=_resolve_config_path,
)


@app.callback(invoke_without_command=True)
def _root_command(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show tarotbuild version and exit.",
        is_flag=True,
    ),
    log_level: str = typer.Option(
        "info",
        "--log-level",
        help="Logging level (critical, error, warning, info, debug).",
        show_default=True,
        case_sensitive=False,
    ),
) -> None:
    """
    Default command when no subcommand is selected.
    """
    _configure_logging(log_level)

    if version:
        console.print(f"[bold green]tarotbuild[/] {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        console.print("[bold yellow]tarotbuild[/] is ready. Run [cyan]tarotbuild build --config tarotbuild.toml[/].")


@app.command()
def build(config: Path = _CONFIG_OPTION) -> None:
    """
    Clean, bundle, and generate every page.
    """
    console.print("[yellow]Building with esbuild...[/]")
    try:
        build_config, content = _load_inputs(config)
        logger.info(
            "Loaded %d spreads and %d categories",
            len(content.spreads),
            len(content.categories),
        )
        report = execute_build(build_config, content)
    except (BuildError, OSError) as exc:
        raise _fail(exc) from exc

    _print_build_report(report)
    console.print("[bold green]Build completed successfully![/]")


@app.command()
def clean(config: Path = _CONFIG_OPTION) -> None:
    """
    Remove stale artifacts from every output directory.
    """
    try:
        build_config = load_config(config)
        removed = clean_directories(default_clean_targets(build_config))
    except (BuildError, OSError) as exc:
        raise _fail(exc) from exc
    console.print(f"[bold green]Cleaned[/] {len(removed)} file(s).")


@app.command()
def check(config: Path = _CONFIG_OPTION) -> None:
    """
    Validate config, content, and templates without writing anything.
    """
    try:
        build_config, content = _load_inputs(config)
        load_templates(build_config, content)
    except (BuildError, OSError) as exc:
        raise _fail(exc) from exc

    table = Table(title="Build Configuration Summary")
    table.add_column("Key")
    table.add_column("Value", overflow="fold")
    for name, path in config_paths(build_config).items():
        marker = "" if path.exists() else " [red](missing)[/]"
        table.add_row(name, f"{path}{marker}")
    table.add_row("Spreads", str(len(content.spreads)))
    table.add_row("Categories", str(len(content.categories)))
    table.add_row("Config hash", build_config.hash)
    console.print(table)
    console.print("[bold blue]Check complete.[/] No filesystem changes made.")


@app.command("hash")
def hash_file(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to hash."),
) -> None:
    """
    Print the short content hash used in asset filenames.
    """
    console.print(content_hash(path.read_bytes()))


def main() -> None:
    """
    Entry-point used by the console script defined in pyproject.toml.
    """
    app()
