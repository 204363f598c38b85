"""Shared CLI utilities for simbind commands.

Provides the common Typer options, config loading, header resolution and the
standardised output / error helpers so every command reports the same way.

Usage in a command module::

    import typer
    from simbind.cli import ConfigOption, get_config, error_exit, json_print

    app = typer.Typer()

    @app.callback(invoke_without_command=True)
    def main(config: Path | None = ConfigOption) -> None:
        cfg = get_config(config)
        ...
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape

from simbind.config import ProjectConfig, default_config, load_config
from simbind.header_parser import ParsedHeader, Report, parse_header_file
from simbind.locate import resolve_header

# Re-usable Typer option for --config
ConfigOption: Path | None = typer.Option(
    None,
    "--config",
    "-c",
    help="Project root holding simbind.toml (default: search upward from cwd).",
)


def get_config(root: Path | None = None) -> ProjectConfig:
    """Load simbind.toml, falling back to defaults when there is none."""
    try:
        return load_config(root)
    except FileNotFoundError:
        return default_config(root)


# ---------------------------------------------------------------------------
# Standardised output helpers
# ---------------------------------------------------------------------------

_err_console = Console(stderr=True)


def error_exit(msg: str, *, json_mode: bool = False, code: int = 1) -> NoReturn:
    """Print *msg* as an error and ``raise typer.Exit(code)``."""
    if json_mode:
        print(json.dumps({"error": msg}, indent=2))
    else:
        _err_console.print(f"[red bold]error:[/red bold] {escape(msg)}", highlight=False)
    raise typer.Exit(code=code)


def json_print(data: dict[str, Any] | list[Any]) -> None:
    """Print *data* as pretty-printed JSON to stdout."""
    print(json.dumps(data, indent=2))


def progress_reporter(quiet: bool = False) -> Report | None:
    """Return a parser ``report`` callback printing to stderr, or ``None``."""
    if quiet:
        return None

    def _report(line: str) -> None:
        _err_console.print(line, markup=False, highlight=False)

    return _report


# ---------------------------------------------------------------------------
# Header resolution + parsing
# ---------------------------------------------------------------------------


@dataclass
class LoadedHeader:
    """A resolved header path, its model name and parse result."""

    path: Path
    model: str
    parsed: ParsedHeader


def load_header(
    cfg: ProjectConfig,
    *,
    model: str | None = None,
    header: Path | None = None,
    header_dir: Path | None = None,
    strict: bool = False,
    report: Report | None = None,
) -> LoadedHeader:
    """Resolve, read and parse the model header.

    Command-line values take precedence over *cfg*.  Raises
    :class:`~simbind.errors.SimbindError` subclasses on failure.
    """
    model = model or cfg.model
    path = resolve_header(
        header=header or cfg.header,
        header_dir=header_dir or cfg.header_dir,
        model=model,
    )
    if report is not None:
        report(f"Parsing header {path}:")
    parsed = parse_header_file(path, strict=strict, report=report)
    name = model or parsed.model or path.stem
    return LoadedHeader(path=path, model=name, parsed=parsed)
