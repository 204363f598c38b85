"""main.py – Umbrella CLI entry point for simbind.

Lazily imports and registers the subcommand typer apps so that a broken
optional import in one command does not prevent the whole CLI from loading.

Each module exposes a single command and is registered as a flat
``app.command()`` entry.
"""

import importlib
import sys
from collections.abc import Callable

import typer

app = typer.Typer(
    help="Generate ctypes bindings for compiled fixed-step models from their C headers.",
    rich_markup_mode="rich",
    epilog="""\
[bold]Typical workflow:[/bold]
  simbind inspect demo              Check which fields the header declares
  simbind generate demo -o demo.py  Write the bindings module
  python -c "import demo; m = demo.demo.new(); m.step()"

[dim]Subcommands read defaults from simbind.toml when present.
Run 'simbind <cmd> --help' for details.[/dim]""",
)

# ---------------------------------------------------------------------------
# Subcommand registry
# ---------------------------------------------------------------------------

_SINGLE_COMMANDS: list[tuple[str, str, str]] = [
    ("generate", "simbind.generate", "Generate ctypes bindings from a model header."),
    ("inspect", "simbind.inspect_header", "Show the fields parsed from a model header."),
]


def _make_stub_cmd(mod_name: str, err: ImportError) -> Callable[[], None]:
    """Create a stub command function that reports a missing dependency."""

    def _stub() -> None:
        print(f"Error: could not load '{mod_name}': {err}", file=sys.stderr)
        raise typer.Exit(code=1)

    return _stub


for _name, _module, _help in _SINGLE_COMMANDS:
    try:
        _mod = importlib.import_module(_module)
        _epilog = getattr(_mod.app.info, "epilog", None)
        if not isinstance(_epilog, str):
            _epilog = None
        app.command(name=_name, help=_help, epilog=_epilog)(_mod.main)
    except ImportError as _exc:
        app.command(name=_name, help=f"[unavailable] {_help}")(_make_stub_cmd(_module, _exc))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
