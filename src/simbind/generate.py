"""Generate ctypes bindings for a compiled model from its header.

Usage:
    simbind generate M1HPloadcells                 # sys/M1HPloadcells.h -> stdout
    simbind generate --header sys/demo.h -o demo.py
    simbind generate demo --mode global --strict -o demo.py
"""

from pathlib import Path

import typer

from simbind.cli import ConfigOption, error_exit, get_config, json_print, load_header, progress_reporter
from simbind.codegen import MODES, GenerationOptions, generate
from simbind.errors import SimbindError
from simbind.utils import write_module

_EPILOG = """\
[bold]Examples:[/bold]

simbind generate demo                          Parse sys/demo.h, print the module

simbind generate demo -o bindings/demo.py      Write the module to a file

simbind generate --header-dir out/demo_ert     Scan another directory for the header

simbind generate demo --mode global            Global-storage controller with enum views

simbind generate demo --strict                 Fail on unparseable struct lines

simbind generate demo -o demo.py --json        Machine-readable summary

[dim]Reads defaults from simbind.toml when present.  Companion headers
(*_types.h, *_private.h, rtwtypes.h, rt_defines.h) are never selected.[/dim]"""

app = typer.Typer(
    help="Generate ctypes bindings from a model header.",
    rich_markup_mode="rich",
    epilog=_EPILOG,
)


@app.callback(invoke_without_command=True)
def main(
    model: str | None = typer.Argument(None, help="Model name (header <model>.h)"),
    header: Path | None = typer.Option(None, "--header", help="Explicit header file"),
    header_dir: Path | None = typer.Option(None, "--header-dir", help="Directory to scan"),
    mode: str | None = typer.Option(None, "--mode", "-m", help=f"One of: {', '.join(MODES)}"),
    strict: bool | None = typer.Option(
        None, "--strict/--lenient", help="Reject unparseable struct body lines"
    ),
    alias: str | None = typer.Option(None, "--alias", help="Extra name for the wrapper class"),
    library: str | None = typer.Option(None, "--library", help="Default shared library path"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output .py file"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No progress output"),
    json_output: bool = typer.Option(False, "--json", help="Print a JSON summary"),
    config: Path | None = ConfigOption,
) -> None:
    """Parse the model header and emit the bindings module.

    Progress (sections and fields found) goes to stderr.  The module goes to
    ``--output`` when given (written atomically, left alone when unchanged),
    otherwise to stdout.

    Args:
        model: Model name; defaults to simbind.toml or the header banner.
        header: Header path, bypassing directory resolution.
        header_dir: Directory holding ``<model>.h`` and its companions.
        mode: Generation mode (``owned`` or ``global``).
        strict: Treat non-field lines inside a struct body as errors.
        alias: Additional public name bound to the wrapper class.
        library: Shared library path the module loads by default.
        output: Destination file.
        quiet: Suppress progress output.
        json_output: Emit a JSON summary instead of progress.
        config: Project root holding simbind.toml.
    """
    try:
        cfg = get_config(config)
    except (KeyError, TypeError, ValueError) as e:
        error_exit(f"bad simbind.toml: {e}", json_mode=json_output)

    mode_val = mode or cfg.mode
    if mode_val not in MODES:
        error_exit(f"Unknown mode {mode_val!r} (choose from {', '.join(MODES)})", json_mode=json_output)
    strict_val = cfg.strict if strict is None else strict
    output_val = output or cfg.output

    try:
        loaded = load_header(
            cfg,
            model=model,
            header=header,
            header_dir=header_dir,
            strict=strict_val,
            report=progress_reporter(quiet or json_output),
        )
        options = GenerationOptions(
            alias=alias or cfg.alias,
            library=library or cfg.library,
            source=loaded.path.name,
        )
        binding = loaded.parsed.binding(loaded.model)
        source = generate(binding, mode_val, options)
    except SimbindError as e:
        error_exit(str(e), json_mode=json_output)

    changed = False
    if output_val is not None:
        try:
            changed = write_module(output_val, source)
        except OSError as e:
            error_exit(f"cannot write {output_val}: {e}", json_mode=json_output)

    if json_output:
        summary = binding.to_dict()
        summary.update(
            {
                "header": str(loaded.path),
                "mode": mode_val,
                "strict": strict_val,
                "output": str(output_val) if output_val is not None else None,
                "changed": changed,
                "notes": loaded.parsed.notes,
            }
        )
        if output_val is None:
            summary["source"] = source
        json_print(summary)
        return

    if output_val is None:
        typer.echo(source, nl=False)
    elif not quiet:
        if changed:
            typer.echo(f"Wrote {output_val} ({mode_val} mode)", err=True)
        else:
            typer.echo(f"{output_val} is up to date", err=True)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
