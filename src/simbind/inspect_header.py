"""inspect_header.py – Show what simbind reads from a model header.

Prints one Rich table per section (inputs, outputs, states) with every field
in declaration order, its type token and element count, followed by any
parse notes.  Nothing is generated.

Usage:
    simbind inspect demo
    simbind inspect --header sys/demo.h --json
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from simbind.cli import ConfigOption, error_exit, get_config, json_print, load_header
from simbind.errors import SimbindError
from simbind.fields import FieldList
from simbind.header_parser import SECTIONS

app = typer.Typer(
    help="Show the inputs, outputs and states parsed from a model header.",
    rich_markup_mode="rich",
)

console = Console()


def _section_table(title: str, fields: FieldList) -> Table:
    table = Table(title=title, title_justify="left", show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Field", style="cyan")
    table.add_column("Type")
    table.add_column("Size", justify="right")
    for i, f in enumerate(fields):
        table.add_row(str(i), f.name, f.type_name, str(f.size) if f.is_array else "scalar")
    return table


@app.callback(invoke_without_command=True)
def main(
    model: str | None = typer.Argument(None, help="Model name (header <model>.h)"),
    header: Path | None = typer.Option(None, "--header", help="Explicit header file"),
    header_dir: Path | None = typer.Option(None, "--header-dir", help="Directory to scan"),
    strict: bool = typer.Option(False, "--strict", help="Reject unparseable struct body lines"),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON"),
    config: Path | None = ConfigOption,
) -> None:
    """Parse the model header and list its sections."""
    try:
        cfg = get_config(config)
    except (KeyError, TypeError, ValueError) as e:
        error_exit(f"bad simbind.toml: {e}", json_mode=json_output)

    try:
        loaded = load_header(
            cfg,
            model=model,
            header=header,
            header_dir=header_dir,
            strict=strict or cfg.strict,
        )
    except SimbindError as e:
        error_exit(str(e), json_mode=json_output)

    binding = loaded.parsed.binding(loaded.model)
    if json_output:
        data = binding.to_dict()
        data["header"] = str(loaded.path)
        data["notes"] = loaded.parsed.notes
        json_print(data)
        return

    console.print(f"[bold]{binding.model}[/bold]  ({loaded.path})")
    for section in SECTIONS:
        fields = getattr(binding, section.key)
        console.print(_section_table(f"{section.marker} ({section.tag})", fields))
    for note in loaded.parsed.notes:
        console.print(f"[yellow]note:[/yellow] {escape(note)}", highlight=False)


def main_entry() -> None:
    """Run the Typer CLI application."""
    app()


if __name__ == "__main__":
    main_entry()
