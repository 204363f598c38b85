"""Project configuration loader for simbind.

Reads ``simbind.toml`` from the project root so that ``simbind generate`` can
run without repeating the model name, header location and output path::

    [model]
    name = "M1HPloadcells"      # default: from the header banner
    header_dir = "sys"          # scanned for <name>.h
    # header = "sys/M1HPloadcells.h"
    alias = "Controller"

    [generate]
    mode = "owned"              # "owned" or "global"
    strict = false
    library = "libM1HPloadcells.so"
    output = "bindings/m1hp.py"

Usage::

    from simbind.config import load_config
    cfg = load_config()
    cfg.header_dir      # Path, resolved against the project root
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from simbind.codegen import DEFAULT_MODE, MODES

CONFIG_NAME = "simbind.toml"


@dataclass
class ProjectConfig:
    """Parsed project configuration with resolved paths."""

    # Root directory (where simbind.toml lives, or the cwd)
    root: Path

    # --- [model] ---
    model: str | None = None
    header: Path | None = None
    header_dir: Path = field(default_factory=lambda: Path("sys"))
    alias: str | None = None

    # --- [generate] ---
    mode: str = DEFAULT_MODE
    strict: bool = False
    library: str | None = None
    output: Path | None = None

    # Whether the values came from a config file
    from_file: bool = False


def _resolve(root: Path, rel: str | None) -> Path | None:
    """Resolve a path relative to project root."""
    if rel is None:
        return None
    p = Path(rel)
    if p.is_absolute():
        return p
    return root / p


def _find_root(start: Path | None = None) -> Path:
    """Walk up from *start* (or cwd) to the directory holding simbind.toml."""
    if start is not None:
        return start
    candidate = Path.cwd().resolve()
    while candidate != candidate.parent:
        if (candidate / CONFIG_NAME).exists():
            return candidate
        candidate = candidate.parent
    raise FileNotFoundError(
        f"Could not find {CONFIG_NAME} in any parent of the current directory."
    )


def load_config(root: Path | None = None) -> ProjectConfig:
    """Load simbind.toml.

    Args:
        root: Project root directory.  Auto-detected if ``None``.

    Raises:
        FileNotFoundError: No config file.
        KeyError: ``generate.mode`` names an unknown mode.
        TypeError: A table or key has the wrong type.
    """
    root = _find_root(root)
    toml_path = root / CONFIG_NAME
    if not toml_path.exists():
        raise FileNotFoundError(f"Config not found: {toml_path}")

    with open(toml_path, "rb") as f:
        raw = tomllib.load(f)

    model = raw.get("model", {})
    gen = raw.get("generate", {})
    for table, value in (("model", model), ("generate", gen)):
        if not isinstance(value, dict):
            raise TypeError(f"[{table}] in {CONFIG_NAME} must be a table, got {value!r}")

    mode = gen.get("mode", DEFAULT_MODE)
    if mode not in MODES:
        raise KeyError(f"Unknown mode {mode!r} in {CONFIG_NAME}. Available modes: {list(MODES)}")
    strict = gen.get("strict", False)
    if not isinstance(strict, bool):
        raise TypeError(f"generate.strict must be a boolean, got {strict!r}")

    return ProjectConfig(
        root=root,
        model=model.get("name"),
        header=_resolve(root, model.get("header")),
        header_dir=_resolve(root, model.get("header_dir", "sys")),
        alias=model.get("alias"),
        mode=mode,
        strict=strict,
        library=gen.get("library"),
        output=_resolve(root, gen.get("output")),
        from_file=True,
    )


def default_config(root: Path | None = None) -> ProjectConfig:
    """Configuration used when no simbind.toml exists."""
    root = root or Path.cwd()
    return ProjectConfig(root=root, header_dir=root / "sys")
