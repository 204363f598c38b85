"""locate.py – Find the model header among the code generator's output.

The generator writes several headers per model next to each other
(``<model>.h``, ``<model>_types.h``, ``<model>_private.h``, ``rtwtypes.h``,
``rt_defines.h``).  Only ``<model>.h`` declares the I/O and state records.
"""

from __future__ import annotations

from pathlib import Path

from simbind.errors import HeaderNotFoundError

# Companion headers that never hold the model records.
EXCLUDED_SUFFIXES: tuple[str, ...] = (
    "rtwtypes.h",
    "rt_defines.h",
    "_private.h",
    "_types.h",
)


def is_model_header(path: Path) -> bool:
    """True for a ``.h`` file that is not one of the companion headers."""
    return path.suffix == ".h" and not path.name.endswith(EXCLUDED_SUFFIXES)


def header_for_model(header_dir: Path, model: str) -> Path:
    """Return ``<header_dir>/<model>.h``, which must exist."""
    path = header_dir / f"{model}.h"
    if not path.is_file():
        raise HeaderNotFoundError(path)
    return path


def scan_header_dir(header_dir: Path) -> Path:
    """Return the first model header in *header_dir* (sorted by name)."""
    if not header_dir.is_dir():
        raise HeaderNotFoundError(header_dir, "is not a directory")
    candidates = sorted(p for p in header_dir.iterdir() if p.is_file() and is_model_header(p))
    if not candidates:
        raise HeaderNotFoundError(header_dir, "contains no model header")
    return candidates[0]


def resolve_header(
    *,
    header: Path | None = None,
    header_dir: Path | None = None,
    model: str | None = None,
) -> Path:
    """Pick the header to parse.

    An explicit *header* wins; otherwise ``<header_dir>/<model>.h`` when the
    model is known, otherwise the first model header found in *header_dir*.
    """
    if header is not None:
        if not header.is_file():
            raise HeaderNotFoundError(header)
        return header
    directory = header_dir if header_dir is not None else Path("sys")
    if model:
        return header_for_model(directory, model)
    return scan_header_dir(directory)
