"""Shared utilities for simbind."""

import contextlib
import os
from pathlib import Path


def write_module(path: Path, source: str) -> bool:
    """Write a generated module, leaving an identical existing file untouched.

    The new text goes to a sibling ``.tmp`` file that then replaces *path*,
    so an interrupted run never leaves half a module behind.  Returns
    ``False`` when *path* already held exactly *source* (its mtime is kept,
    so build tools do not see a change).
    """
    with contextlib.suppress(FileNotFoundError, UnicodeDecodeError):
        if path.read_text(encoding="utf-8") == source:
            return False
    path.parent.mkdir(parents=True, exist_ok=True)
    staging = path.with_name(path.name + ".tmp")
    try:
        staging.write_text(source, encoding="utf-8")
        os.replace(staging, path)
    except BaseException:
        with contextlib.suppress(OSError):
            staging.unlink()
        raise
    return True
