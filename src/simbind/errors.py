"""Exception hierarchy shared by the parser, generator and CLI.

Library code raises these; only the CLI layer converts them into exit codes.
"""

from __future__ import annotations

from pathlib import Path


class SimbindError(Exception):
    """Base class for every fatal simbind condition."""


class HeaderNotFoundError(SimbindError):
    """The model header could not be located or read."""

    def __init__(self, path: Path | str, reason: str = "not found") -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"header {str(self.path)!r} {reason}")


class HeaderParseError(SimbindError):
    """A struct body line did not match the field pattern (strict mode)."""

    def __init__(self, lineno: int, line: str, section: str = "") -> None:
        self.lineno = lineno
        self.line = line
        self.section = section
        where = f" in {section} struct" if section else ""
        super().__init__(f"line {lineno}{where}: cannot parse field declaration: {line.strip()!r}")


class GenerationError(SimbindError):
    """The parsed binding cannot be turned into consistent declarations."""


class NameCollisionError(GenerationError):
    """Two source fields sanitize to the same generated name."""

    def __init__(self, first: str, second: str, sanitized: str) -> None:
        self.first = first
        self.second = second
        self.sanitized = sanitized
        super().__init__(
            f"fields {first!r} and {second!r} both map to generated name {sanitized!r}"
        )


class UnsupportedTypeError(GenerationError):
    """A member uses a scalar type token with no known ctypes equivalent."""

    def __init__(self, field_name: str, type_name: str) -> None:
        self.field_name = field_name
        self.type_name = type_name
        super().__init__(f"field {field_name!r} has unsupported type {type_name!r}")
