"""header_parser.py – Extract field lists from a generated model header.

The header is not parsed as C.  The code generator writes each record in a
fixed idiom::

    /* External inputs (root inport signals with default storage) */
    typedef struct {
      real_T position[3];                  /* '<Root>/position' */
      real_T enable;                       /* '<Root>/enable' */
    } ExtU_demo_T;

so a single forward pass is enough: a marker phrase opens a section, the next
line must open a ``typedef struct``, member lines follow, and the first line
mentioning the section tag (``ExtU``, ``ExtY``, ``DW``) that is not itself a
member closes it.

The same marker phrases reappear above the ``extern`` storage declarations
further down the header.  Those occurrences are not followed by a struct and
are skipped; the skip is recorded in :attr:`ParsedHeader.notes` rather than
raised.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from simbind.errors import HeaderNotFoundError, HeaderParseError
from simbind.fields import Field, FieldList, ModelBinding

# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Section:
    """One record section of the header."""

    key: str  # attribute of ParsedHeader / ModelBinding
    marker: str  # phrase in the comment above the typedef
    tag: str  # prefix of the struct name, e.g. ExtU_<model>_T


SECTIONS: tuple[Section, ...] = (
    Section("inputs", "External inputs", "ExtU"),
    Section("outputs", "External outputs", "ExtY"),
    Section("states", "Block states", "DW"),
)

STRUCT_OPEN = "typedef struct"

# ---------------------------------------------------------------------------
# Regex patterns
# ---------------------------------------------------------------------------

# Member line: ``real_T name;``, ``int32_T name[4];``, ``real_T m[2][3];``
# Named groups:
#   type: rtwtypes.h scalar token (always ends in _T)
#   name: member identifier
#   dims: zero or more bracketed sizes
FIELD_RE = re.compile(
    r"\b(?P<type>\w+_T)\s+(?P<name>[A-Za-z_]\w*)\s*(?P<dims>(?:\[\s*\d+\s*\]\s*)*);"
)
_DIM_RE = re.compile(r"\d+")

# Banner line written at the top of every generated file: `` * File: demo.h``
MODEL_RE = re.compile(r"File:\s*(\w+)\.h")

Report = Callable[[str], None]


def _discard(_line: str) -> None:
    pass


# ---------------------------------------------------------------------------
# Result
# ---------------------------------------------------------------------------


@dataclass
class ParsedHeader:
    """Field lists found in one header, plus parse diagnostics."""

    inputs: FieldList = field(default_factory=list)
    outputs: FieldList = field(default_factory=list)
    states: FieldList = field(default_factory=list)
    model: str | None = None
    notes: list[str] = field(default_factory=list)

    def binding(self, model: str | None = None) -> ModelBinding:
        """Build the :class:`ModelBinding` for *model* (default: the banner name)."""
        name = model or self.model
        if not name:
            raise ValueError("model name not given and not found in the header banner")
        return ModelBinding(
            name,
            inputs=list(self.inputs),
            outputs=list(self.outputs),
            states=list(self.states),
        )


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_field(line: str) -> Field | None:
    """Return the :class:`Field` declared on *line*, or ``None``."""
    m = FIELD_RE.search(line)
    if m is None:
        return None
    dims = [int(d) for d in _DIM_RE.findall(m.group("dims"))]
    if 0 in dims:
        return None
    size = math.prod(dims) if dims else None
    return Field(m.group("name"), size, m.group("type"))


def _parse_section(
    lines: Iterator[tuple[int, str]],
    section: Section,
    strict: bool,
    report: Report,
    notes: list[str],
) -> FieldList | None:
    """Consume one struct body from *lines*.

    Returns ``None`` when the line after the marker does not open a struct.
    End of input terminates the body like a closing line would.
    """
    opening = next(lines, None)
    if opening is None or not opening[1].lstrip().startswith(STRUCT_OPEN):
        return None

    report(f"| {section.tag}:")
    fields: FieldList = []
    for lineno, line in lines:
        parsed = parse_field(line)
        if parsed is not None:
            report(f"|  - {parsed.name:<22}: {parsed.length:>5}")
            fields.append(parsed)
            continue
        if section.tag in line:
            break
        if line.strip() in ("", "{"):
            continue
        if strict:
            raise HeaderParseError(lineno, line, section.tag)
        note = f"line {lineno}: ignored in {section.tag} struct: {line.strip()!r}"
        notes.append(note)
        report(f"| note: {note}")
    return fields


def parse_header(
    text: str,
    *,
    strict: bool = False,
    report: Report | None = None,
) -> ParsedHeader:
    """Parse header *text* into a :class:`ParsedHeader`.

    Args:
        strict: Raise :class:`HeaderParseError` on a struct body line that is
            not a member declaration instead of ignoring it.
        report: Receives human-readable progress lines (section headings and
            one line per member).
    """
    emit = report or _discard
    result = ParsedHeader()
    lines = enumerate(text.splitlines(), start=1)
    for lineno, line in lines:
        if result.model is None:
            m = MODEL_RE.search(line)
            if m:
                result.model = m.group(1)
        for section in SECTIONS:
            if section.marker not in line:
                continue
            fields = _parse_section(lines, section, strict, emit, result.notes)
            if fields is None:
                note = (
                    f"line {lineno}: {section.marker!r} not followed by "
                    f"{STRUCT_OPEN!r}, occurrence skipped"
                )
                result.notes.append(note)
                emit(f"| note: {note}")
            else:
                setattr(result, section.key, fields)
    return result


def parse_header_file(
    path: Path,
    *,
    strict: bool = False,
    report: Report | None = None,
) -> ParsedHeader:
    """Read *path* as UTF-8 and parse it, see :func:`parse_header`."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise HeaderNotFoundError(path) from None
    except UnicodeDecodeError:
        raise HeaderNotFoundError(path, "is not valid UTF-8") from None
    except OSError as exc:
        raise HeaderNotFoundError(path, f"unreadable ({exc.strerror})") from exc
    return parse_header(text, strict=strict, report=report)
