"""naming.py - Generated-name sanitization and the native naming convention.

Two rules turn header identifiers into Python names:

- **attribute names** keep the C identifier, except that a Python keyword
  gets a trailing underscore (``lambda`` -> ``lambda_``);
- **variant names** (enumeration members in global-state mode) strip leading
  and trailing underscores and upper-case the rest (``_pos_x`` -> ``POS_X``).
  A result that is not an identifier (``_1st_gain`` -> ``1ST_GAIN``) is a
  :class:`~simbind.errors.GenerationError`.

Both rules are checked per field list; two fields landing on the same name is
a :class:`~simbind.errors.NameCollisionError`.

Native symbol names are fixed by the foreign code generator and must match
byte-for-byte, see :class:`NativeSymbols`.
"""

from __future__ import annotations

import keyword
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from simbind.errors import GenerationError, NameCollisionError
from simbind.fields import Field


def attribute_name(name: str) -> str:
    """Return the Python attribute name for a C member name."""
    if keyword.iskeyword(name):
        return name + "_"
    return name


def variant_name(name: str) -> str:
    """Return the enumeration member name for a C member name."""
    stripped = name.strip("_")
    if not stripped:
        raise GenerationError(f"field {name!r} has no usable variant name after stripping underscores")
    variant = stripped.upper()
    if not variant.isidentifier():
        raise GenerationError(f"field {name!r} gives variant name {variant!r}, not an identifier")
    return variant


def check_collisions(fields: Iterable[Field], rule: Callable[[str], str]) -> dict[str, str]:
    """Apply *rule* to every field name and reject duplicates.

    Returns a ``{source_name: sanitized_name}`` mapping in field order.
    """
    seen: dict[str, str] = {}
    mapping: dict[str, str] = {}
    for f in fields:
        sanitized = rule(f.name)
        if sanitized in seen:
            raise NameCollisionError(seen[sanitized], f.name, sanitized)
        seen[sanitized] = f.name
        mapping[f.name] = sanitized
    return mapping


def check_model_name(model: str) -> str:
    """Validate the model identifier used for class and symbol names."""
    if not model.isidentifier() or keyword.iskeyword(model):
        raise GenerationError(f"model name {model!r} is not a usable identifier")
    return model


@dataclass(frozen=True)
class NativeSymbols:
    """Foreign names derived from the model identifier."""

    initialize: str
    step: str
    terminate: str
    inputs_type: str
    outputs_type: str
    states_type: str
    context_type: str
    context_tag: str
    inputs_global: str
    outputs_global: str

    @classmethod
    def for_model(cls, model: str) -> NativeSymbols:
        return cls(
            initialize=f"{model}_initialize",
            step=f"{model}_step",
            terminate=f"{model}_terminate",
            inputs_type=f"ExtU_{model}_T",
            outputs_type=f"ExtY_{model}_T",
            states_type=f"DW_{model}_T",
            context_type=f"RT_MODEL_{model}_T",
            context_tag=f"tag_RTM_{model}_T",
            inputs_global=f"{model}_U",
            outputs_global=f"{model}_Y",
        )
