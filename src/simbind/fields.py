"""fields.py – Declarative description of a model's native records.

A :class:`Field` is one member of an ``ExtU`` / ``ExtY`` / ``DW`` struct as
the header declares it.  Field lists keep declaration order: the generated
``_fields_`` tables enumerate members in exactly this order, which is what
makes the generated layout match the compiled object.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from simbind.errors import UnsupportedTypeError

# ---------------------------------------------------------------------------
# rtwtypes.h scalar tokens
# ---------------------------------------------------------------------------

# token -> (ctypes name, zero literal)
RTW_TYPES: dict[str, tuple[str, str]] = {
    "real_T": ("c_double", "0.0"),
    "real64_T": ("c_double", "0.0"),
    "time_T": ("c_double", "0.0"),
    "real32_T": ("c_float", "0.0"),
    "int8_T": ("c_int8", "0"),
    "uint8_T": ("c_uint8", "0"),
    "int16_T": ("c_int16", "0"),
    "uint16_T": ("c_uint16", "0"),
    "int32_T": ("c_int32", "0"),
    "uint32_T": ("c_uint32", "0"),
    "int64_T": ("c_int64", "0"),
    "uint64_T": ("c_uint64", "0"),
    "boolean_T": ("c_uint8", "0"),
    "int_T": ("c_int", "0"),
    "uint_T": ("c_uint", "0"),
}


@dataclass(frozen=True)
class Field:
    """One declared struct member.

    ``size`` is ``None`` for a scalar and a positive element count for a
    fixed-length array.
    """

    name: str
    size: int | None = None
    type_name: str = "real_T"

    @property
    def length(self) -> int:
        """Number of elements (1 for scalars)."""
        return self.size if self.size is not None else 1

    @property
    def is_array(self) -> bool:
        return self.size is not None

    @property
    def ctype(self) -> str:
        """Name of the ctypes scalar type for one element."""
        try:
            return RTW_TYPES[self.type_name][0]
        except KeyError:
            raise UnsupportedTypeError(self.name, self.type_name) from None

    @property
    def zero(self) -> str:
        """Python literal of the element's zero value."""
        try:
            return RTW_TYPES[self.type_name][1]
        except KeyError:
            raise UnsupportedTypeError(self.name, self.type_name) from None

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "size": self.size, "type": self.type_name}


FieldList = list[Field]


@dataclass
class ModelBinding:
    """A model identifier plus its three ordered field lists."""

    model: str
    inputs: FieldList = field(default_factory=list)
    outputs: FieldList = field(default_factory=list)
    states: FieldList = field(default_factory=list)

    def sections(self) -> list[tuple[str, FieldList]]:
        """Return ``(section, fields)`` pairs in inputs/outputs/states order."""
        return [("inputs", self.inputs), ("outputs", self.outputs), ("states", self.states)]

    def to_dict(self) -> dict[str, object]:
        return {
            "model": self.model,
            **{name: [f.to_dict() for f in fields] for name, fields in self.sections()},
        }
