"""Pieces shared by the generation strategies.

Every strategy validates the whole :class:`~simbind.fields.ModelBinding`
before rendering anything, so a fatal condition never produces partial
output.  Records are rendered from a declarative field table; the module
templates only splice rendered records and fixed native names together.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import jinja2

from simbind import __version__
from simbind.errors import GenerationError
from simbind.fields import FieldList, ModelBinding
from simbind.naming import NativeSymbols, attribute_name, check_collisions, check_model_name


def make_template(source: str) -> jinja2.Template:
    """Compile a code template; block tags on their own line leave no trace."""
    return jinja2.Template(
        source,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=jinja2.StrictUndefined,
    )


@dataclass(frozen=True)
class GenerationOptions:
    """Knobs that do not change the native interface."""

    alias: str | None = None  # extra public name for the wrapper class
    library: str | None = None  # default shared library path in the module
    source: str | None = None  # header file name, for the module docstring

    def library_for(self, model: str) -> str:
        return self.library or f"lib{model}.so"


class Emitter:
    """A generation strategy: ``emit(binding) -> module source``."""

    mode: str = ""
    description: str = ""

    def emit(self, binding: ModelBinding, options: GenerationOptions | None = None) -> str:
        raise NotImplementedError

    def check(self, binding: ModelBinding, options: GenerationOptions) -> None:
        """Reject bindings that cannot produce consistent declarations."""
        check_model_name(binding.model)
        if options.alias is not None:
            check_model_name(options.alias)
            if options.alias == binding.model:
                raise GenerationError(f"alias {options.alias!r} repeats the model name")
        for fields in self.emitted_sections(binding):
            check_collisions(fields, attribute_name)
            for f in fields:
                f.ctype  # noqa: B018  # raises UnsupportedTypeError

    def emitted_sections(self, binding: ModelBinding) -> list[FieldList]:
        """Field lists this mode turns into records."""
        return [fields for _section, fields in binding.sections()]

    def context(self, binding: ModelBinding, options: GenerationOptions) -> dict[str, Any]:
        """Template variables common to every mode."""
        return {
            "version": __version__,
            "mode": self.mode,
            "model": binding.model,
            "symbols": NativeSymbols.for_model(binding.model),
            "library": repr(options.library_for(binding.model)),
            "source": options.source,
            "alias": options.alias,
        }


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

_RECORD_TEMPLATE = make_template(
    '''\
class {{ name }}(ctypes.Structure):
    """{{ doc }}"""

{% if fields %}
    _fields_ = [
    {% for f in fields %}
        ("{{ f.attr }}", {{ f.ctype }}),
    {% endfor %}
    ]
{% else %}
    _fields_ = []
{% endif %}
{% if zero_init %}

    def __init__(self):
        super().__init__()
    {% for f in fields %}
        {{ f.init }}
    {% endfor %}
{% endif %}
'''
)


def record_table(fields: FieldList) -> list[dict[str, str]]:
    """Turn a field list into template rows, declaration order preserved."""
    rows = []
    for f in fields:
        attr = attribute_name(f.name)
        if f.is_array:
            ctype = f"ctypes.{f.ctype} * {f.length}"
            init = f"self.{attr}[:] = [{f.zero}] * {f.length}"
        else:
            ctype = f"ctypes.{f.ctype}"
            init = f"self.{attr} = {f.zero}"
        rows.append({"attr": attr, "ctype": ctype, "init": init})
    return rows


def render_record(name: str, doc: str, fields: FieldList, *, zero_init: bool) -> str:
    """Render one ``ctypes.Structure`` subclass, without trailing newline."""
    return _RECORD_TEMPLATE.render(
        name=name,
        doc=doc,
        fields=record_table(fields),
        zero_init=zero_init,
    ).rstrip("\n")


# ---------------------------------------------------------------------------
# Module prologue and library loading
# ---------------------------------------------------------------------------

PROLOGUE = '''\
"""ctypes bindings for the {{ model }} model.

Generated by simbind {{ version }} ({{ mode }} mode){% if source %} from {{ source }}{% endif %}.
Do not edit: regenerate from the model header instead.
"""
'''

LOADER = '''\
_lib = None


def load_library(path=None):
    """Load the compiled model.

    Without *path*, loads ``LIBRARY`` (relative paths are taken from this
    module's directory) once and caches it.
    """
    global _lib
    if path is None and _lib is not None:
        return _lib
    if path is None:
        lib_path = Path(LIBRARY)
        if not lib_path.is_absolute():
            lib_path = Path(__file__).resolve().parent / lib_path
    else:
        lib_path = Path(path)
    lib = ctypes.CDLL(str(lib_path))
    _bind(lib)
    if path is None:
        _lib = lib
    return lib
'''
