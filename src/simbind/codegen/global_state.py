"""Global-state mode: enumeration-tagged views over process-wide storage.

Models built with static I/O keep their inputs and outputs in the native
globals ``<model>_U`` / ``<model>_Y`` and take no arguments.  The generated
module exposes:

- ``InputField`` / ``OutputField`` enumerations, one member per field in
  declaration order;
- ``Input`` / ``Output`` views, each an enumeration member plus a live array
  over that member's slot in the native storage (bounded indexing);
- a controller class that binds every view, initializes the model, steps it
  once per ``next()`` and terminates it exactly once on ``close()``.

Block states stay inside the native object in this mode and are not
generated.
"""

from __future__ import annotations

from simbind.codegen.common import (
    LOADER,
    PROLOGUE,
    Emitter,
    GenerationOptions,
    make_template,
    render_record,
)
from simbind.errors import GenerationError
from simbind.fields import FieldList, ModelBinding
from simbind.naming import NativeSymbols, attribute_name, check_collisions, variant_name
from simbind.runtime import ViewSet

_MODULE_TEMPLATE = make_template(
    PROLOGUE
    + '''
import ctypes
import enum
import weakref
from pathlib import Path

from simbind.runtime import ControllerClosedError, FieldView, GlobalStorage, ViewSet

MODEL = "{{ model }}"
LIBRARY = {{ library }}


{{ inputs_record }}


{{ outputs_record }}


class InputField(enum.Enum):
    """External inputs of {{ model }}, in declaration order."""
{% if inputs %}

{% endif %}
{% for v in inputs %}
    {{ v.variant }} = "{{ v.attr }}"
{% endfor %}


class OutputField(enum.Enum):
    """External outputs of {{ model }}, in declaration order."""
{% if outputs %}

{% endif %}
{% for v in outputs %}
    {{ v.variant }} = "{{ v.attr }}"
{% endfor %}


class Input(FieldView):
    """Indexed view over one external input."""

    fields = InputField


class Output(FieldView):
    """Indexed view over one external output."""

    fields = OutputField


STORAGE = GlobalStorage(MODEL)


def _bind(lib):
    for name in ("{{ symbols.initialize }}", "{{ symbols.step }}", "{{ symbols.terminate }}"):
        fn = getattr(lib, name)
        fn.argtypes = []
        fn.restype = None


'''
    + LOADER
    + '''

def _global(lib, record_type, symbol):
    """Return the native global *symbol* as a *record_type* instance."""
    return record_type.in_dll(lib, symbol)


def _terminate(lib, storage):
    try:
        lib.{{ symbols.terminate }}()
    finally:
        storage.release()


class {{ model }}:
    """Controller over the {{ model }} global storage.

    Only one controller may be live at a time.  ``close()``, leaving a
    ``with`` block, garbage collection or interpreter exit terminates the
    model exactly once.  Iterating steps the model forever: every ``next()``
    runs one step and yields ``None``.
    """

    def __init__(self, lib=None):
        if lib is None:
            lib = load_library()
        else:
            _bind(lib)
        STORAGE.acquire()
        try:
            u = _global(lib, {{ symbols.inputs_type }}, "{{ symbols.inputs_global }}")
            y = _global(lib, {{ symbols.outputs_type }}, "{{ symbols.outputs_global }}")
            self.inputs = ViewSet(Input.bind(member, u) for member in InputField)
            self.outputs = ViewSet(Output.bind(member, y) for member in OutputField)
            lib.{{ symbols.initialize }}()
        except BaseException:
            STORAGE.release()
            raise
        self._lib = lib
        self._finalizer = weakref.finalize(self, _terminate, lib, STORAGE)

    @classmethod
    def new(cls, lib=None):
        """Bind the global storage and initialize the model."""
        return cls(lib)

    @property
    def closed(self):
        return not self._finalizer.alive

    def close(self):
        """Terminate the model and release the storage; later calls do nothing."""
        self._finalizer()

    def step(self):
        """Advance the model by one fixed step."""
        if self.closed:
            raise ControllerClosedError(f"{MODEL} controller is closed")
        self._lib.{{ symbols.step }}()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __iter__(self):
        return self

    def __next__(self):
        self.step()
{% if alias %}


{{ alias }} = {{ model }}
{% endif %}
'''
)


def _variants(fields: FieldList) -> list[dict[str, str]]:
    attrs = check_collisions(fields, attribute_name)
    variants = check_collisions(fields, variant_name)
    return [{"variant": variants[f.name], "attr": attrs[f.name]} for f in fields]


class GlobalStateEmitter(Emitter):
    """Generate enumeration-tagged views plus a stepping controller."""

    mode = "global"
    description = "controller over global storage; enum views, iteration, terminate()"

    def emitted_sections(self, binding: ModelBinding) -> list[FieldList]:
        return [binding.inputs, binding.outputs]

    def check(self, binding: ModelBinding, options: GenerationOptions) -> None:
        super().check(binding, options)
        for fields in self.emitted_sections(binding):
            check_collisions(fields, variant_name)
            for name, attr in check_collisions(fields, attribute_name).items():
                if ViewSet.reserved(attr):
                    raise GenerationError(
                        f"field {name!r} is hidden by the view set attribute {attr!r}"
                    )

    def emit(self, binding: ModelBinding, options: GenerationOptions | None = None) -> str:
        options = options or GenerationOptions()
        self.check(binding, options)
        symbols = NativeSymbols.for_model(binding.model)
        return _MODULE_TEMPLATE.render(
            **self.context(binding, options),
            inputs_record=render_record(
                symbols.inputs_type, "External inputs.", binding.inputs, zero_init=False
            ),
            outputs_record=render_record(
                symbols.outputs_type, "External outputs.", binding.outputs, zero_init=False
            ),
            inputs=_variants(binding.inputs),
            outputs=_variants(binding.outputs),
        )
