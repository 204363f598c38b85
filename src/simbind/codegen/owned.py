"""Owned-state mode: each wrapper instance owns its inputs, outputs and states.

The generated wrapper passes the addresses of its own records to
``<model>_initialize`` / ``<model>_step`` together with a context record
whose ``dwork`` member points at the wrapper's state.  The context is built
fresh for every call and never stored, so instances are independent and any
number of them may coexist.
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
from simbind.fields import ModelBinding
from simbind.naming import NativeSymbols

_MODULE_TEMPLATE = make_template(
    PROLOGUE
    + '''
import ctypes
from pathlib import Path

MODEL = "{{ model }}"
LIBRARY = {{ library }}


{{ inputs_record }}


{{ outputs_record }}


{{ states_record }}


class {{ symbols.context_tag }}(ctypes.Structure):
    """Model context handed to the native routines."""

    _fields_ = [
        ("dwork", ctypes.POINTER({{ symbols.states_type }})),
    ]


{{ symbols.context_type }} = {{ symbols.context_tag }}

_ARGTYPES = [
    ctypes.POINTER({{ symbols.context_type }}),
    ctypes.POINTER({{ symbols.inputs_type }}),
    ctypes.POINTER({{ symbols.outputs_type }}),
]


def _bind(lib):
    for name in ("{{ symbols.initialize }}", "{{ symbols.step }}"):
        fn = getattr(lib, name)
        fn.argtypes = _ARGTYPES
        fn.restype = None


'''
    + LOADER
    + '''

class {{ model }}:
    """Wrapper owning one set of {{ model }} inputs, outputs and states.

    ``inputs`` and ``outputs`` are public; the block states are private to the
    wrapper and only reachable by the native code through the context.
    """

    def __init__(self, lib=None):
        if lib is None:
            lib = load_library()
        else:
            _bind(lib)
        self._lib = lib
        self.inputs = {{ symbols.inputs_type }}()
        self.outputs = {{ symbols.outputs_type }}()
        self._states = {{ symbols.states_type }}()
        self._lib.{{ symbols.initialize }}(
            ctypes.pointer(self._context()),
            ctypes.pointer(self.inputs),
            ctypes.pointer(self.outputs),
        )

    @classmethod
    def new(cls, lib=None):
        """Create a zeroed, initialized model instance."""
        return cls(lib)

    def _context(self):
        # Valid for the duration of one native call.
        return {{ symbols.context_type }}(dwork=ctypes.pointer(self._states))

    def step(self):
        """Advance the model by one fixed step."""
        self._lib.{{ symbols.step }}(
            ctypes.pointer(self._context()),
            ctypes.pointer(self.inputs),
            ctypes.pointer(self.outputs),
        )
{% if alias %}


{{ alias }} = {{ model }}
{% endif %}
'''
)


class OwnedStateEmitter(Emitter):
    """Generate an owned-state wrapper (one private state block per instance)."""

    mode = "owned"
    description = "wrapper owning its inputs, outputs and states; new()/step()"

    def emit(self, binding: ModelBinding, options: GenerationOptions | None = None) -> str:
        options = options or GenerationOptions()
        self.check(binding, options)
        symbols = NativeSymbols.for_model(binding.model)
        return _MODULE_TEMPLATE.render(
            **self.context(binding, options),
            inputs_record=render_record(
                symbols.inputs_type, "External inputs.", binding.inputs, zero_init=True
            ),
            outputs_record=render_record(
                symbols.outputs_type, "External outputs.", binding.outputs, zero_init=True
            ),
            states_record=render_record(
                symbols.states_type, "Block states.", binding.states, zero_init=True
            ),
        )
