"""simbind: ctypes bindings for generated fixed-step model code.

Parses the C header a model code generator writes (external inputs, external
outputs, block states) and generates a Python module wrapping the compiled
``initialize`` / ``step`` / ``terminate`` routines with layout-matching
``ctypes`` records.
"""

__version__ = "0.1.0"
