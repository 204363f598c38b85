"""Binding generation: ``ModelBinding`` -> Python module source.

Two strategies share one interface (:class:`Emitter`):

- ``owned``: :class:`OwnedStateEmitter`, a wrapper that owns its records;
- ``global``: :class:`GlobalStateEmitter`, enumeration-tagged views over the
  model's global storage plus an iterating controller.

Generation is deterministic: the same binding and options always produce the
same text.
"""

from __future__ import annotations

from simbind.codegen.common import Emitter, GenerationOptions
from simbind.codegen.global_state import GlobalStateEmitter
from simbind.codegen.owned import OwnedStateEmitter
from simbind.fields import ModelBinding

EMITTERS: dict[str, type[Emitter]] = {
    OwnedStateEmitter.mode: OwnedStateEmitter,
    GlobalStateEmitter.mode: GlobalStateEmitter,
}

MODES: tuple[str, ...] = tuple(EMITTERS)
DEFAULT_MODE = OwnedStateEmitter.mode


def get_emitter(mode: str) -> Emitter:
    """Return the emitter registered for *mode*."""
    try:
        return EMITTERS[mode]()
    except KeyError:
        raise KeyError(f"Unknown generation mode {mode!r}. Available modes: {list(MODES)}") from None


def generate(
    binding: ModelBinding,
    mode: str = DEFAULT_MODE,
    options: GenerationOptions | None = None,
) -> str:
    """Generate the bindings module for *binding* in *mode*."""
    return get_emitter(mode).emit(binding, options)


__all__ = [
    "DEFAULT_MODE",
    "EMITTERS",
    "MODES",
    "Emitter",
    "GenerationOptions",
    "GlobalStateEmitter",
    "OwnedStateEmitter",
    "generate",
    "get_emitter",
]
