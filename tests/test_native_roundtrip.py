"""End-to-end: compile a small C model and drive it through generated bindings."""

import ctypes
import gc
import importlib.util
import itertools
import shutil
import subprocess
import sys
import types
from pathlib import Path

import pytest
from conftest import DEMO_HEADER, load_module

from simbind.codegen import GenerationOptions, generate
from simbind.header_parser import parse_header

CC = shutil.which("cc") or shutil.which("gcc") or shutil.which("clang")

pytestmark = [
    pytest.mark.skipif(CC is None, reason="no C compiler on PATH"),
    pytest.mark.skipif(sys.platform == "win32", reason="builds a POSIX shared object"),
]

RECORDS_C = """\
typedef struct { double Integrator_DSTATE[3]; double UnitDelay_DSTATE; } DW_demo_T;
typedef struct { double position[3]; double gain; } ExtU_demo_T;
typedef struct { double torque; double state[3]; } ExtY_demo_T;
"""

# Reusable model: integrates position, counts steps, torque = gain * steps.
OWNED_C = RECORDS_C + """\
typedef struct tag_RTM_demo_T { DW_demo_T *dwork; } RT_MODEL_demo_T;

void demo_initialize(RT_MODEL_demo_T *const demo_M, ExtU_demo_T *demo_U, ExtY_demo_T *demo_Y)
{
  int i;
  DW_demo_T *dw = demo_M->dwork;
  (void)demo_U;
  for (i = 0; i < 3; i++) {
    dw->Integrator_DSTATE[i] = 0.0;
    demo_Y->state[i] = 0.0;
  }
  dw->UnitDelay_DSTATE = 0.0;
  demo_Y->torque = -1.0;
}

void demo_step(RT_MODEL_demo_T *const demo_M, ExtU_demo_T *demo_U, ExtY_demo_T *demo_Y)
{
  int i;
  DW_demo_T *dw = demo_M->dwork;
  dw->UnitDelay_DSTATE += 1.0;
  for (i = 0; i < 3; i++) {
    dw->Integrator_DSTATE[i] += demo_U->position[i];
    demo_Y->state[i] = dw->Integrator_DSTATE[i];
  }
  demo_Y->torque = demo_U->gain * dw->UnitDelay_DSTATE;
}
"""

# Same model with static I/O in process-wide globals.
GLOBAL_C = RECORDS_C + """\
ExtU_demo_T demo_U;
ExtY_demo_T demo_Y;
static DW_demo_T demo_DW;
int demo_initialize_count;
int demo_terminate_count;

void demo_initialize(void)
{
  int i;
  for (i = 0; i < 3; i++) {
    demo_DW.Integrator_DSTATE[i] = 0.0;
  }
  demo_DW.UnitDelay_DSTATE = 0.0;
  demo_initialize_count++;
}

void demo_step(void)
{
  int i;
  demo_DW.UnitDelay_DSTATE += 1.0;
  for (i = 0; i < 3; i++) {
    demo_DW.Integrator_DSTATE[i] += demo_U.position[i];
    demo_Y.state[i] = demo_DW.Integrator_DSTATE[i];
  }
  demo_Y.torque = demo_U.gain * demo_DW.UnitDelay_DSTATE;
}

void demo_terminate(void)
{
  demo_terminate_count++;
}
"""


def _build(directory: Path, name: str, code: str) -> Path:
    src = directory / f"{name}.c"
    src.write_text(code, encoding="utf-8")
    lib = directory / f"lib{name}.so"
    subprocess.run([CC, "-shared", "-fPIC", "-o", str(lib), str(src)], check=True)
    return lib


def _counter(lib: ctypes.CDLL, symbol: str) -> int:
    return ctypes.c_int.in_dll(lib, symbol).value


@pytest.fixture(scope="module")
def build_dir(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("native")


@pytest.fixture(scope="module")
def owned_lib(build_dir: Path) -> Path:
    return _build(build_dir, "demo_owned", OWNED_C)


@pytest.fixture(scope="module")
def global_lib(build_dir: Path) -> Path:
    return _build(build_dir, "demo_global", GLOBAL_C)


def _module(mode: str, library: Path | None = None) -> types.ModuleType:
    options = GenerationOptions(library=str(library) if library else None)
    return load_module(generate(parse_header(DEMO_HEADER).binding(), mode, options))


class TestOwnedNative:
    def test_step_through_native_code(self, owned_lib: Path) -> None:
        mod = _module("owned")
        model = mod.demo.new(mod.load_library(owned_lib))
        assert model.outputs.torque == -1.0
        model.inputs.position[:] = [1.0, 2.0, 3.0]
        model.inputs.gain = 0.5
        for _ in range(4):
            model.step()
        assert model.outputs.state[:] == [4.0, 8.0, 12.0]
        assert model.outputs.torque == 2.0

    def test_instances_do_not_share_state(self, owned_lib: Path) -> None:
        mod = _module("owned")
        lib = mod.load_library(owned_lib)
        first, second = mod.demo.new(lib), mod.demo.new(lib)
        first.inputs.gain = second.inputs.gain = 1.0
        for _ in range(3):
            first.step()
        second.step()
        assert first.outputs.torque == 3.0
        assert second.outputs.torque == 1.0

    def test_default_library(self, owned_lib: Path) -> None:
        mod = _module("owned", library=owned_lib)
        model = mod.demo.new()
        model.step()
        assert mod.load_library() is mod.load_library()

    def test_relative_library_beside_module(self, owned_lib: Path, tmp_path: Path) -> None:
        shutil.copy(owned_lib, tmp_path / "libdemo.so")
        path = tmp_path / "demo_bind.py"
        path.write_text(generate(parse_header(DEMO_HEADER).binding()), encoding="utf-8")
        spec = importlib.util.spec_from_file_location("demo_bind", path)
        assert spec is not None and spec.loader is not None
        mod = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(mod)
        model = mod.demo.new()
        model.inputs.gain = 2.0
        model.step()
        assert model.outputs.torque == 2.0


class TestGlobalNative:
    def test_views_and_iteration(self, global_lib: Path) -> None:
        mod = _module("global")
        lib = mod.load_library(global_lib)
        with mod.demo.new(lib) as ctrl:
            ctrl.inputs.position[0] = 1.0
            ctrl.inputs.position[1] = 0.0
            ctrl.inputs.position[2] = 3.0
            ctrl.inputs[mod.InputField.GAIN][0] = 2.0
            for _ in itertools.islice(ctrl, 3):
                pass
            assert ctrl.outputs.state.tolist() == [3.0, 0.0, 9.0]
            assert ctrl.outputs.torque[0] == 6.0
        assert ctypes.c_double.in_dll(lib, "demo_U").value == 1.0

    def test_terminate_exactly_once(self, global_lib: Path) -> None:
        mod = _module("global")
        lib = mod.load_library(global_lib)
        before = _counter(lib, "demo_terminate_count")
        ctrl = mod.demo.new(lib)
        ctrl.close()
        ctrl.close()
        del ctrl
        gc.collect()
        assert _counter(lib, "demo_terminate_count") == before + 1

    def test_terminate_on_collection(self, global_lib: Path) -> None:
        mod = _module("global")
        lib = mod.load_library(global_lib)
        before = _counter(lib, "demo_terminate_count")
        mod.demo.new(lib)
        gc.collect()
        assert _counter(lib, "demo_terminate_count") == before + 1
        assert not mod.STORAGE.live

    def test_initialize_resets_states(self, global_lib: Path) -> None:
        mod = _module("global")
        lib = mod.load_library(global_lib)
        for _ in range(2):
            with mod.demo.new(lib) as ctrl:
                ctrl.inputs.gain[0] = 1.0
                next(ctrl)
                assert ctrl.outputs.torque[0] == 1.0
