"""Shared fixtures: sample model headers and a loader for generated modules."""

import types
from pathlib import Path

import pytest

# A header in the shape the code generator writes for a reusable model.
DEMO_HEADER = """\
/*
 * File: demo.h
 *
 * Code generated for Simulink model 'demo'.
 */

#ifndef RTW_HEADER_demo_h_
#define RTW_HEADER_demo_h_
#include "rtwtypes.h"
#include "demo_types.h"

/* Block states (default storage) for system '<Root>' */
typedef struct {
  real_T Integrator_DSTATE[3];         /* '<S1>/Integrator' */
  real_T UnitDelay_DSTATE;             /* '<S1>/Unit Delay' */
} DW_demo_T;

/* External inputs (root inport signals with default storage) */
typedef struct {
  real_T position[3];                  /* '<Root>/position' */
  real_T gain;                         /* '<Root>/gain' */
} ExtU_demo_T;

/* External outputs (root outports fed by signals with default storage) */
typedef struct {
  real_T torque;                       /* '<Root>/torque' */
  real_T state[3];                     /* '<Root>/state' */
} ExtY_demo_T;

/* Real-time Model Data Structure */
struct tag_RTM_demo_T {
  DW_demo_T *dwork;
};

/* External inputs (root inport signals with default storage) */
extern ExtU_demo_T demo_U;

/* External outputs (root outports fed by signals with default storage) */
extern ExtY_demo_T demo_Y;

/* Model entry point functions */
extern void demo_initialize(void);
extern void demo_step(void);
extern void demo_terminate(void);

#endif                                 /* RTW_HEADER_demo_h_ */
"""


def section(marker: str, tag: str, *body: str) -> str:
    """Build one marker + typedef struct block."""
    lines = [f"/* {marker} (default storage) */", "typedef struct {"]
    lines += [f"  {line}" for line in body]
    lines.append(f"}} {tag}_demo_T;")
    return "\n".join(lines) + "\n"


def load_module(source: str, name: str = "generated_bindings") -> types.ModuleType:
    """Execute generated *source* as a fresh module object."""
    module = types.ModuleType(name)
    exec(compile(source, f"<{name}>", "exec"), module.__dict__)
    return module


@pytest.fixture
def demo_header() -> str:
    return DEMO_HEADER


@pytest.fixture
def demo_header_file(tmp_path: Path) -> Path:
    sys_dir = tmp_path / "sys"
    sys_dir.mkdir()
    path = sys_dir / "demo.h"
    path.write_text(DEMO_HEADER, encoding="utf-8")
    for companion in ("demo_types.h", "demo_private.h", "rtwtypes.h", "rt_defines.h"):
        (sys_dir / companion).write_text("/* companion */\n", encoding="utf-8")
    return path
