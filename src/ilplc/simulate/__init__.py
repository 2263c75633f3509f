"""ilplc simulator: scan-cycle execution of compiled IL programs.

Entry point::

    from ilplc.simulate import simulate

    plc = simulate("U E1\n= A1")
    plc.set_inputs([1])
    plc.scan()
    assert plc.get_outputs()[0]
"""

from __future__ import annotations

from collections.abc import Sequence

from ilplc.il import compile_program
from ilplc.model.hardware import DEFAULT_REGISTERS, MIN_CYCLE_TIME_MS
from ilplc.model.program import Program

from ._context import RunState, SoftPLC
from ._executor import ScanEngine
from ._registers import RegisterFile, SimulationError


def simulate(
    target: str | Sequence[str] | Program,
    *,
    inputs: int = DEFAULT_REGISTERS,
    outputs: int = DEFAULT_REGISTERS,
    flags: int = DEFAULT_REGISTERS,
    cycle_time_ms: int = MIN_CYCLE_TIME_MS,
) -> SoftPLC:
    """Create a stopped controller with a program loaded.

    Parameters
    ----------
    target
        IL source (one network or a sequence of networks) or a compiled
        ``Program``.
    inputs, outputs, flags
        Bank sizes, clamped to 256.
    cycle_time_ms
        Interval between scheduled scans once started.

    Raises
    ------
    NetworkCompileFailed
        The IL source does not compile.
    """
    plc = SoftPLC(
        inputs=inputs, outputs=outputs, flags=flags, cycle_time_ms=cycle_time_ms,
    )
    if isinstance(target, Program):
        program = target
    else:
        program = compile_program(target, bank_sizes=plc.config.bank_sizes())
    plc.load_program(program)
    return plc


__all__ = [
    "RegisterFile",
    "RunState",
    "ScanEngine",
    "SimulationError",
    "SoftPLC",
    "simulate",
]
