"""ilplc: Instruction List compiler and scan-cycle soft PLC."""

from ilplc.il import CompileError, NetworkCompileFailed, compile_program
from ilplc.simulate import RunState, SimulationError, SoftPLC, simulate

__version__ = "0.1.0"

__all__ = [
    "CompileError",
    "NetworkCompileFailed",
    "RunState",
    "SimulationError",
    "SoftPLC",
    "compile_program",
    "simulate",
]
