"""Register banks and controller configuration.

The controller models three flat banks of bits: inputs (``E``),
outputs (``A``) and flags (``M``).  Each bank has a fixed size chosen at
construction time and capped at :data:`MAX_REGISTERS`.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, model_validator

MAX_REGISTERS = 256
DEFAULT_REGISTERS = 64

MIN_CYCLE_TIME_MS = 10
MAX_CYCLE_TIME_MS = 1000


class RegisterBank(str, Enum):
    """Register bank, valued by its IL address letter."""

    INPUT = "E"
    OUTPUT = "A"
    FLAG = "M"


class ControllerConfig(BaseModel):
    """Bank sizes and scan cycle time of a controller instance."""

    inputs: int = DEFAULT_REGISTERS
    outputs: int = DEFAULT_REGISTERS
    flags: int = DEFAULT_REGISTERS
    cycle_time_ms: int = MIN_CYCLE_TIME_MS

    @model_validator(mode="after")
    def _clamp_and_check(self):
        for name in ("inputs", "outputs", "flags"):
            size = getattr(self, name)
            if size < 0:
                raise ValueError(f"'{name}' must be >= 0, got {size}")
            if size > MAX_REGISTERS:
                setattr(self, name, MAX_REGISTERS)
        if not MIN_CYCLE_TIME_MS <= self.cycle_time_ms <= MAX_CYCLE_TIME_MS:
            raise ValueError(
                f"cycle_time_ms must be between {MIN_CYCLE_TIME_MS} and "
                f"{MAX_CYCLE_TIME_MS} ms, got {self.cycle_time_ms}"
            )
        return self

    def bank_sizes(self) -> dict[RegisterBank, int]:
        return {
            RegisterBank.INPUT: self.inputs,
            RegisterBank.OUTPUT: self.outputs,
            RegisterBank.FLAG: self.flags,
        }
