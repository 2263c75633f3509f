"""Register storage for the simulator.

Provides the three bit banks and the runtime error type used for
invariant violations during a scan.
"""

from __future__ import annotations

from collections.abc import Iterable

from ilplc.model.expressions import OperandRef
from ilplc.model.hardware import ControllerConfig, RegisterBank


class SimulationError(Exception):
    """Runtime invariant violation during simulation."""


class RegisterFile:
    """Fixed-size boolean banks for inputs, outputs and flags.

    Sizes are taken from a validated :class:`ControllerConfig`, so they
    are already clamped to the bank maximum.
    """

    def __init__(self, config: ControllerConfig) -> None:
        self._banks: dict[RegisterBank, list[bool]] = {
            bank: [False] * size for bank, size in config.bank_sizes().items()
        }

    def size(self, bank: RegisterBank) -> int:
        return len(self._banks[bank])

    def sizes(self) -> dict[RegisterBank, int]:
        return {bank: len(values) for bank, values in self._banks.items()}

    def read(self, ref: OperandRef) -> bool:
        return self._banks[ref.bank][self._checked_index(ref)]

    def write(self, ref: OperandRef, value: bool) -> None:
        self._banks[ref.bank][self._checked_index(ref)] = value

    def load(self, bank: RegisterBank, values: Iterable[object]) -> None:
        """Overwrite a bank positionally.

        Positions beyond *values* become False; surplus values are ignored.
        """
        registers = self._banks[bank]
        supplied = list(values)
        for i in range(len(registers)):
            registers[i] = bool(supplied[i]) if i < len(supplied) else False

    def snapshot(self, bank: RegisterBank) -> list[bool]:
        return list(self._banks[bank])

    def clear(self) -> None:
        for registers in self._banks.values():
            registers[:] = [False] * len(registers)

    def _checked_index(self, ref: OperandRef) -> int:
        if ref.index >= len(self._banks[ref.bank]):
            raise SimulationError(
                f"Register {ref} outside bank {ref.bank.value} "
                f"of size {len(self._banks[ref.bank])}"
            )
        return ref.index
