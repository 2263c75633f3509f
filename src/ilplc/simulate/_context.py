"""Soft PLC controller: the user-facing object for running IL programs.

Owns the register banks, the compiled program and the periodic scan
timer, and implements the Stopped/Running/Paused run-state machine.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from enum import Enum

from pydantic import ValidationError

from ilplc.il import NetworkCompileFailed, compile_program
from ilplc.model.expressions import Expression, OperandRef
from ilplc.model.hardware import (
    DEFAULT_REGISTERS,
    MAX_CYCLE_TIME_MS,
    MIN_CYCLE_TIME_MS,
    ControllerConfig,
    RegisterBank,
)
from ilplc.model.program import Program

from ._executor import ScanEngine
from ._registers import RegisterFile
from ._timer import CycleTimer

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[str], None]


class RunState(int, Enum):
    STOPPED = 0
    RUNNING = 1
    PAUSED = 2


def _log_error(message: str) -> None:
    logger.error(message)


class SoftPLC:
    """A scan-cycle controller for IL bit-logic programs.

    Provides program loading, register access, the ``start``/``stop``/
    ``pause`` run-state transitions and synchronous ``scan()``/``tick()``
    stepping.

    Parameters
    ----------
    inputs, outputs, flags : int
        Bank sizes; values above 256 are clamped to 256.
    cycle_time_ms : int
        Interval between scheduled scans, 10 to 1000 ms.

    Every scan and every register access runs under one re-entrant lock,
    so scheduled scans never overlap each other or an external write.
    """

    def __init__(
        self,
        inputs: int = DEFAULT_REGISTERS,
        outputs: int = DEFAULT_REGISTERS,
        flags: int = DEFAULT_REGISTERS,
        cycle_time_ms: int = MIN_CYCLE_TIME_MS,
    ) -> None:
        self._config = ControllerConfig(
            inputs=inputs, outputs=outputs, flags=flags, cycle_time_ms=cycle_time_ms,
        )
        self._registers = RegisterFile(self._config)
        self._program = Program()
        self._source: str | Sequence[str] | None = None
        self._state = RunState.STOPPED
        self._runtime_counter = 0
        self._data_ready = False
        self._timer: CycleTimer | None = None
        self._lock = threading.RLock()

    # -----------------------------------------------------------------------
    # Program loading
    # -----------------------------------------------------------------------

    def load_code(
        self,
        source: str | Sequence[str],
        error_callback: ErrorCallback | None = None,
    ) -> bool:
        """Compile IL text and install it as the running program.

        *source* is one network or a sequence of networks.  On failure
        every error message is passed to *error_callback* (default: the
        module logger) and the previously loaded program stays in place.
        """
        report = error_callback if callable(error_callback) else _log_error
        self._source = source
        try:
            program = compile_program(source, bank_sizes=self._registers.sizes())
        except NetworkCompileFailed as failed:
            for err in failed.errors:
                report(str(err))
            logger.warning("load_code: invalid IL code, %s", failed.message)
            return False

        self.load_program(program)
        return True

    def load_program(self, program: Program) -> None:
        """Install an already compiled program.

        Raises ``ValueError`` if the program addresses registers outside
        this controller's banks.
        """
        sizes = self._registers.sizes()
        for ref in _program_refs(program):
            if ref.index >= sizes[ref.bank]:
                raise ValueError(
                    f"Register {ref} outside bank {ref.bank.value} "
                    f"of size {sizes[ref.bank]}"
                )
        with self._lock:
            self._program = program
            self._data_ready = False
        logger.debug("loaded program with %d statement(s)", len(program))

    @property
    def program(self) -> Program:
        return self._program

    @property
    def source(self) -> str | Sequence[str] | None:
        """IL source passed to the last :meth:`load_code` call."""
        return self._source

    # -----------------------------------------------------------------------
    # Configuration
    # -----------------------------------------------------------------------

    @property
    def config(self) -> ControllerConfig:
        return self._config

    @property
    def cycle_time_ms(self) -> int:
        return self._config.cycle_time_ms

    def set_cycle_time(self, delay_ms: int) -> bool:
        """Change the scan interval; applies from the next scheduled tick."""
        try:
            config = ControllerConfig.model_validate(
                {**self._config.model_dump(), "cycle_time_ms": delay_ms}
            )
        except ValidationError:
            logger.warning(
                "set_cycle_time: cycle time must be between %d and %d ms, got %r",
                MIN_CYCLE_TIME_MS, MAX_CYCLE_TIME_MS, delay_ms,
            )
            return False
        with self._lock:
            self._config = config
        logger.debug("cycle time set to %d ms", config.cycle_time_ms)
        return True

    # -----------------------------------------------------------------------
    # Registers
    # -----------------------------------------------------------------------

    def set_inputs(self, values: Iterable[object]) -> None:
        with self._lock:
            self._registers.load(RegisterBank.INPUT, values)
            self._data_ready = False

    def set_flags(self, values: Iterable[object]) -> None:
        with self._lock:
            self._registers.load(RegisterBank.FLAG, values)
            self._data_ready = False

    def get_inputs(self) -> list[bool]:
        with self._lock:
            return self._registers.snapshot(RegisterBank.INPUT)

    def get_flags(self) -> list[bool]:
        with self._lock:
            return self._registers.snapshot(RegisterBank.FLAG)

    def get_outputs(self) -> list[bool]:
        """Snapshot the outputs.

        While running with stale outputs (inputs or flags changed since
        the last scan), one catch-up scan runs first.
        """
        with self._lock:
            if not self._data_ready and self._state == RunState.RUNNING:
                self._run_scan()
            return self._registers.snapshot(RegisterBank.OUTPUT)

    # -----------------------------------------------------------------------
    # Observers
    # -----------------------------------------------------------------------

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def runtime_counter(self) -> int:
        """Number of scans since the last stop."""
        return self._runtime_counter

    @property
    def data_available(self) -> bool:
        """True if the outputs reflect the current inputs and flags."""
        return self._data_ready

    # -----------------------------------------------------------------------
    # Scan / tick
    # -----------------------------------------------------------------------

    def scan(self, n: int = 1) -> None:
        """Execute *n* scan cycles synchronously, regardless of run state."""
        with self._lock:
            for _ in range(n):
                self._run_scan()

    def tick(self, seconds: float = 0, ms: float = 0) -> None:
        """Run enough scans to cover the given time at the current cycle time.

        Computes ``ceil(total_ms / cycle_time_ms)`` and calls ``scan(n=...)``.
        """
        total_ms = seconds * 1000 + ms
        if total_ms <= 0:
            return
        self.scan(n=math.ceil(total_ms / self._config.cycle_time_ms))

    def _run_scan(self) -> None:
        ScanEngine(self._program, self._registers).execute()
        self._runtime_counter += 1
        self._data_ready = True

    def _on_tick(self) -> None:
        with self._lock:
            # A tick may wake after stop/pause took the lock
            if self._state != RunState.RUNNING:
                return
            self._run_scan()

    # -----------------------------------------------------------------------
    # Run-state transitions
    # -----------------------------------------------------------------------

    def start(self) -> bool:
        """Start from Stopped, or resume from Paused.

        Returns False (no-op) if already running.
        """
        with self._lock:
            if self._state == RunState.RUNNING:
                logger.warning("start: controller already running")
                return False
            previous = self._state
            self._state = RunState.RUNNING
            self._timer = CycleTimer(self._on_tick, lambda: self._config.cycle_time_ms)
            self._timer.start()
        logger.debug("%s -> RUNNING", previous.name)
        return True

    def stop(self) -> bool:
        """Halt scanning, zero all registers and reset the scan counter.

        Returns False (no-op) if already stopped.
        """
        with self._lock:
            if self._state == RunState.STOPPED:
                logger.warning("stop: controller already stopped")
                return False
            previous = self._state
            self._state = RunState.STOPPED
            self._registers.clear()
            counter, self._runtime_counter = self._runtime_counter, 0
            self._data_ready = False
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        logger.debug("%s -> STOPPED at counter %d", previous.name, counter)
        return True

    def pause(self) -> bool:
        """Halt scanning but keep register contents; resume with :meth:`start`.

        Returns False (no-op) unless running.
        """
        with self._lock:
            if self._state != RunState.RUNNING:
                logger.warning("pause: controller is %s", self._state.name)
                return False
            self._state = RunState.PAUSED
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
        logger.debug("RUNNING -> PAUSED at counter %d", self._runtime_counter)
        return True

    # -----------------------------------------------------------------------
    # Context manager
    # -----------------------------------------------------------------------

    def __enter__(self) -> SoftPLC:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self._state != RunState.STOPPED:
            self.stop()

    def __repr__(self) -> str:
        sizes = self._registers.sizes()
        return (
            f"{type(self).__name__}(inputs={sizes[RegisterBank.INPUT]}, "
            f"outputs={sizes[RegisterBank.OUTPUT]}, flags={sizes[RegisterBank.FLAG]}, "
            f"state={self._state.name})"
        )


def _program_refs(program: Program) -> Iterator[OperandRef]:
    """Yield every register a program reads or writes."""
    for stmt in program.statements():
        yield stmt.target
        if stmt.condition is not None:
            yield from _expression_refs(stmt.condition)


def _expression_refs(expr: Expression) -> Iterator[OperandRef]:
    if expr.kind == "operand":
        yield expr.ref
    elif expr.kind == "binary":
        yield from _expression_refs(expr.left)
        yield from _expression_refs(expr.right)
    elif expr.kind == "unary":
        yield from _expression_refs(expr.operand)
