"""Tests for the soft PLC controller."""

import logging

import pytest
from pydantic import ValidationError

from ilplc.simulate import RunState, SoftPLC


def _plc(**kwargs):
    kwargs.setdefault("inputs", 8)
    kwargs.setdefault("outputs", 8)
    kwargs.setdefault("flags", 8)
    # Long cycle so scheduled scans do not interfere with assertions
    kwargs.setdefault("cycle_time_ms", 1000)
    return SoftPLC(**kwargs)


@pytest.fixture
def plc():
    controller = _plc()
    yield controller
    if controller.state != RunState.STOPPED:
        controller.stop()


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_defaults(self):
        plc = SoftPLC()
        assert len(plc.get_inputs()) == 64
        assert len(plc.get_outputs()) == 64
        assert len(plc.get_flags()) == 64
        assert plc.cycle_time_ms == 10
        assert plc.state == RunState.STOPPED
        assert plc.runtime_counter == 0
        assert plc.data_available is False

    def test_sizes_clamped(self):
        plc = SoftPLC(inputs=500, outputs=257, flags=3)
        assert len(plc.get_inputs()) == 256
        assert len(plc.get_outputs()) == 256
        assert len(plc.get_flags()) == 3

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            SoftPLC(inputs=-1)

    def test_repr(self):
        assert repr(_plc()) == "SoftPLC(inputs=8, outputs=8, flags=8, state=STOPPED)"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

class TestLoadCode:
    def test_success(self, plc):
        assert plc.load_code("U E1\n= A1") is True
        assert len(plc.program) == 1
        assert plc.source == "U E1\n= A1"

    def test_failure_reports_through_callback(self, plc):
        messages = []
        assert plc.load_code("U E1 FOO\n= A1", messages.append) is False
        assert len(messages) == 1
        assert "FOO" in messages[0]

    def test_callback_once_per_failing_network(self, plc):
        messages = []
        plc.load_code(["U ( E1\n= A1", "U E1\n= A1", "= A2"], messages.append)
        assert len(messages) == 2
        assert "network 1" in messages[0]
        assert "network 3" in messages[1]

    def test_default_reporter_logs(self, plc, caplog):
        with caplog.at_level(logging.ERROR, logger="ilplc.simulate._context"):
            assert plc.load_code("U E1 FOO") is False
        assert any("FOO" in r.getMessage() for r in caplog.records)

    def test_non_callable_callback_falls_back(self, plc, caplog):
        with caplog.at_level(logging.ERROR, logger="ilplc.simulate._context"):
            assert plc.load_code("= A1", "not callable") is False
        assert any("before =" in r.getMessage() for r in caplog.records)

    def test_failure_keeps_previous_program(self, plc):
        plc.load_code("U E1\n= A1")
        previous = plc.program
        assert plc.load_code("U ( E1\n= A2", lambda _m: None) is False
        assert plc.program is previous
        plc.set_inputs([1])
        plc.scan()
        assert plc.get_outputs()[0] is True

    def test_failure_is_all_or_nothing(self, plc):
        plc.load_code("U E1\n= A1")
        plc.load_code(["U E2\n= A2", "U E1 FOO\n= A3"], lambda _m: None)
        assert [s.target.index for s in plc.program.statements()] == [0]

    def test_operand_beyond_bank_fails(self, plc):
        messages = []
        assert plc.load_code("U E9\n= A1", messages.append) is False
        assert "has 8 registers" in messages[0]

    def test_load_marks_outputs_stale(self, plc):
        plc.load_code("U E1\n= A1")
        plc.scan()
        assert plc.data_available is True
        plc.load_code("U E2\n= A1")
        assert plc.data_available is False

    def test_load_program_rejects_out_of_range(self, plc):
        from ilplc.il import compile_program

        program = compile_program("U E20\n= A1")
        with pytest.raises(ValueError, match="E20"):
            plc.load_program(program)


# ---------------------------------------------------------------------------
# Registers and freshness
# ---------------------------------------------------------------------------

class TestRegisters:
    def test_set_inputs(self, plc):
        plc.set_inputs([1, 0, 1])
        assert plc.get_inputs() == [True, False, True] + [False] * 5

    def test_set_flags(self, plc):
        plc.set_flags([0, 1])
        assert plc.get_flags()[:2] == [False, True]

    def test_snapshots_are_copies(self, plc):
        plc.get_inputs()[0] = True
        assert plc.get_inputs()[0] is False

    def test_scan_marks_fresh(self, plc):
        plc.load_code("U E1\n= A1")
        plc.scan()
        assert plc.data_available is True
        assert plc.runtime_counter == 1

    def test_set_inputs_marks_stale(self, plc):
        plc.scan()
        plc.set_inputs([1])
        assert plc.data_available is False

    def test_set_flags_marks_stale(self, plc):
        plc.scan()
        plc.set_flags([1])
        assert plc.data_available is False

    def test_no_catch_up_while_stopped(self, plc):
        plc.load_code("U E1\n= A1")
        plc.set_inputs([1])
        assert plc.get_outputs()[0] is False
        assert plc.runtime_counter == 0

    def test_catch_up_scan_while_running(self, plc):
        plc.load_code("U E1\n= A1")
        plc.start()
        plc.set_inputs([1])
        assert plc.get_outputs()[0] is True
        assert plc.data_available is True
        assert plc.runtime_counter >= 1

    def test_no_catch_up_when_fresh(self, plc):
        plc.load_code("U E1\n= A1")
        plc.start()
        plc.set_inputs([1])
        plc.get_outputs()
        counter = plc.runtime_counter
        plc.get_outputs()
        # Only a scheduled scan can have run in between
        assert plc.runtime_counter <= counter + 1

    def test_no_catch_up_while_paused(self, plc):
        plc.load_code("U E1\n= A1")
        plc.start()
        plc.pause()
        counter = plc.runtime_counter
        plc.set_inputs([1])
        plc.get_outputs()
        assert plc.runtime_counter == counter


# ---------------------------------------------------------------------------
# Scan / tick
# ---------------------------------------------------------------------------

class TestScan:
    def test_scan_n(self, plc):
        plc.scan(n=5)
        assert plc.runtime_counter == 5

    def test_tick_uses_cycle_time(self):
        plc = _plc(cycle_time_ms=10)
        plc.tick(ms=35)
        assert plc.runtime_counter == 4

    def test_tick_seconds(self):
        plc = _plc(cycle_time_ms=100)
        plc.tick(seconds=1)
        assert plc.runtime_counter == 10

    def test_tick_zero(self, plc):
        plc.tick()
        assert plc.runtime_counter == 0

    def test_scan_without_program(self, plc):
        plc.set_inputs([1])
        plc.scan()
        assert plc.get_outputs() == [False] * 8


# ---------------------------------------------------------------------------
# Cycle time
# ---------------------------------------------------------------------------

class TestCycleTime:
    @pytest.mark.parametrize("delay", [10, 250, 1000])
    def test_accepts_range(self, plc, delay):
        assert plc.set_cycle_time(delay) is True
        assert plc.cycle_time_ms == delay

    @pytest.mark.parametrize("delay", [0, 9, 1001, -5])
    def test_rejects_out_of_range(self, plc, delay):
        assert plc.set_cycle_time(delay) is False
        assert plc.cycle_time_ms == 1000

    def test_rejects_non_number(self, plc):
        assert plc.set_cycle_time("fast") is False

    def test_constructor_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            SoftPLC(cycle_time_ms=5)


# ---------------------------------------------------------------------------
# Run-state transitions
# ---------------------------------------------------------------------------

class TestRunState:
    def test_start(self, plc):
        assert plc.start() is True
        assert plc.state == RunState.RUNNING

    def test_start_twice(self, plc):
        plc.start()
        assert plc.start() is False
        assert plc.state == RunState.RUNNING

    def test_stop_when_stopped(self, plc):
        assert plc.stop() is False

    def test_stop_clears_everything(self, plc):
        plc.load_code("U E1\n= A1\nU E1\nS M1")
        plc.set_inputs([1])
        plc.start()
        plc.scan(3)
        assert plc.stop() is True
        assert plc.state == RunState.STOPPED
        assert plc.runtime_counter == 0
        assert plc.get_inputs() == [False] * 8
        assert plc.get_outputs() == [False] * 8
        assert plc.get_flags() == [False] * 8

    def test_stop_from_paused(self, plc):
        plc.set_flags([1])
        plc.start()
        plc.pause()
        assert plc.stop() is True
        assert plc.get_flags()[0] is False

    def test_pause_keeps_registers(self, plc):
        plc.load_code("U E1\n= A1")
        plc.set_inputs([1])
        plc.start()
        plc.scan()
        assert plc.pause() is True
        assert plc.state == RunState.PAUSED
        assert plc.get_inputs()[0] is True
        assert plc.get_outputs()[0] is True
        assert plc.runtime_counter >= 1

    def test_pause_twice(self, plc):
        plc.start()
        plc.pause()
        assert plc.pause() is False
        assert plc.state == RunState.PAUSED

    def test_pause_when_stopped(self, plc):
        assert plc.pause() is False
        assert plc.state == RunState.STOPPED

    def test_resume_keeps_registers(self, plc):
        plc.load_code("U E1\nS M1")
        plc.set_inputs([1])
        plc.start()
        plc.scan()
        plc.pause()
        counter = plc.runtime_counter
        assert plc.start() is True
        assert plc.state == RunState.RUNNING
        assert plc.get_flags()[0] is True
        assert plc.runtime_counter >= counter

    def test_refused_transition_logs_warning(self, plc, caplog):
        with caplog.at_level(logging.WARNING, logger="ilplc.simulate._context"):
            plc.stop()
        assert any("already stopped" in r.getMessage() for r in caplog.records)

    def test_state_values(self):
        assert RunState.STOPPED == 0
        assert RunState.RUNNING == 1
        assert RunState.PAUSED == 2

    def test_context_manager_stops(self):
        with _plc() as plc:
            plc.start()
            assert plc.state == RunState.RUNNING
        assert plc.state == RunState.STOPPED
