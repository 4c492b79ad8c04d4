"""Tests for fault reporting."""

import pytest
from chip8core import (
    step, Chip8Error, ExecutionFault, InvalidOpcode, StackOverflow, StackUnderflow
)
from chip8core.faults import raise_for_fault
from conftest import loaded_state


def test_fault_message_names_location_and_instruction():
    error = InvalidOpcode(0x2A4, 0x8128)
    assert isinstance(error, ExecutionFault)
    assert isinstance(error, Chip8Error)
    assert "0x2A4" in str(error)
    assert "0x8128" in str(error)
    assert "invalid opcode" in str(error)


def test_raise_for_fault_is_silent_when_running(fresh_state):
    raise_for_fault(fresh_state)


def test_invalid_opcode_leaves_machine_untouched():
    state = loaded_state(0x6105, 0x8128)
    state = step(state)

    faulted = step(state)

    assert faulted.fault == 1
    assert faulted.pc == 0x202
    assert faulted.fault_pc == 0x202
    assert faulted.fault_instruction == 0x8128
    assert faulted.V[1] == 5

    with pytest.raises(InvalidOpcode) as excinfo:
        raise_for_fault(faulted)
    assert excinfo.value.pc == 0x202
    assert excinfo.value.instruction == 0x8128


def test_step_on_faulted_state_is_a_no_op():
    faulted = step(loaded_state(0x0123))
    again = step(faulted)
    assert again.pc == faulted.pc
    assert again.fault == faulted.fault
    assert again.fault_pc == faulted.fault_pc


def test_return_with_empty_stack():
    state = step(loaded_state(0x00EE))

    with pytest.raises(StackUnderflow) as excinfo:
        raise_for_fault(state)

    assert excinfo.value.pc == 0x200
    assert excinfo.value.instruction == 0x00EE
    assert state.stack.pointer == 0


def test_sixteen_calls_fit_seventeenth_overflows():
    state = loaded_state(0x2200)
    for _ in range(16):
        state = step(state)
    assert state.fault == 0
    assert state.stack.pointer == 16

    state = step(state)
    with pytest.raises(StackOverflow):
        raise_for_fault(state)
    assert state.stack.pointer == 16


@pytest.mark.parametrize("word", [0x0000, 0x0123, 0x00E1, 0x00FF])
def test_unknown_system_instructions(word):
    state = step(loaded_state(word))
    with pytest.raises(InvalidOpcode):
        raise_for_fault(state)
