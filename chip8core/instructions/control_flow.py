"""CHIP-8 control flow instructions."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction
from chip8core.constants import ADDRESS_MASK, FAULT_STACK_OVERFLOW
from chip8core.faults import invalid_opcode, record_fault
from chip8core.stack import is_full, push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN."""
    def do_call(state):
        state = state.replace(stack=push(state.stack, state.pc))
        return execute_jump(state, instruction)

    return jax.lax.cond(
        is_full(state.stack),
        lambda s: record_fault(s, FAULT_STACK_OVERFLOW, instruction.raw),
        do_call,
        state
    )


def make_skip_instruction(condition_fn):
    """Factory for skip instructions."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        condition = condition_fn(state, instruction)
        return jax.lax.cond(
            condition,
            lambda s: s.replace(pc=(s.pc + 2).astype(jnp.uint16)),
            lambda s: s,
            state
        )
    return skip_instruction


def require_zero_nibble(execute_fn):
    """Wrap a 5XY0/9XY0 handler so any other low nibble faults."""
    def checked(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        return jax.lax.cond(
            instruction.n == 0,
            execute_fn,
            invalid_opcode,
            state, instruction
        )
    return checked


execute_skip_if_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] == inst.nn
)

execute_skip_if_not_equal_immediate = make_skip_instruction(
    lambda state, inst: state.V[inst.x] != inst.nn
)

execute_skip_if_equal_register = require_zero_nibble(make_skip_instruction(
    lambda state, inst: state.V[inst.x] == state.V[inst.y]
))

execute_skip_if_not_equal_register = require_zero_nibble(make_skip_instruction(
    lambda state, inst: state.V[inst.x] != state.V[inst.y]
))


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = (instruction.nnn + jnp.astype(state.V[0], jnp.uint16)) & ADDRESS_MASK
    return state.replace(pc=jnp.astype(jump_address, jnp.uint16))


def execute_skip_if_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """EX9E/EXA1 - Skip if key pressed/not pressed."""

    def skip_on_key(state, instruction):
        key_index = state.V[instruction.x] & 0xF
        key_pressed = state.keypad[key_index]
        is_not_instruction = (instruction.nn == 0xA1)
        condition = key_pressed ^ is_not_instruction

        return jax.lax.cond(
            condition,
            lambda state: state.replace(pc=(state.pc + 2).astype(jnp.uint16)),
            lambda state: state,
            state
        )

    return jax.lax.cond(
        (instruction.nn == 0x9E) | (instruction.nn == 0xA1),
        skip_on_key,
        invalid_opcode,
        state, instruction
    )
