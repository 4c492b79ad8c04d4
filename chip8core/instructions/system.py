"""CHIP-8 system instructions (0x0xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction
from chip8core.constants import FAULT_STACK_UNDERFLOW
from chip8core.faults import invalid_opcode, record_fault
from chip8core.stack import is_empty, pop


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=jnp.zeros_like(state.display), redraw=jnp.array(True))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    def do_return(state):
        stack, address = pop(state.stack)
        return state.replace(stack=stack, pc=address)

    return jax.lax.cond(
        is_empty(state.stack),
        lambda s: record_fault(s, FAULT_STACK_UNDERFLOW, instruction.raw),
        do_return,
        state
    )


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions."""
    return jax.lax.cond(
        0x00E0 == instruction.raw,
        execute_clear_screen,
        lambda state, instruction: jax.lax.cond(
            0x00EE == instruction.raw,
            execute_return,
            invalid_opcode,
            state, instruction
        ),
        state, instruction
    )
