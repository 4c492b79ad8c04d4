"""Fault recording inside traced code and raising at the Python boundary."""

import jax.numpy as jnp

from chip8core.constants import FAULT_NONE, FAULT_INVALID_OPCODE
from chip8core.errors import FAULT_EXCEPTIONS
from chip8core.state import EmulatorState


def record_fault(state: EmulatorState, code: int, raw: int) -> EmulatorState:
    """Freeze the state on the instruction just fetched.

    Only the fault record and pc change: pc is rewound onto the faulting
    instruction so the machine halts exactly where it failed.
    """
    address = (state.pc - 2).astype(jnp.uint16)
    return state.replace(
        pc=address,
        fault=jnp.astype(code, jnp.uint8),
        fault_pc=address,
        fault_instruction=jnp.astype(raw, jnp.uint16),
    )


def invalid_opcode(state: EmulatorState, instruction) -> EmulatorState:
    """Catch-all handler for undefined instruction patterns."""
    return record_fault(state, FAULT_INVALID_OPCODE, instruction.raw)


def is_faulted(state: EmulatorState) -> jnp.ndarray:
    return state.fault != FAULT_NONE


def raise_for_fault(state: EmulatorState) -> None:
    """Raise the exception matching a recorded fault, if any."""
    code = int(state.fault)
    if code == FAULT_NONE:
        return
    raise FAULT_EXCEPTIONS[code](int(state.fault_pc), int(state.fault_instruction))
