"""Main CHIP-8 emulator execution engine."""

from typing import Iterable, Union

import jax
import jax.lax
import jax.numpy as jnp
from chip8core.state import EmulatorState, create_state
from chip8core.decode import decode
from chip8core.constants import ADDRESS_MASK, MAX_PROGRAM_SIZE, PROGRAM_START
from chip8core.errors import ImageTooLarge
from chip8core.faults import is_faulted
from chip8core.rng import RandomSource
from chip8core.instructions.system import execute_system_instruction
from chip8core.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chip8core.instructions.alu import execute_alu_operation
from chip8core.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8core.instructions.display import execute_display
from chip8core.instructions.misc import execute_misc_instruction

ProgramImage = Union[bytes, bytearray, memoryview, Iterable[int]]

INSTRUCTION_TABLE = [
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Expects the pc to already point past the instruction, as left by ``fetch``.
    """
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.opcode, INSTRUCTION_TABLE, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    address = state.pc & ADDRESS_MASK
    instruction = _pack_u16(state.memory[address], state.memory[(address + 1) & ADDRESS_MASK])
    return state.replace(pc=(state.pc + 2).astype(jnp.uint16)), instruction


def step(state: EmulatorState) -> EmulatorState:
    """Fetch and execute one instruction. A faulted state is returned as is."""
    def run(state):
        state, instruction = fetch(state.replace(redraw=jnp.array(False)))
        return execute(state, instruction)

    return jax.lax.cond(is_faulted(state), lambda s: s, run, state)


def load_rom(state: EmulatorState, image: ProgramImage) -> EmulatorState:
    """Load a program image into CHIP-8 memory starting at 0x200."""
    rom_data = bytes(image)
    if len(rom_data) > MAX_PROGRAM_SIZE:
        raise ImageTooLarge(len(rom_data), MAX_PROGRAM_SIZE)
    if not rom_data:
        return state
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def load(image: ProgramImage, seed: int = 0, random_source: RandomSource = None) -> EmulatorState:
    """Create a fresh machine with the built-in glyphs and ``image`` loaded."""
    return load_rom(create_state(seed, random_source), image)
