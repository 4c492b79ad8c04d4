"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction
from chip8core.constants import ADDRESS_MASK, FONT_CHAR_SIZE, FONT_START, NO_KEY, NUM_REGISTERS
from chip8core.faults import invalid_opcode


def first_pressed_key(keypad: jnp.ndarray) -> jnp.ndarray:
    """Lowest pressed key index, or NO_KEY when nothing is pressed."""
    return jnp.where(jnp.any(keypad), jnp.argmax(keypad), NO_KEY)


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register (16-bit wraparound, VF untouched)."""
    new_i = state.I + jnp.astype(state.V[instruction.x], jnp.uint16)
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Nothing blocks: while no key is down the pc is rewound so the same
    instruction runs again, and VX keeps its previous value.
    """
    key = first_pressed_key(state.keypad)

    def key_pressed_action(state):
        return state.replace(V=state.V.at[instruction.x].set(jnp.astype(key, jnp.uint8)))

    def wait_action(state):
        return state.replace(pc=(state.pc - 2).astype(jnp.uint16))

    return jax.lax.cond(key == NO_KEY, wait_action, key_pressed_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_CHAR_SIZE
    return state.replace(I=jnp.astype(font_address, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = state.V[instruction.x]

    digits = jnp.array([
        value // 100,
        (value // 10) % 10,
        value % 10
    ], dtype=jnp.uint8)

    indices = (jnp.arange(3) + state.I) & ADDRESS_MASK
    new_memory = state.memory.at[indices].set(digits)
    return state.replace(memory=new_memory)


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = (state.I + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    current_memory_values = state.memory[base_indices]
    new_memory_values = jnp.where(register_mask, state.V, current_memory_values)
    return state.replace(memory=state.memory.at[base_indices].set(new_memory_values))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    register_mask = jnp.arange(NUM_REGISTERS) <= instruction.x
    base_indices = (state.I + jnp.arange(NUM_REGISTERS)) & ADDRESS_MASK
    memory_values = state.memory[base_indices]
    return state.replace(V=jnp.where(register_mask, memory_values, state.V))


MISC_OPERATIONS = {
    0x07: execute_get_delay_timer,
    0x0A: execute_wait_for_key,
    0x15: execute_set_delay_timer,
    0x18: execute_set_sound_timer,
    0x1E: execute_add_to_index,
    0x29: execute_font_character,
    0x33: execute_bcd_conversion,
    0x55: execute_store_registers,
    0x65: execute_load_registers,
}


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions by their low byte; unknown bytes fault."""
    low_bytes = jnp.array(list(MISC_OPERATIONS), dtype=jnp.int32)
    matches = low_bytes == instruction.nn
    switch_index = jnp.where(jnp.any(matches), jnp.argmax(matches), len(MISC_OPERATIONS))

    return jax.lax.switch(
        switch_index,
        [*MISC_OPERATIONS.values(), invalid_opcode],
        state, instruction
    )
