"""CHIP-8 emulator state structures."""

from typing import Any

import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode, field

from chip8core.constants import (
    PROGRAM_START, FONT_START, FONT_DATA, MEMORY_SIZE, NUM_KEYS, NUM_REGISTERS,
    SCREEN_WIDTH, SCREEN_HEIGHT, STACK_SIZE, FAULT_NONE
)
from chip8core.rng import JaxRandomSource, RandomSource


@dataclass(frozen=True)
class StackState:
    """Stack state for subroutine calls."""
    data: jnp.ndarray = field(default_factory=lambda: jnp.zeros(STACK_SIZE, dtype=jnp.uint16))
    pointer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    ``display`` is indexed ``[x, y]``. ``redraw`` reports whether the last
    executed instruction touched the display. A non-zero ``fault`` freezes
    the machine, with ``fault_pc`` and ``fault_instruction`` describing the
    instruction that caused it.
    """
    rng: Any
    memory: jnp.ndarray = field(default_factory=lambda: jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8))
    pc: jnp.ndarray = field(default_factory=lambda: jnp.astype(PROGRAM_START, jnp.uint16))
    display: jnp.ndarray = field(default_factory=lambda: jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_))
    stack: StackState = StackState()
    delay_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    sound_timer: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint8))
    keypad: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_KEYS, dtype=jnp.bool_))
    V: jnp.ndarray = field(default_factory=lambda: jnp.zeros(NUM_REGISTERS, dtype=jnp.uint8))
    I: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    redraw: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.bool_))
    fault: jnp.ndarray = field(default_factory=lambda: jnp.astype(FAULT_NONE, jnp.uint8))
    fault_pc: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    fault_instruction: jnp.ndarray = field(default_factory=lambda: jnp.zeros((), dtype=jnp.uint16))
    random_source: RandomSource = field(pytree_node=False, default=JaxRandomSource())


def create_state(seed: int = 0, random_source: RandomSource = None) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    if random_source is None:
        random_source = JaxRandomSource()
    state = EmulatorState(random_source.init(seed), random_source=random_source)
    return state.replace(memory=state.memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(
        jnp.array(FONT_DATA, dtype=jnp.uint8)
    ))
