"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction
from chip8core.constants import ADDRESS_MASK, FLAG_REGISTER, SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Sprites wrap around both screen edges instead of being clipped.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32)

    # Offset of every screen cell from the sprite origin, modulo the screen size
    col_offset = (xx - sprite_x) % SCREEN_WIDTH
    row_offset = (yy - sprite_y) % SCREEN_HEIGHT
    in_sprite = (col_offset < SPRITE_WIDTH) & (row_offset < instruction.n)

    row_address = (jnp.astype(state.I, jnp.int32) + row_offset) & ADDRESS_MASK
    sprite_bytes = state.memory[row_address]
    shift = jnp.where(in_sprite, 7 - col_offset, 0)
    sprite = ((sprite_bytes >> shift) & 1).astype(jnp.bool_) & in_sprite

    collision = jnp.any(state.display & sprite)
    return state.replace(
        display=state.display ^ sprite,
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(collision, jnp.uint8)),
        redraw=jnp.array(True)
    )
