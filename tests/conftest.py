"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chip8core import create_state, load


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


def program(*words):
    """Assemble instruction words into a big-endian program image."""
    image = bytearray()
    for word in words:
        image += word.to_bytes(2, "big")
    return bytes(image)


def loaded_state(*words, **kwargs):
    """Fresh state with the given instruction words loaded at 0x200."""
    return load(program(*words), **kwargs)


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Set registers by name, e.g. ``set_registers(state, V1=0x10, VF=1)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)


NO_KEYS = [False] * 16


def keys_pressed(*indices):
    """Key snapshot with the given key indices held down."""
    return [i in indices for i in range(16)]
