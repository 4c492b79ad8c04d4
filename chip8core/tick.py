"""Tick driver: runs an instruction budget and decays the timers."""

from functools import partial
from typing import Sequence

import jax
import jax.lax
import jax.numpy as jnp
import numpy as np

from chip8core.config import TickConfig
from chip8core.constants import NUM_KEYS
from chip8core.emulator import step
from chip8core.faults import is_faulted, raise_for_fault
from chip8core.state import EmulatorState


def _keypad_array(keys) -> jnp.ndarray:
    """Validate a 16-line input snapshot."""
    keypad = np.asarray(keys, dtype=np.bool_)
    if keypad.shape != (NUM_KEYS,):
        raise ValueError(f"Expected {NUM_KEYS} key states, got shape {keypad.shape}")
    return jnp.asarray(keypad)


def decrement_timers(state: EmulatorState) -> EmulatorState:
    """Decrease both timers by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, 0).astype(jnp.uint8),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, 0).astype(jnp.uint8),
    )


def tick(state: EmulatorState, keypad: jnp.ndarray, config: TickConfig) -> EmulatorState:
    """One tick as a pure, traceable function.

    Runs instructions until the budget is spent, a fault is recorded, or
    (with ``stop_on_redraw``) the display was touched. Timers are left alone
    when the tick faulted.
    """
    state = state.replace(keypad=keypad)

    def keep_running(carry):
        executed, state = carry
        stop = is_faulted(state)
        if config.stop_on_redraw:
            stop = stop | (state.redraw & (executed > 0))
        return (executed < config.instructions_per_tick) & ~stop

    def run_one(carry):
        executed, state = carry
        return executed + 1, step(state)

    _, state = jax.lax.while_loop(keep_running, run_one, (jnp.zeros((), jnp.int32), state))

    return jax.lax.cond(is_faulted(state), lambda s: s, decrement_timers, state)


_tick_jit = jax.jit(tick, static_argnums=2)


def run_tick(state: EmulatorState, keys: Sequence[bool],
             config: TickConfig = TickConfig()) -> EmulatorState:
    """Compiled tick that records faults on the returned state instead of raising."""
    return _tick_jit(state, _keypad_array(keys), config)


def advance(state: EmulatorState, keys: Sequence[bool],
            config: TickConfig = TickConfig()) -> tuple[EmulatorState, jax.Array]:
    """Advance the machine by one tick.

    Args:
        state: Current emulator state
        keys: 16 booleans, the pressed state of keys 0x0-0xF
        config: Instruction budget for the tick

    Returns:
        Tuple of the new state and its display, a read-only (64, 32) bool array

    Raises:
        InvalidOpcode, StackOverflow, StackUnderflow: when an instruction
            faulted during this tick or an earlier one
    """
    raise_for_fault(state)
    state = run_tick(state, keys, config)
    raise_for_fault(state)
    return state, state.display


@partial(jax.jit, static_argnums=2)
def _run_ticks(state: EmulatorState, key_frames: jnp.ndarray, config: TickConfig):
    def scan_tick(state, keypad):
        state = jax.lax.cond(
            is_faulted(state),
            lambda s, _: s,
            lambda s, k: tick(s, k, config),
            state, keypad
        )
        return state, state.display

    return jax.lax.scan(scan_tick, state, key_frames)


def run_ticks(state: EmulatorState, key_frames: Sequence[Sequence[bool]],
              config: TickConfig = TickConfig()) -> tuple[EmulatorState, jax.Array]:
    """Run one tick per key snapshot in ``key_frames`` in a single compiled scan.

    Returns the final state and the stacked displays, shape (T, 64, 32).
    Once a fault occurs the remaining ticks leave the state untouched and
    the fault is raised after the scan.
    """
    raise_for_fault(state)
    frames = np.asarray(key_frames, dtype=np.bool_)
    if frames.ndim != 2 or frames.shape[1] != NUM_KEYS:
        raise ValueError(f"Expected key frames of shape (T, {NUM_KEYS}), got {frames.shape}")
    state, displays = _run_ticks(state, jnp.asarray(frames), config)
    raise_for_fault(state)
    return state, displays
