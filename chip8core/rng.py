"""Randomness sources for the CXNN instruction.

A source is stored on the emulator state as static metadata, while the
values it threads between calls live in ``EmulatorState.rng``. Both methods
must be traceable so a whole tick can be compiled.
"""

from dataclasses import dataclass
from typing import Any, Protocol

import jax
import jax.numpy as jnp


class RandomSource(Protocol):
    """Supplies uniformly distributed bytes."""

    def init(self, seed: int) -> Any:
        """Create the initial random state."""

    def next_byte(self, rng: Any) -> tuple[Any, jnp.ndarray]:
        """Return the advanced random state and a uint8 value."""


@dataclass(frozen=True)
class JaxRandomSource:
    """Bytes drawn from a ``jax.random`` key."""

    def init(self, seed: int) -> jax.Array:
        return jax.random.PRNGKey(seed)

    def next_byte(self, rng: jax.Array) -> tuple[jax.Array, jnp.ndarray]:
        key, subkey = jax.random.split(rng)
        return key, jax.random.bits(subkey, shape=(), dtype=jnp.uint8)


@dataclass(frozen=True)
class SequenceRandomSource:
    """Cycles through a fixed sequence of bytes, for deterministic runs."""
    values: tuple[int, ...] = (0,)

    def __post_init__(self):
        object.__setattr__(self, "values", tuple(int(v) for v in self.values))
        if not self.values:
            raise ValueError("SequenceRandomSource needs at least one value")
        if any(not 0 <= v <= 0xFF for v in self.values):
            raise ValueError(f"Sequence values must be bytes, got {self.values}")

    def init(self, seed: int) -> jnp.ndarray:
        return jnp.asarray(seed % len(self.values), dtype=jnp.uint32)

    def next_byte(self, rng: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
        table = jnp.asarray(self.values, dtype=jnp.uint8)
        value = table[rng % len(self.values)]
        return ((rng + 1) % len(self.values)).astype(jnp.uint32), value
