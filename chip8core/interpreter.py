"""Stateful CHIP-8 interpreter built on the functional core."""

from typing import Optional, Sequence

import jax

from chip8core.config import TickConfig
from chip8core.constants import MAX_PROGRAM_SIZE
from chip8core.emulator import ProgramImage, load, step
from chip8core.errors import Chip8Error, ExecutionFault
from chip8core.faults import raise_for_fault
from chip8core.logging import EmulatorLogger
from chip8core.rng import RandomSource
from chip8core.state import EmulatorState
from chip8core.tick import run_tick

_step_jit = jax.jit(step)


class Chip8:
    """One interpreter session: holds the latest state and drives it tick by tick.

    The caller owns pacing, calling ``advance`` once per display refresh with
    the current key snapshot. After a fault the session stays halted and
    every further ``advance`` or ``step`` raises the same fault until
    ``reset`` is called.

    Example:
        >>> chip8 = Chip8(open("pong.ch8", "rb").read())
        >>> display = chip8.advance([False] * 16)
        >>> display.shape
        (64, 32)
    """

    def __init__(
        self,
        image: ProgramImage,
        config: Optional[TickConfig] = None,
        seed: int = 0,
        random_source: Optional[RandomSource] = None,
        logger: Optional[EmulatorLogger] = None,
    ):
        self.image = bytes(image)
        self.config = config if config is not None else TickConfig()
        self.seed = seed
        self.random_source = random_source
        self.logger = logger if logger is not None else EmulatorLogger(log_level="WARNING")
        self.ticks = 0
        self._state = self._load()

    def _load(self) -> EmulatorState:
        try:
            state = load(self.image, self.seed, self.random_source)
        except Chip8Error as e:
            self.logger.log_fault(e)
            raise
        self.logger.log_load(len(self.image), MAX_PROGRAM_SIZE)
        return state

    @property
    def state(self) -> EmulatorState:
        return self._state

    @property
    def display(self) -> jax.Array:
        """Current framebuffer, a read-only (64, 32) bool array indexed [x, y]."""
        return self._state.display

    @property
    def sound_active(self) -> bool:
        """Whether a tone should be playing (sound timer non-zero)."""
        return bool(self._state.sound_timer > 0)

    @property
    def halted(self) -> bool:
        return int(self._state.fault) != 0

    def advance(self, keys: Sequence[bool]) -> jax.Array:
        """Run one tick with the given key snapshot and return the display."""
        raise_for_fault(self._state)
        self._state = run_tick(self._state, keys, self.config)
        self._raise_and_log()
        self.ticks += 1
        self.logger.log_tick(self.ticks, self._state)
        return self._state.display

    def step(self) -> None:
        """Execute a single instruction without touching the timers."""
        raise_for_fault(self._state)
        self._state = _step_jit(self._state)
        self._raise_and_log()

    def _raise_and_log(self):
        try:
            raise_for_fault(self._state)
        except ExecutionFault as e:
            self.logger.log_fault(e)
            raise

    def reset(self) -> None:
        """Reload the program image into a fresh machine."""
        self.ticks = 0
        self._state = self._load()
