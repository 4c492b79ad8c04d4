"""Tick driver configuration."""

import dataclasses


@dataclasses.dataclass(frozen=True)
class TickConfig:
    """How many instructions one tick may execute.

    Timers always decay by one per tick, so ``instructions_per_tick`` sets
    the CPU speed relative to the 60 Hz timers. With ``stop_on_redraw`` the
    tick ends early right after an instruction that touched the display.

    Attributes:
        instructions_per_tick: Upper bound on instructions executed per tick
        stop_on_redraw: End the tick after a CLS or DRW instruction
    """
    instructions_per_tick: int = 10
    stop_on_redraw: bool = True

    def __post_init__(self):
        if self.instructions_per_tick < 1:
            raise ValueError(
                f"instructions_per_tick must be at least 1, got {self.instructions_per_tick}"
            )

    @classmethod
    def from_frequency(cls, instruction_frequency: int = 600, fps: int = 60,
                       stop_on_redraw: bool = False) -> "TickConfig":
        """Derive the budget from a CPU frequency in Hz and a tick rate.

        Args:
            instruction_frequency: CHIP-8 CPU frequency in Hz
            fps: Ticks per second, i.e. the timer rate (typically 60)
            stop_on_redraw: End the tick after a CLS or DRW instruction
        """
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        return cls(max(1, instruction_frequency // fps), stop_on_redraw)
