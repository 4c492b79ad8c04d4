"""CHIP-8 interpreter core package."""

from chip8core.state import EmulatorState, StackState, create_state
from chip8core.emulator import execute, fetch, step, load, load_rom
from chip8core.decode import DecodedInstruction, decode, disassemble, is_valid
from chip8core.config import TickConfig
from chip8core.tick import advance, run_tick, run_ticks
from chip8core.rng import RandomSource, JaxRandomSource, SequenceRandomSource
from chip8core.errors import (
    Chip8Error, LoadError, ImageTooLarge, ExecutionFault,
    InvalidOpcode, StackOverflow, StackUnderflow
)
from chip8core.interpreter import Chip8
from chip8core.constants import *

__all__ = [
    "EmulatorState",
    "StackState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "load",
    "load_rom",
    "DecodedInstruction",
    "decode",
    "disassemble",
    "is_valid",
    "TickConfig",
    "advance",
    "run_tick",
    "run_ticks",
    "RandomSource",
    "JaxRandomSource",
    "SequenceRandomSource",
    "Chip8Error",
    "LoadError",
    "ImageTooLarge",
    "ExecutionFault",
    "InvalidOpcode",
    "StackOverflow",
    "StackUnderflow",
    "Chip8",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
]
