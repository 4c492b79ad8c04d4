"""Exceptions raised by the CHIP-8 interpreter."""

from chip8core.constants import (
    FAULT_INVALID_OPCODE, FAULT_STACK_OVERFLOW, FAULT_STACK_UNDERFLOW
)
from chip8core.decode import disassemble


class Chip8Error(Exception):
    """Base class for all interpreter errors."""


class LoadError(Chip8Error):
    """Program image could not be loaded."""


class ImageTooLarge(LoadError):
    """Program image does not fit in program memory."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"Program image is {size} bytes, only {capacity} bytes fit above 0x200"
        )


class ExecutionFault(Chip8Error):
    """Fatal fault while executing an instruction.

    Attributes:
        pc: Address of the faulting instruction
        instruction: Raw 16-bit instruction word
    """

    reason = "execution fault"

    def __init__(self, pc: int, instruction: int):
        self.pc = pc
        self.instruction = instruction
        super().__init__(
            f"{self.reason} at 0x{pc:03X}: 0x{instruction:04X} ({disassemble(instruction)})"
        )


class InvalidOpcode(ExecutionFault):
    reason = "invalid opcode"


class StackOverflow(ExecutionFault):
    reason = "stack overflow"


class StackUnderflow(ExecutionFault):
    reason = "stack underflow"


FAULT_EXCEPTIONS = {
    FAULT_INVALID_OPCODE: InvalidOpcode,
    FAULT_STACK_OVERFLOW: StackOverflow,
    FAULT_STACK_UNDERFLOW: StackUnderflow,
}
