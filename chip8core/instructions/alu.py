"""CHIP-8 ALU operations (8xxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction
from chip8core.constants import FLAG_REGISTER
from chip8core.faults import invalid_opcode


def alu_set(vx: int, vy: int) -> tuple[int, int]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, int]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, int]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, int]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, int]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.int32) + vy
    carry = jnp.astype(result > 255, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: int, vy: int) -> tuple[int, int]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vx >= vy, jnp.uint8)
    return vx - vy, no_borrow


def alu_shift_right(vx: int, vy: int) -> tuple[int, int]:
    """8XY6 - Shift right: VX >>= 1."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, int]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when there is no borrow."""
    no_borrow = jnp.astype(vy >= vx, jnp.uint8)
    return vy - vx, no_borrow


def alu_shift_left(vx: int, vy: int) -> tuple[int, int]:
    """8XYE - Shift left: VX <<= 1."""
    return vx << 1, vx >> 7


def _with_flag(op, writes_flag: bool):
    """Adapt an ALU op to the (result, flag, writes_flag) triple used by the switch."""
    def wrapped(vx, vy):
        result, flag = op(vx, vy)
        if flag is None:
            flag = jnp.zeros((), dtype=jnp.uint8)
        return jnp.astype(result, jnp.uint8), jnp.astype(flag, jnp.uint8), jnp.array(writes_flag)
    return wrapped


ALU_OPERATIONS = [
    _with_flag(alu_set, False),
    _with_flag(alu_or, False),
    _with_flag(alu_and, False),
    _with_flag(alu_xor, False),
    _with_flag(alu_add, True),
    _with_flag(alu_sub_xy, True),
    _with_flag(alu_shift_right, True),
    _with_flag(alu_sub_yx, True),
    _with_flag(alu_shift_left, True),
]

VALID_OPS = jnp.array([1, 1, 1, 1, 1, 1, 1, 1, 0, 0, 0, 0, 0, 0, 1, 0], dtype=bool)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    vx = state.V[instruction.x]
    vy = state.V[instruction.y]

    def run(state, instruction):
        result, flag, writes_flag = jax.lax.switch(
            # Map only valid operations: 0,1,2,3,4,5,6,7,14 -> 0,1,2,3,4,5,6,7,8
            jnp.where(instruction.n == 14, 8, instruction.n),
            ALU_OPERATIONS,
            vx, vy
        )
        new_V = state.V.at[instruction.x].set(result)
        # Flag is written last so it wins when X is F
        new_V = jnp.where(writes_flag, new_V.at[FLAG_REGISTER].set(flag), new_V)
        return state.replace(V=new_V)

    return jax.lax.cond(
        VALID_OPS[instruction.n],
        run,
        invalid_opcode,
        state, instruction
    )
