"""Tests for ALU operations (8xxx)."""

from functools import partial

import jax
import jax.numpy as jnp
import numpy as np
import pytest
from chip8core import execute
from conftest import set_registers

# Edge values plus an even spread over the byte range
SAMPLE_VALUES = sorted({0, 1, 2, 0x7F, 0x80, 0x81, 0xFE, 0xFF, *range(0, 256, 17)})


@partial(jax.jit, static_argnums=1)
def _run_grid(state, instruction, vx, vy):
    def run(a, b):
        s = state.replace(V=state.V.at[1].set(a).at[2].set(b))
        return execute(s, instruction).V
    return jax.vmap(run)(vx, vy)


def alu_grid(state, instruction):
    """Run an 8-series instruction with V1/V2 over every pair of sample values."""
    xs, ys = np.meshgrid(SAMPLE_VALUES, SAMPLE_VALUES, indexing="ij")
    xs, ys = xs.ravel(), ys.ravel()
    V = _run_grid(state, instruction, jnp.asarray(xs, jnp.uint8), jnp.asarray(ys, jnp.uint8))
    return xs, ys, np.asarray(V).astype(np.int64)


class TestBasicALU:
    """Test basic ALU operations."""

    def test_alu_set_basic(self, fresh_state):
        """8XY0 - Set VX = VY."""
        state = set_registers(fresh_state, V1=0x42, V2=0x99)

        state = execute(state, 0x8120)  # V1 = V2

        assert state.V[1] == 0x99
        assert state.V[2] == 0x99

    def test_alu_or_basic(self, fresh_state):
        """8XY1 - OR operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0x0F)

        state = execute(state, 0x8121)  # V1 |= V2

        assert state.V[1] == 0xFF

    def test_alu_and_basic(self, fresh_state):
        """8XY2 - AND operation."""
        state = set_registers(fresh_state, V1=0xF0, V2=0xF1)

        state = execute(state, 0x8122)  # V1 &= V2

        assert state.V[1] == 0xF0

    def test_alu_xor_basic(self, fresh_state):
        """8XY3 - XOR operation."""
        state = set_registers(fresh_state, V1=0xFF, V2=0xF0)

        state = execute(state, 0x8123)  # V1 ^= V2

        assert state.V[1] == 0x0F

    def test_alu_xor_same(self, fresh_state):
        """8XY3 - XOR with same value should be 0."""
        state = set_registers(fresh_state, V3=0xAA, V4=0xAA)

        state = execute(state, 0x8343)  # V3 ^= V4

        assert state.V[3] == 0x00

    @pytest.mark.parametrize("instruction", [0x8120, 0x8121, 0x8122, 0x8123])
    def test_logic_operations_leave_flag_alone(self, fresh_state, instruction):
        """Copy/OR/AND/XOR never write VF."""
        state = set_registers(fresh_state, V1=0x0F, V2=0xF0, VF=0x5A)
        state = execute(state, instruction)
        assert state.V[15] == 0x5A


class TestALUArithmetic:
    """Test arithmetic ALU operations."""

    def test_alu_add_no_carry(self, fresh_state):
        """8XY4 - Add without carry."""
        state = set_registers(fresh_state, V1=0x10, V2=0x20)

        state = execute(state, 0x8124)  # V1 += V2

        assert state.V[1] == 0x30
        assert state.V[15] == 0

    def test_alu_add_with_carry(self, fresh_state):
        """8XY4 - Add with carry."""
        state = set_registers(fresh_state, V1=0xFF, V2=0x01)

        state = execute(state, 0x8124)

        assert state.V[1] == 0x00  # 256 wraps to 0
        assert state.V[15] == 1  # Carry set

    def test_alu_sub_xy_no_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, no borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8125)  # V1 -= V2

        assert state.V[1] == 0x20
        assert state.V[15] == 1  # No borrow (VX >= VY)

    def test_alu_sub_xy_with_borrow(self, fresh_state):
        """8XY5 - Subtract VX - VY, with borrow."""
        state = set_registers(fresh_state, V3=0x10, V4=0x30)

        state = execute(state, 0x8345)  # V3 -= V4

        assert state.V[3] == 0xE0  # 16 - 48 = -32 -> 224
        assert state.V[15] == 0  # Borrow (VX < VY)

    def test_alu_sub_equal_values(self, fresh_state):
        """8XY5 - Equal operands give zero and no borrow."""
        state = set_registers(fresh_state, V1=0x42, V2=0x42)
        state = execute(state, 0x8125)
        assert state.V[1] == 0
        assert state.V[15] == 1

    def test_alu_sub_yx_no_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, no borrow."""
        state = set_registers(fresh_state, V1=0x10, V2=0x30)

        state = execute(state, 0x8127)  # V1 = V2 - V1

        assert state.V[1] == 0x20
        assert state.V[15] == 1

    def test_alu_sub_yx_with_borrow(self, fresh_state):
        """8XY7 - Subtract VY - VX, with borrow."""
        state = set_registers(fresh_state, V1=0x30, V2=0x10)

        state = execute(state, 0x8127)

        assert state.V[1] == 0xE0
        assert state.V[15] == 0


class TestALUShifts:
    """Test shift operations, which act on VX."""

    def test_shift_right(self, fresh_state):
        """8XY6 - VX >>= 1, VF = old bit 0."""
        state = set_registers(fresh_state, V1=0x05, V2=0xFF)
        state = execute(state, 0x8126)
        assert state.V[1] == 0x02
        assert state.V[15] == 1

    def test_shift_right_even(self, fresh_state):
        state = set_registers(fresh_state, V1=0x04, VF=1)
        state = execute(state, 0x8126)
        assert state.V[1] == 0x02
        assert state.V[15] == 0

    def test_shift_left(self, fresh_state):
        """8XYE - VX <<= 1, VF = old bit 7."""
        state = set_registers(fresh_state, V1=0x81, V2=0x00)
        state = execute(state, 0x812E)
        assert state.V[1] == 0x02
        assert state.V[15] == 1

    def test_shift_left_no_carry(self, fresh_state):
        state = set_registers(fresh_state, V1=0x41, VF=1)
        state = execute(state, 0x812E)
        assert state.V[1] == 0x82
        assert state.V[15] == 0

    def test_flag_wins_when_target_is_vf(self, fresh_state):
        """With X = F the flag overwrites the result."""
        state = set_registers(fresh_state, VF=0xFF, V1=0x01)
        state = execute(state, 0x8F14)  # VF = 0xFF + 1 -> carry
        assert state.V[15] == 1

        state = set_registers(fresh_state, VF=0x02)
        state = execute(state, 0x8F06)  # VF >>= 1 -> flag 0
        assert state.V[15] == 0


class TestALUProperties:
    """Flag behaviour over a grid of operand values."""

    def test_add_carry_property(self, fresh_state):
        xs, ys, V = alu_grid(fresh_state, 0x8124)
        np.testing.assert_array_equal(V[:, 1], (xs + ys) % 256)
        np.testing.assert_array_equal(V[:, 15], (xs + ys >= 256).astype(np.int64))

    def test_sub_borrow_property(self, fresh_state):
        xs, ys, V = alu_grid(fresh_state, 0x8125)
        np.testing.assert_array_equal(V[:, 1], (xs - ys) % 256)
        np.testing.assert_array_equal(V[:, 15], (xs >= ys).astype(np.int64))

    def test_subn_borrow_property(self, fresh_state):
        xs, ys, V = alu_grid(fresh_state, 0x8127)
        np.testing.assert_array_equal(V[:, 1], (ys - xs) % 256)
        np.testing.assert_array_equal(V[:, 15], (ys >= xs).astype(np.int64))

    @pytest.mark.parametrize("kk", [0x00, 0x01, 0x80, 0xFF])
    def test_add_immediate_property(self, fresh_state, kk):
        """7XNN wraps modulo 256 and never touches VF."""
        state = set_registers(fresh_state, VF=0x77)
        xs, ys, V = alu_grid(state, 0x7100 | kk)
        np.testing.assert_array_equal(V[:, 1], (xs + kk) % 256)
        np.testing.assert_array_equal(V[:, 2], ys)
        assert (V[:, 15] == 0x77).all()


class TestUndefinedALU:
    """Undefined 8XYN operations fault."""

    @pytest.mark.parametrize("n", [0x8, 0x9, 0xA, 0xB, 0xC, 0xD, 0xF])
    def test_undefined_operation_faults(self, fresh_state, n):
        state = set_registers(fresh_state, V1=0x10, V2=0x20)
        result = execute(state, 0x8120 | n)
        assert result.fault == 1
        assert result.fault_instruction == 0x8120 | n
        assert jnp.array_equal(result.V, state.V)
