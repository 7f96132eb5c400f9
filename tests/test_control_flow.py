"""Tests for control flow instructions."""

import pytest
from chipvm import execute
from chipvm.keypad import set_keys
from conftest import set_registers


class TestJump:
    """Test jump instructions."""

    def test_execute_jump(self, fresh_state):
        """Test 1NNN - Jump to address."""
        state = execute(fresh_state, 0x1001)
        assert state.pc == 1

    @pytest.mark.parametrize("target", [0x000, 0x200, 0x2A4, 0xFFE])
    def test_jump_lands_exactly_on_target(self, fresh_state, target):
        """1NNN - No off-by-two adjustment after the jump."""
        state = execute(fresh_state, 0x1000 | target)
        assert state.pc == target


class TestSkipInstructions:
    """Test all skip instruction variants."""

    def test_skip_if_equal_immediate_true(self, fresh_state):
        """3XNN - Should skip when VX == NN."""
        state = set_registers(fresh_state, V5=0x42)
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_immediate_false(self, fresh_state):
        """3XNN - Should not skip when VX != NN."""
        state = set_registers(fresh_state, V5=0x41)
        initial_pc = state.pc

        state = execute(state, 0x3542)  # Skip if V5 == 0x42
        assert state.pc == initial_pc

    def test_skip_if_not_equal_immediate_true(self, fresh_state):
        """4XNN - Should skip when VX != NN."""
        state = set_registers(fresh_state, V3=0x10)
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_immediate_false(self, fresh_state):
        """4XNN - Should not skip when VX == NN."""
        state = set_registers(fresh_state, V3=0x20)
        initial_pc = state.pc

        state = execute(state, 0x4320)  # Skip if V3 != 0x20
        assert state.pc == initial_pc

    def test_skip_if_equal_register_true(self, fresh_state):
        """5XY0 - Should skip when VX == VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x55)
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc + 2

    def test_skip_if_equal_register_false(self, fresh_state):
        """5XY0 - Should not skip when VX != VY."""
        state = set_registers(fresh_state, V1=0x55, V2=0x44)
        initial_pc = state.pc

        state = execute(state, 0x5120)  # Skip if V1 == V2
        assert state.pc == initial_pc

    def test_skip_if_not_equal_register_true(self, fresh_state):
        """9XY0 - Should skip when VX != VY."""
        state = set_registers(fresh_state, V7=0xAA, V8=0xBB)
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc + 2

    def test_skip_if_not_equal_register_false(self, fresh_state):
        """9XY0 - Should not skip when VX == VY."""
        state = set_registers(fresh_state, V7=0xCC, V8=0xCC)
        initial_pc = state.pc

        state = execute(state, 0x9780)  # Skip if V7 != V8
        assert state.pc == initial_pc

    def test_skip_with_zero_values(self, fresh_state):
        """Test skip instructions with zero values."""
        state = fresh_state
        initial_pc = state.pc

        # V0 == 0, should skip
        state = execute(state, 0x3000)  # Skip if V0 == 0
        assert state.pc == initial_pc + 2

    def test_skip_boundary_values(self, fresh_state):
        """Test skip instructions with boundary values."""
        state = set_registers(fresh_state, V0=0xFF)
        initial_pc = state.pc

        state = execute(state, 0x30FF)  # Skip if V0 == 255
        assert state.pc == initial_pc + 2


class TestSkipIfKey:
    """Test EX9E / EXA1 against the keypad snapshot."""

    def _keys(self, *pressed):
        return [key in pressed for key in range(16)]

    def test_skip_if_key_pressed(self, fresh_state):
        """EX9E - Skip when key VX is held."""
        state = set_keys(set_registers(fresh_state, V2=0xB), self._keys(0xB))
        initial_pc = state.pc

        state = execute(state, 0xE29E)
        assert state.pc == initial_pc + 2

    def test_skip_if_key_not_pressed(self, fresh_state):
        """EX9E - No skip when a different key is held."""
        state = set_keys(set_registers(fresh_state, V2=0xB), self._keys(0xA))
        initial_pc = state.pc

        state = execute(state, 0xE29E)
        assert state.pc == initial_pc

    def test_skip_if_not_key_released(self, fresh_state):
        """EXA1 - Skip when key VX is up."""
        state = set_registers(fresh_state, V2=0x3)
        initial_pc = state.pc

        state = execute(state, 0xE2A1)
        assert state.pc == initial_pc + 2

    def test_skip_if_not_key_held(self, fresh_state):
        """EXA1 - No skip while key VX is held."""
        state = set_keys(set_registers(fresh_state, V2=0x3), self._keys(0x3))
        initial_pc = state.pc

        state = execute(state, 0xE2A1)
        assert state.pc == initial_pc

    def test_key_index_uses_low_nibble(self, fresh_state):
        """EX9E - VX values above 0xF select key VX & 0xF."""
        state = set_keys(set_registers(fresh_state, V2=0x15), self._keys(0x5))
        initial_pc = state.pc

        state = execute(state, 0xE29E)
        assert state.pc == initial_pc + 2


class TestJumpWithOffset:
    """Test jump with offset in both modes."""

    def test_jump_with_offset_default(self, fresh_state):
        """BNNN - Jump with V0 offset."""
        state = execute(fresh_state, 0x6010)  # V0 = 0x10
        state = execute(state, 0xB250)  # Jump to 0x250 + V0
        assert state.pc == 0x260

    def test_jump_with_offset_modern(self, modern_state):
        """BXNN - Jump with VX offset (quirk enabled)."""
        state = execute(modern_state, 0x6210)  # V2 = 0x10
        state = execute(state, 0xB250)  # Jump to 0x250 + V2
        assert state.pc == 0x260

    def test_jump_mode_comparison(self):
        """Test that the jump quirk changes the offset register."""
        from chipvm import create_state, Quirks

        # Default: B250 = Jump to 0x250 + V0
        state_legacy = create_state()
        state_legacy = execute(state_legacy, 0x6010)  # V0 = 0x10
        state_legacy = execute(state_legacy, 0x6230)  # V2 = 0x30
        state_legacy = execute(state_legacy, 0xB250)

        # Quirk: B250 = Jump to 0x250 + V2
        state_modern = create_state(quirks=Quirks(jump_offset_uses_vx=True))
        state_modern = execute(state_modern, 0x6010)  # V0 = 0x10
        state_modern = execute(state_modern, 0x6230)  # V2 = 0x30
        state_modern = execute(state_modern, 0xB250)

        assert state_legacy.pc == 0x260  # 0x250 + 0x10 (used V0)
        assert state_modern.pc == 0x280  # 0x250 + 0x30 (used V2)

    def test_jump_with_offset_past_12_bits(self, fresh_state):
        """BNNN - Target is not folded back into 12 bits."""
        state = set_registers(fresh_state, V0=0xFF)
        state = execute(state, 0xBFFF)
        assert state.pc == 0x10FE
