"""Tests for miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
import pytest
from chipvm import execute, create_state, Quirks, IllegalOpcode, MemoryAddressOutOfRange
from chipvm.keypad import set_keys
from conftest import set_registers


class TestTimers:
    """Test timer-related instructions."""

    def test_misc_timer_instructions(self, fresh_state):
        """Test timer set and get operations."""
        state = fresh_state

        # Test FX15: Set delay timer
        state = execute(state, 0x6030)  # V0 = 48
        state = execute(state, 0xF015)  # Set delay timer to V0
        assert state.delay_timer == 48

        # Test FX18: Set sound timer
        state = execute(state, 0x6120)  # V1 = 32
        state = execute(state, 0xF118)  # Set sound timer to V1
        assert state.sound_timer == 32

        # Test FX07: Get delay timer
        state = execute(state, 0xF207)  # V2 = delay timer
        assert state.V[2] == 48


class TestIndexArithmetic:
    """Test FX1E."""

    def test_add_to_index(self, fresh_state):
        state = set_registers(execute(fresh_state, 0xA300), V4=0x21)

        state = execute(state, 0xF41E)

        assert state.I == 0x321

    def test_add_to_index_past_12_bits_keeps_vf(self, fresh_state):
        """FX1E - No 12-bit masking and no overflow flag."""
        state = set_registers(execute(fresh_state, 0xAFFF), V4=0x02, VF=0x33)

        state = execute(state, 0xF41E)

        assert state.I == 0x1001
        assert state.V[15] == 0x33

    def test_add_to_index_wraps_at_16_bits(self, fresh_state):
        state = set_registers(fresh_state.replace(I=jnp.astype(0xFFFF, jnp.uint16)), V4=0x02)

        state = execute(state, 0xF41E)

        assert state.I == 0x0001


class TestBCD:
    """Test BCD conversion."""

    @pytest.mark.parametrize("value, digits", [
        (156, [1, 5, 6]),
        (234, [2, 3, 4]),
        (7, [0, 0, 7]),
        (0, [0, 0, 0]),
        (255, [2, 5, 5]),
        (100, [1, 0, 0]),
    ])
    def test_bcd_conversion(self, fresh_state, value, digits):
        """FX33 - Hundreds, tens and ones at I, I+1, I+2."""
        state = set_registers(fresh_state, V0=value)
        state = execute(state, 0xA300)  # I = 0x300
        state = execute(state, 0xF033)  # BCD conversion

        assert [int(b) for b in state.memory[0x300:0x303]] == digits
        assert state.I == 0x300

    def test_bcd_past_memory_end(self, fresh_state):
        """FX33 - Writing past 0xFFF faults."""
        state = execute(fresh_state, 0xAFFE)

        with pytest.raises(MemoryAddressOutOfRange):
            execute(state, 0xF033)


class TestFont:
    """Test font character addressing."""

    def test_misc_font_character(self, fresh_state):
        """Test font character addressing."""
        state = fresh_state

        # Test character 'A' (0xA)
        state = execute(state, 0x600A)  # V0 = 0xA
        state = execute(state, 0xF029)  # I = font address for A

        expected_address = 0x50 + (0xA * 5)  # 0x50 + 50 = 0x82
        assert state.I == expected_address

    def test_font_all_characters(self, fresh_state):
        """Test font addressing for all hex digits."""
        state = fresh_state

        for digit in range(16):
            state = execute(state, 0x6000 | digit)  # V0 = digit
            state = execute(state, 0xF029)  # I = font address

            expected = 0x50 + (digit * 5)
            assert state.I == expected, f"Font address wrong for digit {digit:X}"

    def test_font_uses_low_nibble(self, fresh_state):
        state = set_registers(fresh_state, V3=0x1B)
        state = execute(state, 0xF329)
        assert state.I == 0x50 + 0xB * 5

    def test_font_data_present(self, fresh_state):
        """Glyph for 'A' is preloaded at its font address."""
        assert [int(b) for b in fresh_state.memory[0x82:0x87]] == [0xF0, 0x90, 0xF0, 0x90, 0x90]


class TestWaitForKey:
    """Test FX0A without blocking."""

    def test_wait_with_key_held(self, fresh_state):
        state = set_keys(fresh_state, [k == 0x7 for k in range(16)])

        state = execute(state, 0xF50A)

        assert state.V[5] == 0x7
        assert state.key_wait == -1

    def test_wait_picks_lowest_key(self, fresh_state):
        state = set_keys(fresh_state, [k in (0x3, 0x9) for k in range(16)])

        state = execute(state, 0xF50A)

        assert state.V[5] == 0x3

    def test_wait_without_key_records_register(self, fresh_state):
        """FX0A - No rewind: PC is left alone and the register is remembered."""
        initial_pc = fresh_state.pc

        state = execute(fresh_state, 0xF50A)

        assert state.key_wait == 5
        assert state.pc == initial_pc

    def test_wait_on_release_quirk(self, legacy_state):
        """Held keys do not satisfy FX0A until released under the COSMAC quirk."""
        held = set_keys(legacy_state, [k == 0x2 for k in range(16)])
        state = execute(held, 0xF10A)
        assert state.key_wait == 1

        released = set_keys(held, [False] * 16)
        state = execute(released, 0xF10A)
        assert state.key_wait == -1
        assert state.V[1] == 0x2


class TestMemoryOperations:
    """Test store/load register operations."""

    def test_store_load_modern_mode(self, fresh_state):
        """Test store/load with default quirks (I doesn't change)."""
        state = fresh_state

        # Set up test data
        state = execute(state, 0x6001)  # V0 = 1
        state = execute(state, 0x6102)  # V1 = 2
        state = execute(state, 0x6203)  # V2 = 3
        state = execute(state, 0xA300)  # I = 0x300

        original_i = state.I

        # Store registers
        state = execute(state, 0xF255)  # Store V0-V2
        assert state.I == original_i  # I unchanged
        assert [int(b) for b in state.memory[0x300:0x304]] == [1, 2, 3, 0]

        # Clear registers
        state = execute(state, 0x6000)  # V0 = 0
        state = execute(state, 0x6100)  # V1 = 0
        state = execute(state, 0x6200)  # V2 = 0

        # Load back
        state = execute(state, 0xF265)  # Load V0-V2
        assert state.V[0] == 1
        assert state.V[1] == 2
        assert state.V[2] == 3

    def test_store_load_legacy_mode(self, legacy_state):
        """Legacy quirk leaves I past the stored block."""
        state = execute(legacy_state, 0xA300)

        state = execute(state, 0xF255)
        assert state.I == 0x303

        state = execute(state, 0xF165)
        assert state.I == 0x305

    @pytest.mark.parametrize("inclusive", [True, False])
    @pytest.mark.parametrize("x", range(16))
    def test_store_load_round_trip(self, x, inclusive):
        """FX55 then FX65 into cleared registers reproduces V0..VX."""
        state = create_state(quirks=Quirks(store_load_inclusive=inclusive))
        original = [(0x11 * (r + 1)) & 0xFF for r in range(16)]
        state = state.replace(V=jnp.array(original, dtype=jnp.uint8))
        state = execute(state, 0xA400)

        state = execute(state, 0xF055 | (x << 8))
        state = state.replace(V=jnp.zeros(16, dtype=jnp.uint8))
        state = execute(state, 0xF065 | (x << 8))

        count = x + 1 if inclusive else x
        assert [int(v) for v in state.V[:count]] == original[:count]
        # Registers past the range stay cleared, memory past it stays untouched
        assert [int(v) for v in state.V[count:]] == [0] * (16 - count)
        assert int(jnp.sum(state.memory[0x400 + count:0x410])) == 0

    def test_load_registers_past_memory_end(self, fresh_state):
        state = execute(fresh_state, 0xAFFC)

        with pytest.raises(MemoryAddressOutOfRange):
            execute(state, 0xFF65)


@pytest.mark.parametrize("instruction", [0xF000, 0xF0FF, 0xF156, 0xF264, 0xE000, 0xE19F])
def test_unknown_misc_instruction_is_illegal(fresh_state, instruction):
    with pytest.raises(IllegalOpcode) as excinfo:
        execute(fresh_state, instruction)
    assert excinfo.value.word == instruction
