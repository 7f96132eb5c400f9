"""Test configuration and fixtures for CHIP-8 emulator tests."""

import pytest
import jax.numpy as jnp
from chipvm import create_state, Quirks


@pytest.fixture
def fresh_state():
    """Provide a fresh emulator state for each test."""
    return create_state()


@pytest.fixture
def modern_state():
    """Provide a fresh state with BXNN jump semantics."""
    return create_state(quirks=Quirks(jump_offset_uses_vx=True))


@pytest.fixture
def legacy_state():
    """Provide a fresh state with COSMAC VIP behaviour."""
    return create_state(quirks=Quirks(
        shift_uses_vy=True,
        logic_resets_vf=True,
        store_load_increments_index=True,
        key_wait_on_release=True,
    ))


def setup_sprite_in_memory(state, address, sprite_bytes):
    """Helper to put sprite data in memory."""
    return state.replace(
        memory=state.memory.at[address:address+len(sprite_bytes)].set(
            jnp.array(sprite_bytes, dtype=jnp.uint8)
        )
    )


def set_registers(state, **registers):
    """Helper to set registers by name, e.g. ``set_registers(state, V1=0x10, VF=1)``."""
    V = state.V
    for name, value in registers.items():
        V = V.at[int(name[1:], 16)].set(value)
    return state.replace(V=V)
