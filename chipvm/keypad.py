"""Input snapshot for the 16-key hexadecimal keypad."""

from typing import Iterable, Optional

import jax.numpy as jnp

from chipvm.constants import NUM_KEYS
from chipvm.state import EmulatorState


def set_keys(
    state: EmulatorState,
    held: Iterable[bool],
    released: Optional[Iterable[bool]] = None,
) -> EmulatorState:
    """Replace the keypad snapshot.

    When ``released`` is omitted it is derived from keys that were held in the
    previous snapshot and are no longer held.
    """
    held = jnp.asarray(list(held), dtype=jnp.bool_)
    if held.shape != (NUM_KEYS,):
        raise ValueError(f"Expected {NUM_KEYS} key states, got shape {held.shape}")
    if released is None:
        released = state.keypad & ~held
    else:
        released = jnp.asarray(list(released), dtype=jnp.bool_)
    return state.replace(keypad=held, keypad_released=released)


def press_key(state: EmulatorState, key: int) -> EmulatorState:
    """Mark a single key as held, for event-driven input sources."""
    return set_keys(state, state.keypad.at[key & 0xF].set(True))


def release_key(state: EmulatorState, key: int) -> EmulatorState:
    """Mark a single key as no longer held."""
    return set_keys(state, state.keypad.at[key & 0xF].set(False))


def is_pressed(state: EmulatorState, key: int) -> bool:
    return bool(state.keypad[key & 0xF])


def first_key(keys: jnp.ndarray) -> Optional[int]:
    """Lowest key code set in a mask, or None."""
    if not bool(jnp.any(keys)):
        return None
    return int(jnp.argmax(keys))
