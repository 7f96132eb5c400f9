"""CHIP-8 display buffer.

The display is a (64, 32) boolean array indexed ``[x, y]``. Only the clear and
draw instructions modify it.
"""

from typing import Sequence

import jax.numpy as jnp
import numpy as np

from chipvm.constants import SCREEN_WIDTH, SCREEN_HEIGHT, SPRITE_WIDTH

# Pre-computed coordinate grids for display operations
xx, yy = jnp.meshgrid(jnp.arange(SCREEN_WIDTH), jnp.arange(SCREEN_HEIGHT), indexing='ij')


def clear_display(display: jnp.ndarray) -> jnp.ndarray:
    """Return an all-off display of the same shape."""
    return jnp.zeros_like(display)


def sprite_mask(x: int, y: int, sprite: Sequence[int] | jnp.ndarray) -> jnp.ndarray:
    """Screen-sized mask of the pixels a sprite toggles.

    The origin wraps onto the screen, but pixels that would spill past the
    right or bottom edge are clipped.
    """
    sprite = jnp.asarray(sprite, dtype=jnp.uint8)
    height = sprite.shape[0]
    if height == 0:
        return jnp.zeros((SCREEN_WIDTH, SCREEN_HEIGHT), dtype=jnp.bool_)

    sprite_x = x % SCREEN_WIDTH
    sprite_y = y % SCREEN_HEIGHT
    in_sprite = (
        (xx >= sprite_x) & (xx < sprite_x + SPRITE_WIDTH) &
        (yy >= sprite_y) & (yy < sprite_y + height)
    )

    row_offset = jnp.clip(yy - sprite_y, 0, height - 1)
    bit_offset = jnp.clip(SPRITE_WIDTH - 1 - (xx - sprite_x), 0, SPRITE_WIDTH - 1)
    bits = (sprite[row_offset].astype(jnp.int32) >> bit_offset) & 1
    return bits.astype(jnp.bool_) & in_sprite


def draw_sprite(
    display: jnp.ndarray, x: int, y: int, sprite: Sequence[int] | jnp.ndarray
) -> tuple[jnp.ndarray, bool]:
    """XOR a sprite onto the display.

    Returns:
        The new display and whether any pixel was switched from on to off
    """
    mask = sprite_mask(x, y, sprite)
    collision = bool(jnp.any(display & mask))
    return display ^ mask, collision


def display_snapshot(display: jnp.ndarray) -> np.ndarray:
    """Read-only host copy of the display for renderers."""
    pixels = np.array(display, dtype=np.bool_)
    pixels.setflags(write=False)
    return pixels
