"""Tests for rendering helpers."""

import numpy as np
import pytest
from chipvm import chip8_display_to_rgb, create_color_scheme, display_to_ascii


def test_display_to_rgb_shape_and_colors(fresh_state):
    display = fresh_state.display.at[1, 0].set(True)

    frame = chip8_display_to_rgb(display, scale=2, on_color=(1, 2, 3), off_color=(0, 0, 0))

    assert frame.shape == (64, 128, 3)
    assert frame.dtype == np.uint8
    # Pixel (x=1, y=0) covers rows 0-1, columns 2-3
    assert tuple(frame[0, 2]) == (1, 2, 3)
    assert tuple(frame[1, 3]) == (1, 2, 3)
    assert tuple(frame[0, 0]) == (0, 0, 0)


def test_color_schemes():
    assert create_color_scheme("classic") == ((0, 255, 0), (0, 0, 0))
    with pytest.raises(ValueError):
        create_color_scheme("neon")


def test_display_to_ascii(fresh_state):
    display = fresh_state.display.at[0, 0].set(True).at[63, 31].set(True)

    lines = display_to_ascii(display).splitlines()

    assert len(lines) == 32
    assert lines[0] == "#" + "." * 63
    assert lines[31] == "." * 63 + "#"
