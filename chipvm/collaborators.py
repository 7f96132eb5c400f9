"""Interfaces the driving loop expects from input, video and audio backends."""

from typing import Protocol, Sequence

import numpy as np


class InputDevice(Protocol):
    """Source of logical key state (0x0-0xF). Physical mapping is its own concern."""

    def poll(self) -> bool:
        """Process pending events. Returns False once the user asked to quit."""
        ...

    def is_pressed(self, key: int) -> bool:
        ...

    def was_released(self, key: int) -> bool:
        """Whether the key was released since the previous poll."""
        ...

    def snapshot(self) -> Sequence[bool]:
        """Held state of all 16 keys."""
        ...


class Renderer(Protocol):
    def render(self, display: np.ndarray) -> None:
        """Draw a read-only (64, 32) boolean grid."""
        ...


class AudioDevice(Protocol):
    def beep(self, duration_ms: int) -> None:
        """Emit a tone for at most ``duration_ms`` milliseconds."""
        ...

    def silence(self) -> None:
        ...
