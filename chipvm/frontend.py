"""pygame window, keyboard and beeper for interactive runs."""

from typing import Sequence

import numpy as np
import pygame

from chipvm.constants import NUM_KEYS, SCREEN_WIDTH, SCREEN_HEIGHT
from chipvm.rendering import chip8_display_to_rgb, create_color_scheme

# Classic layout: the 4x4 block 1234/QWER/ASDF/ZXCV maps onto the hex keypad
#   1 2 3 C
#   4 5 6 D
#   7 8 9 E
#   A 0 B F
KEY_MAP = {
    pygame.K_1: 0x1, pygame.K_2: 0x2, pygame.K_3: 0x3, pygame.K_4: 0xC,
    pygame.K_q: 0x4, pygame.K_w: 0x5, pygame.K_e: 0x6, pygame.K_r: 0xD,
    pygame.K_a: 0x7, pygame.K_s: 0x8, pygame.K_d: 0x9, pygame.K_f: 0xE,
    pygame.K_z: 0xA, pygame.K_x: 0x0, pygame.K_c: 0xB, pygame.K_v: 0xF,
}

TONE_HZ = 440


def build_square_wave(sample_rate: int, bits: int, channels: int, frequency: int = TONE_HZ) -> np.ndarray:
    """One period of a square wave shaped for pygame.sndarray."""
    period = max(2, int(round(sample_rate / frequency)))
    amplitude = 2 ** (abs(bits) - 1) - 1
    wave = np.full(period, -amplitude, dtype=np.int16)
    wave[:period // 2] = amplitude
    if channels > 1:
        wave = np.repeat(wave[:, None], channels, axis=1)
    return wave


class PygameFrontend:
    """Window, keyboard and audio backed by pygame."""

    def __init__(self, scale: int = 10, color_scheme: str = "classic", title: str = "chipvm"):
        pygame.init()
        self.scale = scale
        self.on_color, self.off_color = create_color_scheme(color_scheme)
        self.screen = pygame.display.set_mode((SCREEN_WIDTH * scale, SCREEN_HEIGHT * scale))
        pygame.display.set_caption(title)

        self.held = [False] * NUM_KEYS
        self.released = [False] * NUM_KEYS
        self.tone = self._build_tone()

    def _build_tone(self):
        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init()
            except pygame.error:
                return None
        sample_rate, bits, channels = pygame.mixer.get_init()
        return pygame.sndarray.make_sound(build_square_wave(sample_rate, bits, channels))

    def poll(self) -> bool:
        self.released = [False] * NUM_KEYS
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    return False
                if event.key in KEY_MAP:
                    self.held[KEY_MAP[event.key]] = True
            elif event.type == pygame.KEYUP and event.key in KEY_MAP:
                key = KEY_MAP[event.key]
                self.held[key] = False
                self.released[key] = True
        return True

    def is_pressed(self, key: int) -> bool:
        return self.held[key]

    def was_released(self, key: int) -> bool:
        return self.released[key]

    def snapshot(self) -> Sequence[bool]:
        return tuple(self.held)

    def render(self, display: np.ndarray) -> None:
        frame = chip8_display_to_rgb(display, self.scale, self.on_color, self.off_color)
        # surfarray expects (width, height, 3)
        pygame.surfarray.blit_array(self.screen, frame.swapaxes(0, 1))
        pygame.display.flip()

    def beep(self, duration_ms: int) -> None:
        if self.tone is not None and self.tone.get_num_channels() == 0:
            self.tone.play(loops=-1, maxtime=duration_ms)

    def silence(self) -> None:
        if self.tone is not None:
            self.tone.stop()

    def close(self) -> None:
        pygame.quit()
