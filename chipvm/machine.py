"""Driving loop that ties the engine to timers and external collaborators."""

import time
from typing import Callable, Optional

import jax

from chipvm.collaborators import AudioDevice, InputDevice, Renderer
from chipvm.config import EmulatorConfig
from chipvm.constants import NUM_KEYS
from chipvm.display import display_snapshot
from chipvm.emulator import StepStatus, load_program, step
from chipvm.errors import Chip8Error
from chipvm.keypad import set_keys
from chipvm.logging import EmulatorLogger, build_progress_bar
from chipvm.state import EmulatorState, create_state
from chipvm.timers import TimerClock, sound_active


class Machine:
    """Owns one emulator state and advances it a frame at a time.

    Each frame polls input, runs up to ``instructions_per_frame`` instructions,
    ticks the timers, drives the beeper and hands the display to the renderer.
    A fault halts the machine and keeps the last frame on screen, unless the
    config asks for it to be re-raised.
    """

    def __init__(
        self,
        config: EmulatorConfig = EmulatorConfig(),
        state: Optional[EmulatorState] = None,
        input_device: Optional[InputDevice] = None,
        renderer: Optional[Renderer] = None,
        audio: Optional[AudioDevice] = None,
        logger: Optional[EmulatorLogger] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        if state is None:
            state = create_state(jax.random.PRNGKey(config.seed), config.quirks)
        self.state = state
        self.input_device = input_device
        self.renderer = renderer
        self.audio = audio
        self.logger = logger if logger is not None else EmulatorLogger(log_level=config.log_level)
        self.timers = TimerClock(config.timer_hz, clock)

        self.halted = False
        self.fault: Optional[Chip8Error] = None
        self.instruction_count = 0
        self.frame_count = 0

    def load(self, program: bytes, name: str = "<program>") -> None:
        self.state = load_program(self.state, program)
        self.logger.log_rom_loaded(name, len(program))

    def load_file(self, filename: str) -> None:
        with open(filename, 'rb') as f:
            self.load(f.read(), filename)

    def _poll_input(self) -> bool:
        if self.input_device is None:
            return True
        running = self.input_device.poll()
        released = [self.input_device.was_released(key) for key in range(NUM_KEYS)]
        self.state = set_keys(self.state, self.input_device.snapshot(), released)
        return running

    def _run_instructions(self) -> None:
        for _ in range(self.config.instructions_per_frame):
            pc = int(self.state.pc)
            try:
                result = step(self.state)
            except Chip8Error as e:
                self._halt(e, pc)
                return
            self.state = result.state
            if result.status is StepStatus.AWAITING_INPUT:
                return
            if result.instruction is not None:
                self.instruction_count += 1
                if self.config.trace:
                    self.logger.log_trace(pc, result.instruction)

    def _halt(self, error: Chip8Error, pc: int) -> None:
        self.halted = True
        self.fault = error
        self.logger.log_fault(error, pc)
        if self.config.on_fault == "raise":
            raise error

    def run_frame(self) -> bool:
        """Advance one frame. Returns False when the machine should stop."""
        running = self._poll_input()
        sounding = False
        if not self.halted:
            self._run_instructions()
            # Sampled before the tick so a tone shorter than a frame still plays
            sounding = sound_active(self.state)
            self.state = self.timers.update(self.state)

        if self.audio is not None:
            if sounding and not self.halted:
                self.audio.beep(int(1000 / self.config.fps))
            else:
                self.audio.silence()

        if self.renderer is not None:
            self.renderer.render(display_snapshot(self.state.display))

        self.frame_count += 1
        self.logger.log_stats(self.instruction_count, self.frame_count)
        # Interactive runs keep showing the last frame after a fault
        return running and not (self.halted and self.renderer is None)

    def run(self, frames: Optional[int] = None, sleep: Callable[[float], None] = time.sleep) -> None:
        """Run at the configured frame rate until quit, fault or ``frames`` frames."""
        frame_period = 1.0 / self.config.fps
        while frames is None or self.frame_count < frames:
            start_time = time.monotonic()
            if not self.run_frame():
                break
            remaining = frame_period - (time.monotonic() - start_time)
            if remaining > 0:
                sleep(remaining)

    def run_headless(self, frames: int, progress: bool = True) -> None:
        """Run ``frames`` frames as fast as possible.

        Timers follow emulated frames rather than wall-clock time, so a
        headless run is reproducible for a given seed.
        """
        self.timers = TimerClock(self.config.timer_hz / self.config.fps, clock=lambda: self.frame_count)
        with build_progress_bar(frames, disable=not progress) as bar:
            for _ in range(frames):
                if not self.run_frame():
                    break
                bar.update(1)
