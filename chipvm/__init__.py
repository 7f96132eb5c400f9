"""CHIP-8 virtual machine package."""

from chipvm.state import EmulatorState, create_state
from chipvm.emulator import execute, fetch, step, load_rom, load_program, StepStatus, StepResult
from chipvm.decode import DecodedInstruction, Operation, decode
from chipvm.config import EmulatorConfig, Quirks
from chipvm.errors import (
    Chip8Error, IllegalOpcode, DecodeError, MemoryAddressOutOfRange, RomTooLarge,
    StackOverflow, StackUnderflow
)
from chipvm.constants import *
from chipvm.rendering import chip8_display_to_rgb, create_color_scheme, display_to_ascii

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "load_rom",
    "load_program",
    "StepStatus",
    "StepResult",
    "DecodedInstruction",
    "Operation",
    "decode",
    "EmulatorConfig",
    "Quirks",
    "Chip8Error",
    "IllegalOpcode",
    "DecodeError",
    "MemoryAddressOutOfRange",
    "RomTooLarge",
    "StackOverflow",
    "StackUnderflow",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "TIMER_HZ",
    "chip8_display_to_rgb",
    "create_color_scheme",
    "display_to_ascii",
]
