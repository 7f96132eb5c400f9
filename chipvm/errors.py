"""Faults raised by the CHIP-8 core.

The core never logs: every fault propagates to the driving loop, which decides
whether to halt, hold the last frame, or re-raise.
"""


class Chip8Error(Exception):
    """Base class for all emulator faults."""


class IllegalOpcode(Chip8Error):
    """Instruction word with no meaning in the base instruction set."""

    def __init__(self, word: int, address: int | None = None):
        self.word = word
        self.address = address
        location = f" at 0x{address:03X}" if address is not None else ""
        super().__init__(f"Illegal opcode 0x{word:04X}{location}")


class DecodeError(IllegalOpcode):
    """Raised by the decoder when a dispatching family has no matching sub-form."""


class MemoryAddressOutOfRange(Chip8Error):
    """Read or write outside the 4KB address space."""

    def __init__(self, address: int, length: int = 1):
        self.address = address
        self.length = length
        super().__init__(
            f"Memory access out of range: 0x{address:04X} (+{length} bytes)"
        )


class RomTooLarge(Chip8Error):
    """Program image does not fit between 0x200 and the end of memory."""

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(f"ROM is {size} bytes, only {capacity} bytes available")


class StackOverflow(Chip8Error):
    """Call nested deeper than the 16 stack slots."""


class StackUnderflow(Chip8Error):
    """Return with no matching call."""
