"""CHIP-8 instruction decoding.

Decoding is two-level: the top nibble selects an opcode family, and the
families 0x0, 0x8, 0xE and 0xF are resolved further on their low byte or low
nibble. Every word that decodes successfully maps to exactly one
:class:`Operation`; everything else raises :class:`DecodeError`.
"""

import enum

from chex import dataclass

from chipvm.errors import DecodeError


class Operation(enum.Enum):
    """Every instruction form of the base CHIP-8 set."""
    CLEAR_SCREEN = "00E0"
    RETURN = "00EE"
    JUMP = "1NNN"
    CALL = "2NNN"
    SKIP_IF_EQUAL_IMMEDIATE = "3XNN"
    SKIP_IF_NOT_EQUAL_IMMEDIATE = "4XNN"
    SKIP_IF_EQUAL_REGISTER = "5XY0"
    SET = "6XNN"
    ADD = "7XNN"
    ALU_SET = "8XY0"
    ALU_OR = "8XY1"
    ALU_AND = "8XY2"
    ALU_XOR = "8XY3"
    ALU_ADD = "8XY4"
    ALU_SUB_XY = "8XY5"
    ALU_SHIFT_RIGHT = "8XY6"
    ALU_SUB_YX = "8XY7"
    ALU_SHIFT_LEFT = "8XYE"
    SKIP_IF_NOT_EQUAL_REGISTER = "9XY0"
    SET_INDEX = "ANNN"
    JUMP_WITH_OFFSET = "BNNN"
    RANDOM = "CXNN"
    DISPLAY = "DXYN"
    SKIP_IF_KEY = "EX9E"
    SKIP_IF_NOT_KEY = "EXA1"
    GET_DELAY_TIMER = "FX07"
    WAIT_FOR_KEY = "FX0A"
    SET_DELAY_TIMER = "FX15"
    SET_SOUND_TIMER = "FX18"
    ADD_TO_INDEX = "FX1E"
    FONT_CHARACTER = "FX29"
    BCD_CONVERSION = "FX33"
    STORE_REGISTERS = "FX55"
    LOAD_REGISTERS = "FX65"


# Families that need no secondary dispatch
_FAMILY_OPERATIONS = {
    0x1: Operation.JUMP,
    0x2: Operation.CALL,
    0x3: Operation.SKIP_IF_EQUAL_IMMEDIATE,
    0x4: Operation.SKIP_IF_NOT_EQUAL_IMMEDIATE,
    0x5: Operation.SKIP_IF_EQUAL_REGISTER,
    0x6: Operation.SET,
    0x7: Operation.ADD,
    0x9: Operation.SKIP_IF_NOT_EQUAL_REGISTER,
    0xA: Operation.SET_INDEX,
    0xB: Operation.JUMP_WITH_OFFSET,
    0xC: Operation.RANDOM,
    0xD: Operation.DISPLAY,
}

_SYSTEM_OPERATIONS = {
    0x00E0: Operation.CLEAR_SCREEN,
    0x00EE: Operation.RETURN,
}

# Keyed on the low nibble
_ALU_OPERATIONS = {
    0x0: Operation.ALU_SET,
    0x1: Operation.ALU_OR,
    0x2: Operation.ALU_AND,
    0x3: Operation.ALU_XOR,
    0x4: Operation.ALU_ADD,
    0x5: Operation.ALU_SUB_XY,
    0x6: Operation.ALU_SHIFT_RIGHT,
    0x7: Operation.ALU_SUB_YX,
    0xE: Operation.ALU_SHIFT_LEFT,
}

# Keyed on the low byte
_KEY_OPERATIONS = {
    0x9E: Operation.SKIP_IF_KEY,
    0xA1: Operation.SKIP_IF_NOT_KEY,
}

_MISC_OPERATIONS = {
    0x07: Operation.GET_DELAY_TIMER,
    0x0A: Operation.WAIT_FOR_KEY,
    0x15: Operation.SET_DELAY_TIMER,
    0x18: Operation.SET_SOUND_TIMER,
    0x1E: Operation.ADD_TO_INDEX,
    0x29: Operation.FONT_CHARACTER,
    0x33: Operation.BCD_CONVERSION,
    0x55: Operation.STORE_REGISTERS,
    0x65: Operation.LOAD_REGISTERS,
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    raw: int
    opcode: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)
    operation: Operation


def resolve_operation(instruction: int) -> Operation:
    """Map a 16-bit word to its instruction form."""
    opcode = (instruction & 0xF000) >> 12
    if opcode == 0x0:
        operation = _SYSTEM_OPERATIONS.get(instruction)
    elif opcode == 0x8:
        operation = _ALU_OPERATIONS.get(instruction & 0x000F)
    elif opcode == 0xE:
        operation = _KEY_OPERATIONS.get(instruction & 0x00FF)
    elif opcode == 0xF:
        operation = _MISC_OPERATIONS.get(instruction & 0x00FF)
    else:
        operation = _FAMILY_OPERATIONS[opcode]

    if operation is None:
        raise DecodeError(instruction)
    return operation


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = int(instruction) & 0xFFFF
    return DecodedInstruction(
        raw=instruction,
        opcode=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF,
        operation=resolve_operation(instruction),
    )
