"""Mnemonics for CHIP-8 instruction words, used by the instruction trace."""

from typing import Iterator

from chipvm.constants import PROGRAM_START
from chipvm.decode import DecodedInstruction, Operation, decode
from chipvm.errors import DecodeError

# Format strings over the decoded operand fields
MNEMONICS = {
    Operation.CLEAR_SCREEN: "CLS",
    Operation.RETURN: "RET",
    Operation.JUMP: "JP 0x{nnn:03X}",
    Operation.CALL: "CALL 0x{nnn:03X}",
    Operation.SKIP_IF_EQUAL_IMMEDIATE: "SE V{x:X}, 0x{nn:02X}",
    Operation.SKIP_IF_NOT_EQUAL_IMMEDIATE: "SNE V{x:X}, 0x{nn:02X}",
    Operation.SKIP_IF_EQUAL_REGISTER: "SE V{x:X}, V{y:X}",
    Operation.SET: "LD V{x:X}, 0x{nn:02X}",
    Operation.ADD: "ADD V{x:X}, 0x{nn:02X}",
    Operation.ALU_SET: "LD V{x:X}, V{y:X}",
    Operation.ALU_OR: "OR V{x:X}, V{y:X}",
    Operation.ALU_AND: "AND V{x:X}, V{y:X}",
    Operation.ALU_XOR: "XOR V{x:X}, V{y:X}",
    Operation.ALU_ADD: "ADD V{x:X}, V{y:X}",
    Operation.ALU_SUB_XY: "SUB V{x:X}, V{y:X}",
    Operation.ALU_SHIFT_RIGHT: "SHR V{x:X}",
    Operation.ALU_SUB_YX: "SUBN V{x:X}, V{y:X}",
    Operation.ALU_SHIFT_LEFT: "SHL V{x:X}",
    Operation.SKIP_IF_NOT_EQUAL_REGISTER: "SNE V{x:X}, V{y:X}",
    Operation.SET_INDEX: "LD I, 0x{nnn:03X}",
    Operation.JUMP_WITH_OFFSET: "JP V0, 0x{nnn:03X}",
    Operation.RANDOM: "RND V{x:X}, 0x{nn:02X}",
    Operation.DISPLAY: "DRW V{x:X}, V{y:X}, {n}",
    Operation.SKIP_IF_KEY: "SKP V{x:X}",
    Operation.SKIP_IF_NOT_KEY: "SKNP V{x:X}",
    Operation.GET_DELAY_TIMER: "LD V{x:X}, DT",
    Operation.WAIT_FOR_KEY: "LD V{x:X}, K",
    Operation.SET_DELAY_TIMER: "LD DT, V{x:X}",
    Operation.SET_SOUND_TIMER: "LD ST, V{x:X}",
    Operation.ADD_TO_INDEX: "ADD I, V{x:X}",
    Operation.FONT_CHARACTER: "LD F, V{x:X}",
    Operation.BCD_CONVERSION: "LD B, V{x:X}",
    Operation.STORE_REGISTERS: "LD [I], V{x:X}",
    Operation.LOAD_REGISTERS: "LD V{x:X}, [I]",
}


def format_instruction(instruction: DecodedInstruction) -> str:
    return MNEMONICS[instruction.operation].format(
        x=instruction.x, y=instruction.y, n=instruction.n, nn=instruction.nn, nnn=instruction.nnn
    )


def disassemble(word: int) -> str:
    """Mnemonic for a word; undecodable words come back as ``DATA 0xWWWW``."""
    try:
        return format_instruction(decode(word))
    except DecodeError:
        return f"DATA 0x{word & 0xFFFF:04X}"


def disassemble_program(program: bytes, origin: int = PROGRAM_START) -> Iterator[tuple[int, int, str]]:
    """Yield (address, word, mnemonic) for each aligned word of a program image.

    A trailing odd byte is padded with zero.
    """
    for offset in range(0, len(program), 2):
        high = program[offset]
        low = program[offset + 1] if offset + 1 < len(program) else 0
        word = (high << 8) | low
        yield origin + offset, word, disassemble(word)
