"""Main CHIP-8 emulator execution engine."""

import enum
from typing import NamedTuple

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import decode
from chipvm.constants import PROGRAM_START, MAX_PROGRAM_SIZE
from chipvm.errors import IllegalOpcode, RomTooLarge
from chipvm.ram import read_bytes, write_bytes
from chipvm.instructions.system import execute_system_instruction
from chipvm.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset, execute_skip_if_key
)
from chipvm.instructions.alu import execute_alu_operation
from chipvm.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chipvm.instructions.display import execute_display
from chipvm.instructions.misc import execute_misc_instruction, key_for_wait, complete_key_wait

# Indexed by opcode family (top nibble)
FAMILY_HANDLERS = (
    execute_system_instruction,
    execute_jump,
    execute_call,
    execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate,
    execute_skip_if_equal_register,
    execute_set,
    execute_add,
    execute_alu_operation,
    execute_skip_if_not_equal_register,
    execute_set_index,
    execute_jump_with_offset,
    execute_random,
    execute_display,
    execute_skip_if_key,
    execute_misc_instruction,
)


class StepStatus(enum.Enum):
    EXECUTED = "executed"
    AWAITING_INPUT = "awaiting_input"


class StepResult(NamedTuple):
    """Outcome of a single engine step.

    ``instruction`` is the word executed, or None when no instruction was
    fetched because the machine is still waiting for a key.
    """
    state: EmulatorState
    status: StepStatus
    instruction: int | None


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction.

    Raises:
        IllegalOpcode: the word has no meaning in the base instruction set
    """
    decoded_instruction = decode(instruction)
    return FAMILY_HANDLERS[decoded_instruction.opcode](state, decoded_instruction)


def _pack_u16(high: int, low: int) -> int:
    """Pack two bytes into uint16."""
    return (high << 8) | low


def fetch(state: EmulatorState) -> tuple[EmulatorState, int]:
    """Fetch next instruction from memory and advance the program counter."""
    high, low = (int(b) for b in read_bytes(state.memory, int(state.pc), 2))
    return state.replace(pc=jnp.astype(state.pc + 2, jnp.uint16)), _pack_u16(high, low)


def is_awaiting_input(state: EmulatorState) -> bool:
    return state.key_wait >= 0


def step(state: EmulatorState) -> StepResult:
    """Run one fetch-decode-execute cycle.

    While an FX0A is pending no instruction is fetched: the step either
    completes the wait from the current keypad snapshot or reports
    ``AWAITING_INPUT`` with the state unchanged.
    """
    if is_awaiting_input(state):
        key = key_for_wait(state)
        if key is None:
            return StepResult(state, StepStatus.AWAITING_INPUT, None)
        return StepResult(complete_key_wait(state, state.key_wait, key), StepStatus.EXECUTED, None)

    pc = int(state.pc)
    state, instruction = fetch(state)
    try:
        state = execute(state, instruction)
    except IllegalOpcode as e:
        raise type(e)(instruction, pc) from None

    status = StepStatus.AWAITING_INPUT if is_awaiting_input(state) else StepStatus.EXECUTED
    return StepResult(state, status, instruction)


def load_program(state: EmulatorState, program: bytes) -> EmulatorState:
    """Copy a raw program image into memory starting at 0x200."""
    if len(program) > MAX_PROGRAM_SIZE:
        raise RomTooLarge(len(program), MAX_PROGRAM_SIZE)
    return state.replace(memory=write_bytes(state.memory, PROGRAM_START, list(program)))


def load_rom(state: EmulatorState, filename: str) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    return load_program(state, rom_data)
