"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax.numpy as jnp
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction, Operation
from chipvm.constants import FONT_START, FONT_GLYPH_SIZE
from chipvm.errors import IllegalOpcode
from chipvm.keypad import first_key
from chipvm.ram import read_bytes, write_bytes


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register, wrapping at 16 bits. VF is not touched."""
    new_i = (int(state.I) + int(state.V[instruction.x])) & 0xFFFF
    return state.replace(I=jnp.astype(new_i, jnp.uint16))


def key_for_wait(state: EmulatorState):
    """Key that completes a pending FX0A, or None."""
    keys = state.keypad_released if state.quirks.key_wait_on_release else state.keypad
    return first_key(keys)


def complete_key_wait(state: EmulatorState, register: int, key: int) -> EmulatorState:
    return state.replace(V=state.V.at[register].set(key), key_wait=-1)


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    Does not block: when no key is available the state records the waiting
    register and the engine reports that it is awaiting input.
    """
    key = key_for_wait(state)
    if key is None:
        return state.replace(key_wait=instruction.x)
    return complete_key_wait(state, instruction.x, key)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    digit = int(state.V[instruction.x]) & 0xF
    return state.replace(I=jnp.astype(FONT_START + digit * FONT_GLYPH_SIZE, jnp.uint16))


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store BCD representation of VX at I, I+1, I+2."""
    value = int(state.V[instruction.x])
    digits = [value // 100, (value // 10) % 10, value % 10]
    return state.replace(memory=write_bytes(state.memory, int(state.I), digits))


def _register_count(state: EmulatorState, instruction: DecodedInstruction) -> int:
    return instruction.x + 1 if state.quirks.store_load_inclusive else instruction.x


def _advance_index(state: EmulatorState, count: int) -> EmulatorState:
    if not state.quirks.store_load_increments_index:
        return state
    return state.replace(I=jnp.astype((int(state.I) + count) & 0xFFFF, jnp.uint16))


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I."""
    count = _register_count(state, instruction)
    new_memory = write_bytes(state.memory, int(state.I), state.V[:count])
    return _advance_index(state.replace(memory=new_memory), count)


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I."""
    count = _register_count(state, instruction)
    values = read_bytes(state.memory, int(state.I), count)
    new_V = state.V.at[:count].set(values)
    return _advance_index(state.replace(V=new_V), count)


MISC_INSTRUCTIONS = {
    Operation.GET_DELAY_TIMER: execute_get_delay_timer,
    Operation.WAIT_FOR_KEY: execute_wait_for_key,
    Operation.SET_DELAY_TIMER: execute_set_delay_timer,
    Operation.SET_SOUND_TIMER: execute_set_sound_timer,
    Operation.ADD_TO_INDEX: execute_add_to_index,
    Operation.FONT_CHARACTER: execute_font_character,
    Operation.BCD_CONVERSION: execute_bcd_conversion,
    Operation.STORE_REGISTERS: execute_store_registers,
    Operation.LOAD_REGISTERS: execute_load_registers,
}


def execute_misc_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch misc instructions on the decoded sub-form."""
    handler = MISC_INSTRUCTIONS.get(instruction.operation)
    if handler is None:
        raise IllegalOpcode(instruction.raw)
    return handler(state, instruction)
