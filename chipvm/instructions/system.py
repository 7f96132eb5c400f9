"""CHIP-8 system instructions (0x0xxx)."""

from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction, Operation
from chipvm.display import clear_display
from chipvm.errors import IllegalOpcode
from chipvm.stack import pop


def execute_clear_screen(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00E0 - Clear display."""
    return state.replace(display=clear_display(state.display))


def execute_return(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """00EE - Return from subroutine."""
    stack, address = pop(state.stack, state.quirks.stack_policy)
    return state.replace(stack=stack, pc=address)


def execute_system_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """Dispatch system instructions."""
    if instruction.operation is Operation.CLEAR_SCREEN:
        return execute_clear_screen(state, instruction)
    if instruction.operation is Operation.RETURN:
        return execute_return(state, instruction)
    raise IllegalOpcode(instruction.raw)
