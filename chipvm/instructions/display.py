"""CHIP-8 display operations."""

from chipvm.constants import FLAG_REGISTER
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction
from chipvm.display import draw_sprite
from chipvm.ram import read_bytes


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N."""
    sprite = read_bytes(state.memory, int(state.I), instruction.n)
    display, collision = draw_sprite(
        state.display, int(state.V[instruction.x]), int(state.V[instruction.y]), sprite
    )
    return state.replace(
        display=display,
        V=state.V.at[FLAG_REGISTER].set(int(collision))
    )
