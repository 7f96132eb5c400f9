"""CHIP-8 ALU operations (8xxx).

Each operation takes the current VX and VY and returns the new VX together
with the new VF, or ``None`` when the operation leaves VF alone.
"""

from typing import Optional

from chipvm.constants import FLAG_REGISTER
from chipvm.state import EmulatorState
from chipvm.decode import DecodedInstruction, Operation
from chipvm.errors import IllegalOpcode


def alu_set(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY0 - Set: VX = VY."""
    return vy, None


def alu_or(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy, None


def alu_and(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy, None


def alu_xor(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy, None


def alu_add(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = vx + vy
    return result & 0xFF, int(result > 0xFF)


def alu_sub_xy(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY5 - Subtract: VX -= VY. VF is 1 when no borrow occurs."""
    return (vx - vy) & 0xFF, int(vx >= vy)


def alu_shift_right(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY6 - Shift right: VX >>= 1."""
    return vx >> 1, vx & 1


def alu_sub_yx(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XY7 - Subtract: VX = VY - VX. VF is 1 when no borrow occurs."""
    return (vy - vx) & 0xFF, int(vy >= vx)


def alu_shift_left(vx: int, vy: int) -> tuple[int, Optional[int]]:
    """8XYE - Shift left: VX <<= 1."""
    return (vx << 1) & 0xFF, (vx & 0x80) >> 7


ALU_OPERATIONS = {
    Operation.ALU_SET: alu_set,
    Operation.ALU_OR: alu_or,
    Operation.ALU_AND: alu_and,
    Operation.ALU_XOR: alu_xor,
    Operation.ALU_ADD: alu_add,
    Operation.ALU_SUB_XY: alu_sub_xy,
    Operation.ALU_SHIFT_RIGHT: alu_shift_right,
    Operation.ALU_SUB_YX: alu_sub_yx,
    Operation.ALU_SHIFT_LEFT: alu_shift_left,
}

_LOGIC_OPERATIONS = (Operation.ALU_OR, Operation.ALU_AND, Operation.ALU_XOR)
_SHIFT_OPERATIONS = (Operation.ALU_SHIFT_RIGHT, Operation.ALU_SHIFT_LEFT)


def execute_alu_operation(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYN - ALU operations dispatcher."""
    alu_fn = ALU_OPERATIONS.get(instruction.operation)
    if alu_fn is None:
        raise IllegalOpcode(instruction.raw)

    vx = int(state.V[instruction.x])
    vy = int(state.V[instruction.y])
    quirks = state.quirks

    if quirks.shift_uses_vy and instruction.operation in _SHIFT_OPERATIONS:
        vx = vy

    result, vf = alu_fn(vx, vy)
    if quirks.logic_resets_vf and instruction.operation in _LOGIC_OPERATIONS:
        vf = 0

    # VF is written last so the flag wins when X is F
    new_V = state.V.at[instruction.x].set(result)
    if vf is not None:
        new_V = new_V.at[FLAG_REGISTER].set(vf)
    return state.replace(V=new_V)
