"""CHIP-8 stack operations."""

import jax.numpy as jnp
from chipvm.constants import ADDRESS_MASK, STACK_SIZE
from chipvm.errors import StackOverflow, StackUnderflow
from chipvm.state import StackState


def push(stack: StackState, address: jnp.ndarray, policy: str = "wrap") -> StackState:
    """Push address onto stack.

    With the "wrap" policy a 17th nested push lands in the oldest slot.
    """
    if policy == "raise" and stack.depth >= STACK_SIZE:
        raise StackOverflow(f"Call stack exceeded {STACK_SIZE} frames")
    masked_address = jnp.astype(address, jnp.uint16) & ADDRESS_MASK
    new_data = stack.data.at[stack.pointer].set(masked_address)
    return stack.replace(
        data=new_data,
        pointer=(stack.pointer + 1) % STACK_SIZE,
        depth=min(stack.depth + 1, STACK_SIZE),
    )


def pop(stack: StackState, policy: str = "wrap") -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    if policy == "raise" and stack.depth == 0:
        raise StackUnderflow("Return without a matching call")
    new_pointer = (stack.pointer - 1) % STACK_SIZE
    popped_address = stack.data[new_pointer]
    return stack.replace(pointer=new_pointer, depth=max(stack.depth - 1, 0)), popped_address
