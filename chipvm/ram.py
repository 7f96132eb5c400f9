"""Bounds-checked access to the 4KB CHIP-8 address space."""

from typing import Sequence

import jax.numpy as jnp

from chipvm.constants import MEMORY_SIZE
from chipvm.errors import MemoryAddressOutOfRange


def check_range(address: int, length: int = 1) -> None:
    """Raise if [address, address + length) leaves the address space."""
    if address < 0 or length < 0 or address + length > MEMORY_SIZE:
        raise MemoryAddressOutOfRange(address, length)


def read_byte(memory: jnp.ndarray, address: int) -> int:
    check_range(address)
    return int(memory[address])


def read_bytes(memory: jnp.ndarray, address: int, length: int) -> jnp.ndarray:
    check_range(address, length)
    return memory[address:address + length]


def write_bytes(memory: jnp.ndarray, address: int, values: Sequence[int] | jnp.ndarray) -> jnp.ndarray:
    """Return a copy of memory with values written starting at address."""
    values = jnp.asarray(values, dtype=jnp.uint8)
    check_range(address, values.shape[0])
    return memory.at[address:address + values.shape[0]].set(values)
