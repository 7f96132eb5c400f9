"""Instruction handlers grouped by opcode family."""
