"""
LC-3 Emulator
=============
A fetch/decode/execute engine for the 16-bit LC-3 instruction set:
65536 words of memory, eight registers, a program counter and an N/Z/P
condition code.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌───────────┐    ┌──────────────┐
    │  Memory  │───>│ Decoder  │───>│ Handlers  │───>│ Regs / Memory│
    │ (fetch)  │    │ (layout) │    │ (ALU, EA) │    │  / CC update │
    └──────────┘    └──────────┘    └───────────┘    └──────────────┘
                                          │
                                          └──> TrapTable (external routines)

    - cpu/alu.py:     bit fields, sign extension, 16-bit arithmetic
    - cpu/regs.py:    R0–R7, PC, Condition
    - cpu/decoder.py: opcode table + the five instruction layouts
    - mem/memory.py:  checked 64K-word memory
    - traps.py:       TRAP calling convention
    - emu.py:         LC3Emulator (step / run / load / reset)
"""

__version__ = "0.1.0"

from .cpu.decoder import Opcode, IllegalOpcode, decode, disassemble
from .cpu.regs import Condition, Registers
from .emu import LC3Emulator, Outcome
from .log_setup import setup_logging
from .mem.memory import AddressError, Memory
from .traps import TrapControl, TrapTable, UnhandledTrap

__all__ = [
    "LC3Emulator",
    "Outcome",
    "Opcode",
    "IllegalOpcode",
    "decode",
    "disassemble",
    "Condition",
    "Registers",
    "Memory",
    "AddressError",
    "TrapControl",
    "TrapTable",
    "UnhandledTrap",
    "setup_logging",
]
