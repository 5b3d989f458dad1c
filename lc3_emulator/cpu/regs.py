"""
LC-3 Emulator — CPU Register Set + Condition Code

Register model:
  R0–R7  — eight 16-bit general-purpose registers (signed view)
  PC     — program counter, address of the next instruction to fetch
  CC     — condition code, exactly one of N / Z / P after any
           register-writing instruction

The condition code is a single field rather than three booleans. The
bit values line up with the n/z/p bits of the BR instruction (bit 11,
10, 9 of the word), so a branch test is just ``Condition(nzp) & cc``.
"""

import enum

from .. import config


class Condition(enum.IntFlag):
    """Condition code. At most one member is ever set."""

    POSITIVE = 0b001
    ZERO = 0b010
    NEGATIVE = 0b100


CC_NONE = Condition(0)
CC_P = Condition.POSITIVE
CC_Z = Condition.ZERO
CC_N = Condition.NEGATIVE


def to_signed16(value: int) -> int:
    """Fold any integer into the signed 16-bit range (modulo 2**16)."""
    value &= config.WORD_MASK
    return value - 0x10000 if value & 0x8000 else value


class Registers:
    """LC-3 CPU register set.

    Indexing (``regs[3] = -1``) always stores the signed 16-bit view of
    the value, so callers never have to mask.
    """

    __slots__ = ('R', 'PC', 'CC')

    def __init__(self):
        self.R = [0] * config.NUM_REGISTERS
        self.PC: int = 0
        self.CC: Condition = CC_NONE

    def __getitem__(self, index: int) -> int:
        return self.R[self._check(index)]

    def __setitem__(self, index: int, value: int):
        self.R[self._check(index)] = to_signed16(value)

    @staticmethod
    def _check(index: int) -> int:
        if not 0 <= index < config.NUM_REGISTERS:
            raise IndexError(f"No register R{index}")
        return index

    # --- Condition code access ---

    def set_cc(self, cc: Condition):
        self.CC = Condition(cc)

    @property
    def negative(self) -> bool:
        return bool(self.CC & CC_N)

    @property
    def zero(self) -> bool:
        return bool(self.CC & CC_Z)

    @property
    def positive(self) -> bool:
        return bool(self.CC & CC_P)

    # --- Display ---

    def display(self) -> str:
        """Format register state for trace output."""
        cc_str = ''.join(
            c if self.CC & flag else '.'
            for c, flag in (('N', CC_N), ('Z', CC_Z), ('P', CC_P))
        )
        regs = ' '.join(f"R{i}=x{r & config.WORD_MASK:04X}" for i, r in enumerate(self.R))
        return f"PC=x{self.PC:04X} {regs} CC=[{cc_str}]"

    def reset(self):
        """Zero everything, condition code included."""
        self.R = [0] * config.NUM_REGISTERS
        self.PC = 0
        self.CC = CC_NONE
