"""
LC-3 Emulator — Bit Fields + ALU Operations

Bit positions are 1-based from the least-significant bit, the way the
instruction layouts are written down: ``get_bits(word, 3, 10)`` is the
DR field (bits [11:9]).

Every signed operand field goes through ``sign_extend`` before it is
used, whatever the opcode: imm5 (ADD/AND), offset6 (LDR/STR) and
pcoffset9 (LD/ST/LDI/STI/LEA/BR).

The arithmetic functions return ``(result, cc)`` where ``result`` is
the signed 16-bit value to store and ``cc`` the condition code it
produces. The caller decides whether to apply it.
"""

from .regs import Condition, CC_N, CC_Z, CC_P, to_signed16


def get_bits(word: int, k: int, p: int) -> int:
    """Extract ``k`` bits starting at 1-based bit position ``p``."""
    return ((1 << k) - 1) & (word >> (p - 1))


def sign_extend(value: int, bits: int) -> int:
    """Widen a ``bits``-wide two's complement field to a Python int.

    >>> sign_extend(0b10001, 5)
    -15
    """
    value &= (1 << bits) - 1
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value


def to_unsigned16(value: int) -> int:
    """Unsigned view of a 16-bit word, used when a word is an address."""
    return value & 0xFFFF


def condition_of(value: int) -> Condition:
    """Condition code for a signed 16-bit value."""
    if value < 0:
        return CC_N
    if value == 0:
        return CC_Z
    return CC_P


# ══════════════════════════════════════════════
# 16-bit ALU functions — return (result, cc)
# ══════════════════════════════════════════════

def add16(a: int, b: int) -> tuple:
    """Add with 16-bit wraparound."""
    result = to_signed16(a + b)
    return (result, condition_of(result))


def and16(a: int, b: int) -> tuple:
    """Bitwise AND."""
    result = to_signed16(a & b)
    return (result, condition_of(result))


def not16(a: int) -> tuple:
    """Bitwise complement."""
    result = to_signed16(~a)
    return (result, condition_of(result))


def load16(value: int) -> tuple:
    """Pass a loaded value through unchanged, computing its condition code."""
    result = to_signed16(value)
    return (result, condition_of(result))
