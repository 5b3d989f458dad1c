"""
Unit tests for bit-field extraction, sign extension and 16-bit ALU ops.
"""

import pytest

from lc3_emulator.cpu.alu import (
    get_bits, sign_extend, to_unsigned16, condition_of,
    add16, and16, not16, load16,
)
from lc3_emulator.cpu.regs import CC_N, CC_Z, CC_P, to_signed16


# =============================================================================
#  BIT FIELDS
# =============================================================================

def test_get_bits_opcode():
    """Opcode is 4 bits at position 13."""
    assert get_bits(0b0001_000_001_1_00101, 4, 13) == 0b0001
    assert get_bits(0xF025, 4, 13) == 0b1111

def test_get_bits_register_fields():
    """DR @10, SR1 @7, SR2 @1."""
    word = 0b0001_101_011_0_00_110
    assert get_bits(word, 3, 10) == 5
    assert get_bits(word, 3, 7) == 3
    assert get_bits(word, 3, 1) == 6

def test_get_bits_widest_field():
    """9-bit offset field uses all low nine bits."""
    assert get_bits(0x01FF, 9, 1) == 0x1FF
    assert get_bits(0xFFFF, 9, 1) == 0x1FF

def test_get_bits_single_bit():
    assert get_bits(0b0000_100_000000000, 1, 12) == 1
    assert get_bits(0b0000_100_000000000, 1, 11) == 0


# =============================================================================
#  SIGN EXTENSION
# =============================================================================

@pytest.mark.parametrize("value, bits, expected", [
    (0b10001, 5, -15),
    (0b01111, 5, 15),
    (0b11111, 5, -1),
    (0b10000, 5, -16),
    (0b111111, 6, -1),
    (0b100000, 6, -32),
    (0b011111, 6, 31),
    (0x1FF, 9, -1),
    (0x100, 9, -256),
    (0x0FF, 9, 255),
    (0, 9, 0),
])
def test_sign_extend(value, bits, expected):
    assert sign_extend(value, bits) == expected

def test_sign_extend_ignores_bits_above_field():
    """Only the low ``bits`` bits take part."""
    assert sign_extend(0b1110001, 5) == -15


# =============================================================================
#  16-BIT VIEWS
# =============================================================================

def test_to_signed16():
    assert to_signed16(0x7FFF) == 32767
    assert to_signed16(0x8000) == -32768
    assert to_signed16(0xFFFF) == -1
    assert to_signed16(0x10000) == 0
    assert to_signed16(-1) == -1

def test_to_unsigned16():
    assert to_unsigned16(-1) == 0xFFFF
    assert to_unsigned16(-32768) == 0x8000
    assert to_unsigned16(0x3000) == 0x3000


# =============================================================================
#  ALU
# =============================================================================

def test_condition_of():
    assert condition_of(-5) == CC_N
    assert condition_of(0) == CC_Z
    assert condition_of(7) == CC_P

def test_add16_simple():
    assert add16(10, 5) == (15, CC_P)

def test_add16_wraps_positive_overflow():
    """x7FFF + 1 wraps to x8000 (negative)."""
    assert add16(32767, 1) == (-32768, CC_N)

def test_add16_wraps_negative_overflow():
    assert add16(-32768, -1) == (32767, CC_P)

def test_add16_to_zero():
    assert add16(5, -5) == (0, CC_Z)

@pytest.mark.parametrize("a, b", [
    (0, 0), (1, -1), (12345, 23456), (-20000, -20000), (32767, 32767), (-1, 1),
])
def test_add16_matches_modular_sum(a, b):
    result, cc = add16(a, b)
    assert result & 0xFFFF == (a + b) & 0xFFFF
    assert cc == condition_of(result)

def test_and16():
    assert and16(0b1100, 0b1010) == (0b1000, CC_P)
    assert and16(0x00F0, 0x000F) == (0, CC_Z)
    assert and16(-1, -32768) == (-32768, CC_N)

def test_not16():
    assert not16(0) == (-1, CC_N)
    assert not16(-1) == (0, CC_Z)
    assert not16(-32768) == (32767, CC_P)

def test_load16_normalizes():
    assert load16(0xFFFF) == (-1, CC_N)
    assert load16(0) == (0, CC_Z)
