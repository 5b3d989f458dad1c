"""
LC-3 Emulator — Opcode Decoder

Maps the top four bits of an instruction word to (mnemonic, layout)
and extracts the operand fields for that layout. Decoding is opcode
dispatched because the field layout depends on the opcode.

Layouts (bit positions 1-based from the LSB, field width in brackets):

  OPERATE   ADD AND NOT      dst[3]@10 src1[3]@7 mode[1]@6 src2[3]@1 | imm5[5]@1
  PCREL     LD ST LDI STI    reg[3]@10 pcoffset9[9]@1
            LEA
  BASEREL   LDR STR JMP      reg[3]@10 base[3]@7 offset6[6]@1
  BRANCH    BR               n@12 z@11 p@10 pcoffset9[9]@1
  TRAP      TRAP             trapvect8[8]@1

Opcodes 0100 (JSR), 1000 (RTI) and 1101 (reserved) are not part of this
machine and raise IllegalOpcode.
"""

import enum
from dataclasses import dataclass
from typing import Union

from .alu import get_bits, sign_extend
from .regs import CC_N, CC_Z, CC_P, Condition


# ──────────────────────────────────────────────
# Field layouts
# ──────────────────────────────────────────────

OPERATE = 'OPERATE'
PCREL = 'PCREL'
BASEREL = 'BASEREL'
BRANCH = 'BRANCH'
TRAP = 'TRAP'


class Opcode(enum.IntEnum):
    BR = 0b0000
    ADD = 0b0001
    LD = 0b0010
    ST = 0b0011
    AND = 0b0101
    LDR = 0b0110
    STR = 0b0111
    NOT = 0b1001
    LDI = 0b1010
    STI = 0b1011
    JMP = 0b1100
    LEA = 0b1110
    TRAP = 0b1111


# opcode -> field layout
OPCODES = {
    Opcode.BR:   BRANCH,
    Opcode.ADD:  OPERATE,
    Opcode.LD:   PCREL,
    Opcode.ST:   PCREL,
    Opcode.AND:  OPERATE,
    Opcode.LDR:  BASEREL,
    Opcode.STR:  BASEREL,
    Opcode.NOT:  OPERATE,
    Opcode.LDI:  PCREL,
    Opcode.STI:  PCREL,
    Opcode.JMP:  BASEREL,
    Opcode.LEA:  PCREL,
    Opcode.TRAP: TRAP,
}


class IllegalOpcode(Exception):
    """Raised when a word's opcode has no handler."""
    pass


# ──────────────────────────────────────────────
# Decoded instructions
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class OperateInstruction:
    opcode: Opcode
    dst: int
    src1: int
    immediate: bool
    src2: int = 0
    imm5: int = 0

    def render(self) -> str:
        if self.opcode == Opcode.NOT:
            return f"NOT R{self.dst}, R{self.src1}"
        operand = f"#{self.imm5}" if self.immediate else f"R{self.src2}"
        return f"{self.opcode.name} R{self.dst}, R{self.src1}, {operand}"


@dataclass(frozen=True)
class PcRelativeInstruction:
    opcode: Opcode
    reg: int
    pc_offset: int

    def render(self) -> str:
        return f"{self.opcode.name} R{self.reg}, #{self.pc_offset}"


@dataclass(frozen=True)
class BaseRelativeInstruction:
    opcode: Opcode
    reg: int
    base: int
    offset: int

    def render(self) -> str:
        if self.opcode == Opcode.JMP:
            return "RET" if self.base == 7 else f"JMP R{self.base}"
        return f"{self.opcode.name} R{self.reg}, R{self.base}, #{self.offset}"


@dataclass(frozen=True)
class BranchInstruction:
    opcode: Opcode
    n: bool
    z: bool
    p: bool
    pc_offset: int

    @property
    def mask(self) -> Condition:
        """Requested condition bits as a Condition mask."""
        mask = Condition(0)
        if self.n:
            mask |= CC_N
        if self.z:
            mask |= CC_Z
        if self.p:
            mask |= CC_P
        return mask

    def render(self) -> str:
        flags = ('n' if self.n else '') + ('z' if self.z else '') + ('p' if self.p else '')
        if not flags:
            return "NOP"
        return f"BR{flags} #{self.pc_offset}"


@dataclass(frozen=True)
class TrapInstruction:
    opcode: Opcode
    vector: int

    def render(self) -> str:
        return f"TRAP x{self.vector:02X}"


Instruction = Union[
    OperateInstruction,
    PcRelativeInstruction,
    BaseRelativeInstruction,
    BranchInstruction,
    TrapInstruction,
]


# ──────────────────────────────────────────────
# Decode
# ──────────────────────────────────────────────

def get_opcode(word: int) -> int:
    return get_bits(word, 4, 13)


def decode_operate(opcode: Opcode, word: int) -> OperateInstruction:
    dst = get_bits(word, 3, 10)
    src1 = get_bits(word, 3, 7)
    if opcode == Opcode.NOT:
        # mode and src2 bits are don't-care for NOT
        return OperateInstruction(opcode, dst, src1, immediate=False)
    if get_bits(word, 1, 6):
        return OperateInstruction(opcode, dst, src1, immediate=True,
                                  imm5=sign_extend(get_bits(word, 5, 1), 5))
    return OperateInstruction(opcode, dst, src1, immediate=False,
                              src2=get_bits(word, 3, 1))


def decode_pc_relative(opcode: Opcode, word: int) -> PcRelativeInstruction:
    return PcRelativeInstruction(
        opcode,
        reg=get_bits(word, 3, 10),
        pc_offset=sign_extend(get_bits(word, 9, 1), 9),
    )


def decode_base_relative(opcode: Opcode, word: int) -> BaseRelativeInstruction:
    return BaseRelativeInstruction(
        opcode,
        reg=get_bits(word, 3, 10),
        base=get_bits(word, 3, 7),
        offset=sign_extend(get_bits(word, 6, 1), 6),
    )


def decode_branch(opcode: Opcode, word: int) -> BranchInstruction:
    return BranchInstruction(
        opcode,
        n=get_bits(word, 1, 12) == 1,
        z=get_bits(word, 1, 11) == 1,
        p=get_bits(word, 1, 10) == 1,
        pc_offset=sign_extend(get_bits(word, 9, 1), 9),
    )


def decode_trap(opcode: Opcode, word: int) -> TrapInstruction:
    return TrapInstruction(opcode, vector=get_bits(word, 8, 1))


_DECODERS = {
    OPERATE: decode_operate,
    PCREL: decode_pc_relative,
    BASEREL: decode_base_relative,
    BRANCH: decode_branch,
    TRAP: decode_trap,
}


def decode(word: int) -> Instruction:
    """Decode one 16-bit instruction word.

    Accepts the word in either its signed or unsigned view.
    Raises IllegalOpcode for the three unused opcode values.
    """
    word &= 0xFFFF
    raw = get_opcode(word)
    if raw not in OPCODES:
        raise IllegalOpcode(f"Unknown opcode {raw:04b} in word x{word:04X}")
    opcode = Opcode(raw)
    return _DECODERS[OPCODES[opcode]](opcode, word)


def disassemble(word: int) -> str:
    """Assembly text for a word, or a .FILL directive if it is not an instruction."""
    try:
        return decode(word).render()
    except IllegalOpcode:
        return f".FILL x{word & 0xFFFF:04X}"
