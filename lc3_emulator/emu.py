"""
LC-3 Emulator — Main Emulator Class

This is the top-level class that integrates:
  - CPU registers + condition code (cpu/regs.py)
  - 64K-word memory (mem/memory.py)
  - Opcode decoder (cpu/decoder.py)
  - ALU operations (cpu/alu.py)
  - Trap calling convention (traps.py)

Execution model (one call to step()):
  1. Fetch the word at PC
  2. Decode it (opcode dispatched field layout)
  3. PC ← PC + 1, so PC-relative offsets count from the next instruction
  4. Execute the handler → update registers, memory, condition code

A step either completes or fails as a whole: on any fault PC goes back
to the faulting instruction and registers are left as they were.

Step outcomes:
  - OK:              instruction executed
  - HALT:            a trap routine asked the machine to stop
  - ILLEGAL:         undefined opcode (JSR, RTI and 1101 are not implemented)
  - ADDRESS_ERROR:   effective address outside x0000–xFFFF
  - UNHANDLED_TRAP:  TRAP vector with no registered routine
  - BREAK:           breakpoint address reached (run() only)
  - TIMEOUT:         max_steps executed (run() only)
"""

import logging
from enum import Enum
from typing import Iterable, Optional, Set

from . import config
from .cpu import alu
from .cpu.decoder import Opcode, IllegalOpcode, decode
from .cpu.regs import Registers, Condition
from .mem.memory import Memory, AddressError, check_address
from .traps import TrapTable, TrapControl, UnhandledTrap


logger = logging.getLogger(__name__)


class Outcome(Enum):
    OK = 'OK'
    HALT = 'HALT'
    ILLEGAL = 'ILLEGAL'
    ADDRESS_ERROR = 'ADDRESS_ERROR'
    UNHANDLED_TRAP = 'UNHANDLED_TRAP'
    BREAK = 'BREAK'
    TIMEOUT = 'TIMEOUT'


class LC3Emulator:
    """LC-3 Virtual Machine.

    Usage:
        emu = LC3Emulator()
        emu.traps.register(TRAP_HALT, lambda emu: TrapControl.HALT)
        emu.load(0x3000, [0x1265, 0xF025])  # ADD R1, R1, #5 ; HALT
        emu.pc = 0x3000
        result = emu.run()                  # Outcome.HALT
        emu.registers[1]                    # 5
    """

    def __init__(self):
        # Core components
        self.regs = Registers()
        self.mem = Memory()
        self.traps = TrapTable()

        self._halted = False
        self._last_error: Optional[str] = None
        self._steps = 0

        # Breakpoints: set of PC addresses that stop run()
        self._breakpoints: Set[int] = set()

        # Trace output
        self._trace = False
        self._trace_output = []

        # Instruction dispatch table (built in _build_dispatch)
        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Driver interface
    # ══════════════════════════════════════════════

    def reset(self):
        """Zero memory, registers, PC and condition code.

        Registered trap routines and memory watchpoints are kept; they
        belong to the surrounding system, not to the machine state.
        """
        self.mem.clear()
        self.regs.reset()
        self._halted = False
        self._last_error = None
        self._steps = 0
        self._breakpoints.clear()
        self._trace_output.clear()

    def load(self, address: int, words: Iterable[int]) -> int:
        """Write a contiguous block of words into memory at address.

        Raises AddressError if the block would run past xFFFF.
        """
        count = self.mem.load(address, words)
        logger.debug("Loaded %d words at x%04X", count, address)
        return count

    def resume(self):
        """Clear the halt latch so step()/run() execute again."""
        self._halted = False

    # --- Read-only views ---

    @property
    def pc(self) -> int:
        return self.regs.PC

    @pc.setter
    def pc(self, addr: int):
        self.regs.PC = check_address(addr)

    @property
    def registers(self) -> tuple:
        return tuple(self.regs.R)

    @property
    def condition(self) -> Condition:
        return self.regs.CC

    @property
    def negative(self) -> bool:
        return self.regs.negative

    @property
    def zero(self) -> bool:
        return self.regs.zero

    @property
    def positive(self) -> bool:
        return self.regs.positive

    @property
    def halted(self) -> bool:
        return self._halted

    @property
    def last_error(self) -> Optional[str]:
        """Message of the most recent faulting step, else None."""
        return self._last_error

    @property
    def steps(self) -> int:
        """Instructions executed since the last reset."""
        return self._steps

    def read_memory(self, addr: int) -> int:
        return self.mem.read(addr)

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Outcome:
        """Execute one instruction and report how it went."""
        if self._halted:
            return Outcome.HALT

        pc = self.regs.PC
        saved_r7 = self.regs[config.RETURN_REGISTER]
        trace_line = None

        try:
            word = self.mem.read(pc)
            inst = decode(word)
            self.regs.PC = pc + 1

            if self._trace:
                trace_line = f"x{pc:04X}: {inst.render():20s} {self.regs.display()}"

            self._dispatch[inst.opcode](inst)
        except IllegalOpcode as e:
            return self._fault(Outcome.ILLEGAL, pc, saved_r7, e)
        except AddressError as e:
            return self._fault(Outcome.ADDRESS_ERROR, pc, saved_r7, e)
        except UnhandledTrap as e:
            return self._fault(Outcome.UNHANDLED_TRAP, pc, saved_r7, e)
        except _HaltException:
            self._record_trace(trace_line)
            self._steps += 1
            self._halted = True
            logger.info("Halted by trap at x%04X", pc)
            return Outcome.HALT
        except BaseException:
            # Host-side errors (a broken trap routine or watchpoint) still
            # propagate, but the machine stays at the faulting instruction.
            self.regs.PC = pc
            self.regs[config.RETURN_REGISTER] = saved_r7
            raise

        self._record_trace(trace_line)
        self._steps += 1
        return Outcome.OK

    def run(self, max_steps: Optional[int] = None) -> Outcome:
        """Step until an outcome other than OK.

        A breakpoint on the instruction run() starts at is ignored, so
        calling run() again continues past it.
        """
        if max_steps is None:
            max_steps = config.DEFAULT_MAX_STEPS

        for n in range(max_steps):
            if n and self.regs.PC in self._breakpoints:
                logger.info("Breakpoint at x%04X", self.regs.PC)
                return Outcome.BREAK
            outcome = self.step()
            if outcome is not Outcome.OK:
                return outcome

        return Outcome.TIMEOUT

    def _fault(self, outcome: Outcome, pc: int, saved_r7: int, error: Exception) -> Outcome:
        self.regs.PC = pc
        self.regs[config.RETURN_REGISTER] = saved_r7
        self._last_error = str(error)
        logger.warning("%s at x%04X: %s", outcome.value, pc, error)
        return outcome

    # ══════════════════════════════════════════════
    # Trap hook
    # ══════════════════════════════════════════════

    def invoke_trap(self, vector: int) -> TrapControl:
        """Run the service routine for a trap vector.

        Override this, or register routines on ``self.traps``, to supply
        console I/O, halt and the other OS services.
        """
        return self.traps.dispatch(self, vector)

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════

    def _build_dispatch(self) -> dict:
        return {
            Opcode.ADD:  self._op_add,
            Opcode.AND:  self._op_and,
            Opcode.NOT:  self._op_not,
            Opcode.LD:   self._op_ld,
            Opcode.ST:   self._op_st,
            Opcode.LDI:  self._op_ldi,
            Opcode.STI:  self._op_sti,
            Opcode.LDR:  self._op_ldr,
            Opcode.STR:  self._op_str,
            Opcode.LEA:  self._op_lea,
            Opcode.BR:   self._op_br,
            Opcode.JMP:  self._op_jmp,
            Opcode.TRAP: self._op_trap,
        }

    def _set_result(self, reg: int, result: tuple):
        value, cc = result
        self.regs[reg] = value
        self.regs.set_cc(cc)

    def _pc_relative(self, offset: int) -> int:
        return check_address(self.regs.PC + offset)

    def _base_relative(self, base: int, offset: int) -> int:
        return check_address(alu.to_unsigned16(self.regs[base]) + offset)

    # ── Operate ──

    def _operand2(self, inst) -> int:
        return inst.imm5 if inst.immediate else self.regs[inst.src2]

    def _op_add(self, inst):
        self._set_result(inst.dst, alu.add16(self.regs[inst.src1], self._operand2(inst)))

    def _op_and(self, inst):
        self._set_result(inst.dst, alu.and16(self.regs[inst.src1], self._operand2(inst)))

    def _op_not(self, inst):
        self._set_result(inst.dst, alu.not16(self.regs[inst.src1]))

    # ── Loads / stores ──

    def _op_ld(self, inst):
        addr = self._pc_relative(inst.pc_offset)
        self._set_result(inst.reg, alu.load16(self.mem.read(addr)))

    def _op_st(self, inst):
        addr = self._pc_relative(inst.pc_offset)
        self.mem.write(addr, self.regs[inst.reg])

    def _op_ldi(self, inst):
        pointer = self.mem.read(self._pc_relative(inst.pc_offset))
        value = self.mem.read(alu.to_unsigned16(pointer))
        self._set_result(inst.reg, alu.load16(value))

    def _op_sti(self, inst):
        pointer = self.mem.read(self._pc_relative(inst.pc_offset))
        self.mem.write(alu.to_unsigned16(pointer), self.regs[inst.reg])

    def _op_ldr(self, inst):
        addr = self._base_relative(inst.base, inst.offset)
        self._set_result(inst.reg, alu.load16(self.mem.read(addr)))

    def _op_str(self, inst):
        addr = self._base_relative(inst.base, inst.offset)
        self.mem.write(addr, self.regs[inst.reg])

    def _op_lea(self, inst):
        """Address-of. Sets the condition code on the address, as LC-3 does."""
        self._set_result(inst.reg, alu.load16(self._pc_relative(inst.pc_offset)))

    # ── Control flow ──

    def _op_br(self, inst):
        if inst.mask & self.regs.CC:
            self.regs.PC = self._pc_relative(inst.pc_offset)

    def _op_jmp(self, inst):
        self.regs.PC = alu.to_unsigned16(self.regs[inst.base])

    def _op_trap(self, inst):
        # A TRAP at xFFFF has no return address
        self.regs[config.RETURN_REGISTER] = check_address(self.regs.PC)
        control = self.invoke_trap(inst.vector)
        self.regs.PC = alu.to_unsigned16(self.regs[config.RETURN_REGISTER])
        if control is TrapControl.HALT:
            raise _HaltException(f"TRAP x{inst.vector:02X}")

    # ══════════════════════════════════════════════
    # Breakpoint API
    # ══════════════════════════════════════════════

    def add_breakpoint(self, addr: int):
        """Stop run() before executing the instruction at addr."""
        self._breakpoints.add(check_address(addr))

    def remove_breakpoint(self, addr: int):
        self._breakpoints.discard(check_address(addr))

    def clear_breakpoints(self):
        self._breakpoints.clear()

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Record one line per executed instruction."""
        self._trace = enable

    def _record_trace(self, line: Optional[str]):
        if line is not None:
            self._trace_output.append(line)
            logger.debug(line)

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()


# Internal exception for flow control
class _HaltException(Exception):
    pass
