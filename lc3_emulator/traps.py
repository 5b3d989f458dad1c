"""
LC-3 Emulator — Trap Calling Convention

The core owns the convention, not the service routines:

  1. R7 ← PC (the address of the instruction after TRAP).
  2. The routine for the 8-bit vector is looked up. No routine means
     UnhandledTrap, and the step is rolled back with R7 and PC unchanged.
  3. The routine runs as ``routine(emu) -> TrapControl``. It may read and
     write registers and memory (console I/O passes characters in R0).
  4. RESUME continues at R7, so a routine can redirect the return by
     editing R7 (the same thing RET does). HALT stops the machine.

Console, keyboard and halt routines belong to the surrounding system and
are registered here per machine:

    emu.traps.register(TRAP_HALT, lambda emu: TrapControl.HALT)
"""

import enum
import logging
from typing import Callable, Dict


logger = logging.getLogger(__name__)


class TrapControl(enum.Enum):
    RESUME = 'RESUME'
    HALT = 'HALT'


class UnhandledTrap(Exception):
    """Raised when TRAP names a vector with no registered routine."""
    pass


class TrapTable:
    """Vector → service routine registry for one machine."""

    def __init__(self):
        self._routines: Dict[int, Callable] = {}

    def register(self, vector: int, routine: Callable):
        """Install routine(emu) -> TrapControl for an 8-bit trap vector."""
        if not 0 <= vector <= 0xFF:
            raise ValueError(f"Trap vector {vector:#x} is not 8 bits")
        self._routines[vector] = routine
        logger.debug("Registered trap routine x%02X: %r", vector, routine)

    def unregister(self, vector: int):
        self._routines.pop(vector, None)

    def clear(self):
        self._routines.clear()

    def __contains__(self, vector: int) -> bool:
        return vector in self._routines

    def lookup(self, vector: int) -> Callable:
        try:
            return self._routines[vector]
        except KeyError:
            raise UnhandledTrap(f"No service routine for trap vector x{vector:02X}") from None

    def dispatch(self, emu, vector: int) -> TrapControl:
        control = self.lookup(vector)(emu)
        if not isinstance(control, TrapControl):
            raise TypeError(
                f"Trap routine x{vector:02X} returned {control!r}, expected TrapControl")
        return control
