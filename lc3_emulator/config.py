"""
LC-3 Emulator — Architecture Constants / Runtime Defaults
=========================================================

Everything here is fixed by the LC-3 architecture except the runtime
defaults at the bottom, which a driver may override per call.

Memory map (conventional, NOT enforced by the core):
  x0000–x00FF  Trap vector table
  x0100–x01FF  Interrupt vector table
  x0200–x2FFF  Operating system / supervisor space
  x3000–xFDFF  User program space
  xFE00–xFFFF  Device registers
"""

import logging
import os
from pathlib import Path


# =============================================================================
#  ARCHITECTURE
# =============================================================================
WORD_BITS = 16
WORD_MASK = 0xFFFF
MEMORY_SIZE = 0x10000      # 65536 words, the full 16-bit address space
NUM_REGISTERS = 8          # R0–R7
RETURN_REGISTER = 7        # TRAP saves the return address here; JMP R7 = RET

USER_SPACE_START = 0x3000  # conventional program origin
DEVICE_SPACE_START = 0xFE00


# =============================================================================
#  TRAP VECTORS (conventional OS service routines)
#  The core only defines the calling convention; routines are registered
#  by the surrounding system.
# =============================================================================
TRAP_GETC = 0x20   # read one character, no echo
TRAP_OUT = 0x21    # write the character in R0
TRAP_PUTS = 0x22   # write the word string at R0
TRAP_IN = 0x23     # prompt, read and echo one character
TRAP_PUTSP = 0x24  # write the packed byte string at R0
TRAP_HALT = 0x25   # stop the machine


# =============================================================================
#  RUNTIME DEFAULTS
# =============================================================================
DEFAULT_MAX_STEPS = 1_000_000

LOG_DIR = Path(os.getenv("LC3_LOG_DIR", Path.cwd() / "logs"))
LOG_LEVEL = logging.getLevelName(os.getenv("LC3_LOG_LEVEL", "WARNING").upper())
if not isinstance(LOG_LEVEL, int):
    LOG_LEVEL = logging.WARNING
