"""Shared fixtures for the LC-3 emulator tests."""

import pytest

from lc3_emulator import LC3Emulator, TrapControl
from lc3_emulator.config import TRAP_HALT, USER_SPACE_START


@pytest.fixture
def emu():
    """Fresh machine with PC at the user program origin."""
    machine = LC3Emulator()
    machine.pc = USER_SPACE_START
    return machine


@pytest.fixture
def halt_emu(emu):
    """Machine with a HALT routine on TRAP x25."""
    emu.traps.register(TRAP_HALT, lambda m: TrapControl.HALT)
    return emu
