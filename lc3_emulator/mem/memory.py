"""
LC-3 Emulator — 64K-Word Memory

Flat word-addressable memory covering the full 16-bit address space.
Each cell holds a signed 16-bit word.

Addresses are never wrapped. Any access outside [x0000, xFFFF] raises
AddressError, which the emulator reports to its driver as a step
outcome. An array with a negative index would silently read from the
top of memory, so every access is range-checked first.
"""

from array import array
from typing import Callable, Dict, Iterable, List, Optional

from .. import config
from ..cpu.regs import to_signed16


class AddressError(Exception):
    """Raised for an address outside the 16-bit address space."""
    pass


def check_address(addr: int) -> int:
    if not 0 <= addr < config.MEMORY_SIZE:
        raise AddressError(f"Address {addr:#x} outside x0000-xFFFF")
    return addr


class Memory:
    """65536-word memory with write watchpoints.

    Watchpoint callbacks get ``(addr, old_val, new_val)`` on every write
    to the watched address, including writes of an unchanged value.
    """

    SIZE = config.MEMORY_SIZE

    def __init__(self):
        self._mem = array('h', bytes(2 * self.SIZE))

        # addr → [callback(addr, old_val, new_val)]
        self._watchpoints: Dict[int, List[Callable]] = {}

    def __len__(self) -> int:
        return len(self._mem)

    # --- Core read/write ---

    def read(self, addr: int) -> int:
        return self._mem[check_address(addr)]

    def write(self, addr: int, value: int):
        check_address(addr)
        value = to_signed16(value)
        old = self._mem[addr]
        self._mem[addr] = value

        if addr in self._watchpoints:
            for cb in self._watchpoints[addr]:
                cb(addr, old, value)

    # --- Bulk load ---

    def load(self, base_addr: int, words: Iterable[int]) -> int:
        """Write a contiguous block of words starting at base_addr.

        Words may be given in signed or unsigned form. The whole block is
        validated before anything is written. Returns the word count.
        Bypasses watchpoints (used for loading program images).
        """
        block = list(words)
        for word in block:
            if not -0x8000 <= word <= 0xFFFF:
                raise ValueError(f"Word {word:#x} does not fit in 16 bits")
        check_address(base_addr)
        if base_addr + len(block) > self.SIZE:
            raise AddressError(
                f"{len(block)} words at x{base_addr:04X} run past the end of memory")
        for i, word in enumerate(block):
            self._mem[base_addr + i] = to_signed16(word)
        return len(block)

    def clear(self):
        self._mem = array('h', bytes(2 * self.SIZE))

    # --- Watchpoints ---

    def add_watchpoint(self, addr: int, callback: Callable):
        """Call callback(addr, old_val, new_val) on every write to addr."""
        check_address(addr)
        self._watchpoints.setdefault(addr, []).append(callback)

    def remove_watchpoint(self, addr: int, callback: Optional[Callable] = None):
        """Remove a watchpoint. If callback is None, removes all on that addr."""
        if addr in self._watchpoints:
            if callback is None:
                del self._watchpoints[addr]
            else:
                self._watchpoints[addr] = [
                    cb for cb in self._watchpoints[addr] if cb != callback
                ]

    def clear_watchpoints(self):
        self._watchpoints.clear()

    # --- Snapshots ---

    def snapshot(self, start: int = config.USER_SPACE_START,
                 end: int = config.DEVICE_SPACE_START - 1) -> tuple:
        """Copy of memory [start, end] (inclusive) for later diffing."""
        check_address(start)
        check_address(end)
        return tuple(self._mem[start:end + 1])

    @staticmethod
    def diff_snapshots(snap_a, snap_b, base_addr: int = config.USER_SPACE_START) -> Dict[int, tuple]:
        """Compare two snapshots, return {addr: (old, new)} for changed words."""
        changes = {}
        for i in range(min(len(snap_a), len(snap_b))):
            if snap_a[i] != snap_b[i]:
                changes[base_addr + i] = (snap_a[i], snap_b[i])
        return changes

    # --- Hex dump ---

    def hexdump(self, start: int, length: int = 64) -> str:
        """Word dump, eight words per line, clipped to the end of memory."""
        check_address(start)
        end = min(start + length, self.SIZE)
        lines = []
        for addr in range(start, end, 8):
            row = self._mem[addr:min(addr + 8, end)]
            lines.append(f"x{addr:04X}  " + ' '.join(f"{w & 0xFFFF:04X}" for w in row))
        return '\n'.join(lines)
