"""
Trap table tests — registration, lookup and dispatch.
"""

import pytest

from lc3_emulator.traps import TrapTable, TrapControl, UnhandledTrap


def test_register_and_dispatch():
    table = TrapTable()
    calls = []

    def routine(emu):
        calls.append(emu)
        return TrapControl.RESUME

    table.register(0x21, routine)
    assert 0x21 in table
    assert table.dispatch("machine", 0x21) is TrapControl.RESUME
    assert calls == ["machine"]


def test_reregister_replaces():
    table = TrapTable()
    table.register(0x25, lambda emu: TrapControl.RESUME)
    table.register(0x25, lambda emu: TrapControl.HALT)
    assert table.dispatch(None, 0x25) is TrapControl.HALT


@pytest.mark.parametrize("vector", [-1, 0x100, 0xF025])
def test_vector_must_be_8_bits(vector):
    with pytest.raises(ValueError):
        TrapTable().register(vector, lambda emu: TrapControl.RESUME)


def test_unknown_vector():
    with pytest.raises(UnhandledTrap, match="x30"):
        TrapTable().lookup(0x30)


def test_unregister_and_clear():
    table = TrapTable()
    table.register(0x20, lambda emu: TrapControl.RESUME)
    table.register(0x21, lambda emu: TrapControl.RESUME)
    table.unregister(0x20)
    table.unregister(0x99)
    assert 0x20 not in table
    table.clear()
    assert 0x21 not in table


def test_routine_must_return_control():
    table = TrapTable()
    table.register(0x22, lambda emu: None)
    with pytest.raises(TypeError):
        table.dispatch(None, 0x22)
