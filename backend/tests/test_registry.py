from lightcycle.models import Slot
from lightcycle.services.registry import SessionRegistry


def test_assign_prefers_red_then_blue_then_full():
    reg = SessionRegistry()
    assert reg.assign_slot('a') is Slot.RED
    assert reg.assign_slot('b') is Slot.BLUE
    assert reg.assign_slot('c') is None
    assert reg.both_occupied()
    assert reg.slot_of('c') is None


def test_free_slot_reopens_red_first():
    reg = SessionRegistry()
    reg.assign_slot('a')
    reg.assign_slot('b')
    assert reg.free_slot('a') is Slot.RED
    assert reg.slot_of('a') is None
    assert not reg.both_occupied()
    assert reg.assign_slot('c') is Slot.RED
    assert reg.holder_of(Slot.RED) == 'c'


def test_free_unknown_connection_is_none():
    reg = SessionRegistry()
    assert reg.free_slot('ghost') is None
    reg.assign_slot('a')
    assert reg.free_slot('ghost') is None
    assert reg.slot_of('a') is Slot.RED


def test_reassigning_held_connection_keeps_slot():
    reg = SessionRegistry()
    reg.assign_slot('a')
    assert reg.assign_slot('a') is Slot.RED
    assert reg.holder_of(Slot.BLUE) is None


def test_occupied_view():
    reg = SessionRegistry()
    reg.assign_slot('a')
    assert reg.occupied() == {'red': 'a', 'blue': None}
