import pytest
from src.keyboard.layouts import ControlAction, KeyboardLayout, get_layout
from src.keyboard.sequencer import MASTER, EventKind, InputSequencer, MSRState, PendingStroke
from src.keyboard.geometry import StrokeTable


@pytest.fixture
def single():
    return InputSequencer(get_layout(KeyboardLayout.KEYS6))


@pytest.fixture
def two_strokes():
    return InputSequencer(get_layout(KeyboardLayout.STROKES2))


@pytest.fixture
def msr():
    return InputSequencer(get_layout(KeyboardLayout.MSR))


def test_key_entered_appends(single):
    single.key_entered(1)
    event = single.key_entered(4, is_swipe=True)
    assert single.keys == (1, 4)
    assert event.kind == EventKind.KEY_APPENDED
    assert event.is_swipe


def test_out_of_range_key_is_recorded(single):
    # Lookup will just miss, the sequence keeps it
    single.key_entered(42)
    assert single.keys == (42,)


def test_two_stroke_sequence(two_strokes):
    two_strokes.first_stroke_entered(2, False)
    assert two_strokes.first_stroke == PendingStroke(2)
    assert two_strokes.keys == ()

    event = two_strokes.second_stroke_entered(3, False)
    assert two_strokes.first_stroke is None
    assert len(two_strokes.keys) == 1
    assert two_strokes.keys == (ord("l"),)
    assert event.kind == EventKind.KEY_APPENDED


def test_first_stroke_overwrites(two_strokes):
    two_strokes.first_stroke_entered(0)
    two_strokes.first_stroke_entered(5)
    assert two_strokes.first_stroke == PendingStroke(5)


def test_second_stroke_without_first_is_noop(two_strokes):
    event = two_strokes.second_stroke_entered(1)
    assert event.kind == EventKind.NOOP
    assert two_strokes.keys == ()
    assert two_strokes.first_stroke is None


def test_invalid_second_stroke_keeps_pending(two_strokes):
    two_strokes.first_stroke_entered(0)  # abcd
    event = two_strokes.second_stroke_entered(4)
    assert event.kind == EventKind.NOOP
    assert two_strokes.first_stroke == PendingStroke(0)
    assert two_strokes.keys == ()


def test_invalid_first_stroke_is_noop(two_strokes):
    assert two_strokes.first_stroke_entered(9).kind == EventKind.NOOP
    assert two_strokes.first_stroke is None


def test_stroke_ops_outside_mode_are_noops(single):
    assert single.first_stroke_entered(1).kind == EventKind.NOOP
    assert single.msr_key_entered(1).kind == EventKind.NOOP
    assert single.keys == ()


def test_current_table_follows_phase(two_strokes):
    assert two_strokes.current_table() == StrokeTable.FIRST
    two_strokes.first_stroke_entered(0)
    assert two_strokes.current_table() == StrokeTable.SECOND


def test_two_stroke_swipes(two_strokes):
    two_strokes.swipe((0, -100))   # up -> efgh
    two_strokes.swipe((87, 50))    # down-right -> 4th letter
    assert two_strokes.keys == (ord("h"),)


def test_msr_sequence(msr):
    assert msr.msr_state == MASTER

    event = msr.msr_key_entered(1, False)
    assert event.kind == EventKind.DETAIL_OPENED
    assert msr.msr_state == MSRState.detail(1)
    assert msr.keys == ()

    event = msr.msr_key_entered(0, False)
    assert event.kind == EventKind.KEY_APPENDED
    assert msr.keys == (ord("f"),)
    assert msr.msr_state.is_master


def test_msr_control_actions_never_reach_sequence(msr):
    msr.msr_key_entered(1, has_text=False)
    event = msr.msr_key_entered(1)
    assert event.kind == EventKind.CONTROL
    assert event.action == ControlAction.YES
    assert msr.keys == ()
    assert msr.msr_state.is_master


def test_msr_delete_removes_last_key(msr):
    msr.msr_key_entered(0)
    msr.msr_key_entered(2)  # c
    msr.msr_key_entered(4, has_text=True)
    event = msr.msr_key_entered(1)
    assert event.action == ControlAction.DELETE
    assert event.changed_sequence
    assert msr.keys == ()


def test_msr_cancel(msr):
    msr.msr_key_entered(3)
    event = msr.msr_key_entered(4)
    assert event.action == ControlAction.CANCEL
    assert msr.msr_state.is_master


def test_msr_blank_slot_is_noop(msr):
    msr.msr_key_entered(3)
    event = msr.msr_key_entered(1)
    assert event.kind == EventKind.NOOP
    assert msr.msr_state == MSRState.detail(3)


def test_backspace(two_strokes):
    two_strokes.first_stroke_entered(0)
    two_strokes.second_stroke_entered(0)
    two_strokes.first_stroke_entered(1)

    # Pending stroke goes first, then the letter
    assert two_strokes.backspace().kind == EventKind.REMOVED
    assert two_strokes.keys == (ord("a"),)
    assert two_strokes.backspace().key == ord("a")
    assert two_strokes.keys == ()
    assert two_strokes.backspace().kind == EventKind.NOOP


def test_backspace_returns_msr_to_master(msr):
    msr.msr_key_entered(2)
    msr.backspace()
    assert msr.msr_state.is_master


def test_reset_clears_everything(two_strokes):
    two_strokes.first_stroke_entered(0)
    two_strokes.second_stroke_entered(1)
    two_strokes.first_stroke_entered(2)
    two_strokes.clear()
    assert two_strokes.keys == ()
    assert two_strokes.first_stroke is None


def test_set_layout_drops_word(single):
    single.key_entered(1)
    single.set_layout(get_layout("keys4"))
    assert single.keys == ()
    assert single.layout.key_count == 4
