"""
Input sequencing for single-stroke, two-stroke and master/detail input.
Consumes classified key indices and owns the key sequence of the word
being composed.
"""
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Tuple

from .geometry import StrokeTable, Vector, classify
from .layouts import (
    ControlAction,
    KeyboardLayoutDescriptor,
    letters_for_key,
    msr_detail_keys,
)

log = logging.getLogger("swipekeys.keyboard")


class EventKind(Enum):
    """What a sequencer call did."""
    NOOP = auto()            # Invalid or unrecognized input, state unchanged
    KEY_APPENDED = auto()    # A resolved key went into the sequence
    FIRST_STROKE = auto()    # Two-stroke group picked, waiting for the letter
    DETAIL_OPENED = auto()   # MSR master key picked, waiting for the sub-key
    CONTROL = auto()         # MSR special key, see SequencerEvent.action
    REMOVED = auto()         # Backspace took something off
    CLEARED = auto()


@dataclass(frozen=True)
class MSRState:
    """Master state when master_key is None, detail(master_key) otherwise."""
    master_key: Optional[int] = None

    @property
    def is_master(self) -> bool:
        return self.master_key is None

    @classmethod
    def detail(cls, master_key: int) -> "MSRState":
        return cls(master_key=master_key)


MASTER = MSRState()


@dataclass(frozen=True)
class PendingStroke:
    """First stroke of a two-stroke letter, waiting for its second stroke."""
    key: int


@dataclass(frozen=True)
class SequencerEvent:
    """Result of one sequencer call."""
    kind: EventKind
    key: Optional[int] = None
    action: Optional[ControlAction] = None
    is_swipe: bool = False

    @property
    def changed_sequence(self) -> bool:
        return self.kind in (EventKind.KEY_APPENDED, EventKind.REMOVED, EventKind.CLEARED) or (
            self.kind == EventKind.CONTROL and self.action == ControlAction.DELETE
        )


NOOP = SequencerEvent(EventKind.NOOP)


class InputSequencer:
    """
    State machine turning key picks into the entered key sequence.

    Single-stroke layouts append every key as-is. The two-stroke layout
    combines a group pick and a letter pick into one letter code. The MSR
    layout opens a detail view on the first pick and resolves a letter or
    a control action on the second.
    """

    def __init__(self, layout: KeyboardLayoutDescriptor):
        self._layout = layout
        self._keys: List[int] = []
        self._first_stroke: Optional[PendingStroke] = None
        self._msr_state: MSRState = MASTER
        self._detail_has_text = False

    # --- State -------------------------------------------------------------

    @property
    def layout(self) -> KeyboardLayoutDescriptor:
        return self._layout

    @property
    def keys(self) -> Tuple[int, ...]:
        """Snapshot of the entered key sequence."""
        return tuple(self._keys)

    @property
    def first_stroke(self) -> Optional[PendingStroke]:
        return self._first_stroke

    @property
    def msr_state(self) -> MSRState:
        return self._msr_state

    def set_layout(self, layout: KeyboardLayoutDescriptor):
        """Switch layout. The word in progress is dropped."""
        self._layout = layout
        self.reset()

    def reset(self):
        """Clear the sequence, any pending first stroke and the MSR state."""
        self._keys.clear()
        self._first_stroke = None
        self._msr_state = MASTER
        self._detail_has_text = False

    # --- Entry points ------------------------------------------------------

    def key_entered(self, index: int, is_swipe: bool = False) -> SequencerEvent:
        """Append a key. Out-of-range keys are kept; lookup will just miss."""
        self._keys.append(index)
        log.debug("key %d entered (swipe=%s) -> %s", index, is_swipe, self._keys)
        return SequencerEvent(EventKind.KEY_APPENDED, key=index, is_swipe=is_swipe)

    def first_stroke_entered(self, key: int, is_swipe: bool = False) -> SequencerEvent:
        """Remember the group of a two-stroke letter. A repeat overwrites it."""
        if not self._layout.is_two_strokes:
            return NOOP
        if not letters_for_key(self._layout.grouping, key):
            return NOOP
        self._first_stroke = PendingStroke(key)
        log.debug("first stroke %d (swipe=%s)", key, is_swipe)
        return SequencerEvent(EventKind.FIRST_STROKE, key=key, is_swipe=is_swipe)

    def second_stroke_entered(self, key: int, is_swipe: bool = False) -> SequencerEvent:
        """Resolve the pending group and this pick into one letter code."""
        if not self._layout.is_two_strokes or self._first_stroke is None:
            return NOOP
        letters = letters_for_key(self._layout.grouping, self._first_stroke.key)
        if not 0 <= key < len(letters):
            return NOOP

        code = ord(letters[key])
        self._keys.append(code)
        self._first_stroke = None
        log.debug("second stroke %d -> %r", key, letters[key])
        return SequencerEvent(EventKind.KEY_APPENDED, key=code, is_swipe=is_swipe)

    def msr_key_entered(self, key: int, is_swipe: bool = False,
                        has_text: Optional[bool] = None) -> SequencerEvent:
        """
        Master/detail pick.

        Args:
            key: Key index picked on the current level.
            is_swipe: Feedback metadata only.
            has_text: Whether the word or sentence already has text, which
                selects the detail table variant. Defaults to whether the
                key sequence is non-empty.
        """
        if not self._layout.is_msr:
            return NOOP

        if self._msr_state.is_master:
            if has_text is None:
                has_text = bool(self._keys)
            if msr_detail_keys(key, has_text) is None:
                return NOOP
            self._msr_state = MSRState.detail(key)
            self._detail_has_text = has_text
            return SequencerEvent(EventKind.DETAIL_OPENED, key=key, is_swipe=is_swipe)

        slots = msr_detail_keys(self._msr_state.master_key, self._detail_has_text)
        if slots is None or not 0 <= key < len(slots) or slots[key] is None:
            return NOOP
        slot = slots[key]
        self._msr_state = MASTER

        if isinstance(slot, ControlAction):
            if slot == ControlAction.DELETE and self._keys:
                self._keys.pop()
            log.debug("msr control %s", slot.value)
            return SequencerEvent(EventKind.CONTROL, action=slot, is_swipe=is_swipe)

        code = ord(slot)
        self._keys.append(code)
        return SequencerEvent(EventKind.KEY_APPENDED, key=code, is_swipe=is_swipe)

    def stroke(self, key: int, is_swipe: bool = False,
               has_text: Optional[bool] = None) -> SequencerEvent:
        """Route a key pick to the entry point for the current layout mode."""
        if self._layout.is_msr:
            return self.msr_key_entered(key, is_swipe, has_text)
        if self._layout.is_two_strokes:
            if self._first_stroke is None:
                return self.first_stroke_entered(key, is_swipe)
            return self.second_stroke_entered(key, is_swipe)
        return self.key_entered(key, is_swipe)

    def swipe(self, vector: Vector, has_text: Optional[bool] = None) -> SequencerEvent:
        """Classify a raw swipe vector with the table for the current phase."""
        key = classify(vector, self.current_table())
        if key is None:
            return NOOP
        return self.stroke(key, is_swipe=True, has_text=has_text)

    def current_table(self) -> int:
        """Sector count / stroke table the next swipe is classified with."""
        if self._layout.is_two_strokes:
            if self._first_stroke is None:
                return int(StrokeTable.FIRST)
            letters = letters_for_key(self._layout.grouping, self._first_stroke.key)
            if len(letters) == 2:
                return int(StrokeTable.SECOND_TAIL)
            return int(StrokeTable.SECOND)
        return self._layout.key_count

    # --- Editing -----------------------------------------------------------

    def backspace(self) -> SequencerEvent:
        """Drop the pending first stroke, else the last key. Back to master."""
        self._msr_state = MASTER
        if self._first_stroke is not None:
            self._first_stroke = None
            return SequencerEvent(EventKind.REMOVED)
        if not self._keys:
            return NOOP
        removed = self._keys.pop()
        return SequencerEvent(EventKind.REMOVED, key=removed)

    def clear(self) -> SequencerEvent:
        self.reset()
        return SequencerEvent(EventKind.CLEARED)
