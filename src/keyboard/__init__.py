"""
SwipeKeys Keyboard Module

Layouts, swipe classification and input sequencing.
"""
from .layouts import (
    KeyboardLayout,
    KeyboardLayoutDescriptor,
    ControlAction,
    get_layout,
)
from .geometry import SwipeDirection, StrokeTable, classify, direction
from .sequencer import InputSequencer, MSRState, PendingStroke, SequencerEvent, EventKind

__all__ = [
    'KeyboardLayout',
    'KeyboardLayoutDescriptor',
    'ControlAction',
    'get_layout',
    'SwipeDirection',
    'StrokeTable',
    'classify',
    'direction',
    'InputSequencer',
    'MSRState',
    'PendingStroke',
    'SequencerEvent',
    'EventKind',
]
