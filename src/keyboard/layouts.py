"""
Keyboard layout definitions.
Support for 4/6/8-key ambiguous layouts, the two-stroke layout and the
two-level master/detail (MSR) layout.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, List, Optional, Tuple, Union


class KeyboardLayout(IntEnum):
    """Available layouts. The value is the key count or a sentinel."""
    KEYS4 = 4
    KEYS6 = 6
    KEYS8 = 8
    STROKES2 = -1
    MSR = 37


DEFAULT_LAYOUT = KeyboardLayout.KEYS6


class ControlAction(Enum):
    """Special MSR sub-keys that never reach the key sequence."""
    YES = "yes"
    NO = "no"
    SPEAK = "speak"
    DELETE = "delete"
    CANCEL = "cancel"


# Letter groupings, one string per key
GROUPING_4_KEYS = ["abcdef", "ghijkl", "mnopqrs", "tuvwxyz"]
GROUPING_6_KEYS = ["abcd", "efgh", "ijkl", "mnop", "qrstu", "vwxyz"]
GROUPING_8_KEYS = ["abc", "def", "ghi", "jkl", "mno", "pqrs", "tuv", "wxyz"]
GROUPING_2_STROKES = ["abcd", "efgh", "ijkl", "mnop", "qrst", "uvwxyz"]
GROUPING_MSR = ["abcd", "efgh", "ijkl", "mnop", "qrst", "uvwxyz"]

GROUPINGS: Dict[KeyboardLayout, List[str]] = {
    KeyboardLayout.KEYS4: GROUPING_4_KEYS,
    KeyboardLayout.KEYS6: GROUPING_6_KEYS,
    KeyboardLayout.KEYS8: GROUPING_8_KEYS,
    KeyboardLayout.STROKES2: GROUPING_2_STROKES,
    KeyboardLayout.MSR: GROUPING_MSR,
}

# Arrow echo and spoken names per key index
ARROWS_4_KEYS = {0: "↑", 1: "→", 2: "←", 3: "↓"}
ARROWS_4_KEYS_TEXT = {0: "up", 1: "right", 2: "left", 3: "down"}

ARROWS_2_STROKES = {0: "↗", 1: "↑", 2: "↖", 3: "↘", 4: "↓", 5: "↙"}
ARROWS_2_STROKES_TEXT = {
    0: "up right",
    1: "up",
    2: "up left",
    3: "down right",
    4: "down",
    5: "down left",
}

ARROW_CHARACTERS = "↑↗→↘↓↙←↖"


# A detail slot is a letter, a control action or None (blank)
DetailKey = Union[str, ControlAction, None]

# Master/detail (MSR) tables. Variant 1 is shown while nothing has been
# typed yet, variant 2 once the word or the sentence has text.
MSR_DETAIL_KEYS_1: List[List[DetailKey]] = [
    ["a", "b", "c", "d", ControlAction.CANCEL, "e"],
    ["f", ControlAction.YES, "g", "h", ControlAction.CANCEL, "i"],
    ["j", "k", "l", "m", ControlAction.CANCEL, "n"],
    ["o", None, "p", "q", ControlAction.CANCEL, "r"],
    ["s", ControlAction.NO, "t", "u", ControlAction.CANCEL, "v"],
    ["w", None, "x", "y", ControlAction.CANCEL, "z"],
]

MSR_DETAIL_KEYS_2: List[List[DetailKey]] = [
    ["a", "b", "c", "d", ControlAction.CANCEL, "e"],
    ["f", ControlAction.SPEAK, "g", "h", ControlAction.CANCEL, "i"],
    ["j", "k", "l", "m", ControlAction.CANCEL, "n"],
    ["o", None, "p", "q", ControlAction.CANCEL, "r"],
    ["s", ControlAction.DELETE, "t", "u", ControlAction.CANCEL, "v"],
    ["w", None, "x", "y", ControlAction.CANCEL, "z"],
]


def msr_detail_keys(master_key: int, has_text: bool) -> Optional[List[DetailKey]]:
    """Detail slots shown under a master key, or None for an unknown key."""
    table = MSR_DETAIL_KEYS_2 if has_text else MSR_DETAIL_KEYS_1
    if 0 <= master_key < len(table):
        return table[master_key]
    return None


def msr_master_labels(has_text: bool) -> List[str]:
    """
    Master key captions, built from the detail tables.
    Control actions are shown by name; the presentation layer decides
    how to draw them.
    """
    table = MSR_DETAIL_KEYS_2 if has_text else MSR_DETAIL_KEYS_1
    labels = []
    for slots in table:
        parts = []
        for slot in slots:
            if isinstance(slot, ControlAction):
                if slot is not ControlAction.CANCEL:
                    parts.append(slot.value.upper())
            elif slot:
                parts.append(slot.upper())
        labels.append(" ".join(parts))
    return labels


@dataclass(frozen=True)
class KeyboardLayoutDescriptor:
    """A concrete layout: key count, letter grouping and input mode."""
    layout: KeyboardLayout
    grouping: Tuple[str, ...]

    @property
    def key_count(self) -> int:
        """Number of keys, or the negative sentinel for two-stroke."""
        return int(self.layout)

    @property
    def visible_keys(self) -> int:
        """Number of keys actually drawn on screen."""
        return len(self.grouping)

    @property
    def is_two_strokes(self) -> bool:
        return self.layout == KeyboardLayout.STROKES2

    @property
    def is_msr(self) -> bool:
        return self.layout == KeyboardLayout.MSR

    @property
    def uses_letter_codes(self) -> bool:
        """Both two-level modes resolve exact letters, not ambiguous groups."""
        return self.is_two_strokes or self.is_msr

    @property
    def name(self) -> str:
        return self.layout.name.lower()


LAYOUT_NAMES: Dict[str, KeyboardLayout] = {
    layout.name.lower(): layout for layout in KeyboardLayout
}


def get_layout(name: Union[str, int, KeyboardLayout, None]) -> KeyboardLayoutDescriptor:
    """
    Get keyboard layout by name, raw value or enum member.
    Unknown names fall back to the default layout.
    """
    layout = DEFAULT_LAYOUT
    if isinstance(name, KeyboardLayout):
        layout = name
    elif isinstance(name, int):
        try:
            layout = KeyboardLayout(name)
        except ValueError:
            layout = DEFAULT_LAYOUT
    elif isinstance(name, str):
        layout = LAYOUT_NAMES.get(name.lower(), DEFAULT_LAYOUT)
    return KeyboardLayoutDescriptor(layout=layout, grouping=tuple(GROUPINGS[layout]))


def letters_for_key(grouping, key: int) -> str:
    """Letters on one key of a grouping, empty for an unknown key."""
    if 0 <= key < len(grouping):
        return grouping[key]
    return ""


def direction_arrows(keys: List[int]) -> str:
    """Echo an ambiguous key sequence as arrows (4-key arrow map)."""
    return "".join(ARROWS_4_KEYS[k] for k in keys if k in ARROWS_4_KEYS)


def contains_arrow(text: str) -> bool:
    return any(ch in ARROW_CHARACTERS for ch in text)


def letter_from_code(code: int) -> Optional[str]:
    """Letter for a two-stroke/MSR key code (ASCII), None if not a-z."""
    if ord("a") <= code <= ord("z"):
        return chr(code)
    return None
