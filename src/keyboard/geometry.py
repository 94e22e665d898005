"""
Swipe geometry classification.
Turns a drag vector (screen convention, y grows downward) into a key
index for the active layout.
"""
import math
from enum import Enum, IntEnum
from typing import Dict, Optional, Sequence, Tuple, Union

import numpy as np

from .layouts import KeyboardLayout

Vector = Tuple[float, float]


class SwipeDirection(Enum):
    """Coarse four-way direction used for on-screen indicators."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class Heading(IntEnum):
    """Eight-way compass headings, degrees clockwise from +x (y down)."""
    RIGHT = 0
    DOWN = 90
    LEFT = 180
    UP = 270
    DOWN_RIGHT = 45
    DOWN_LEFT = 135
    UP_LEFT = 225
    UP_RIGHT = 315


class StrokeTable(IntEnum):
    """
    Named variants selected by negative sector counts.
    FIRST picks the group, SECOND picks the letter inside it, SECOND_TAIL
    is the second stroke on a key holding only the trailing letter pair.
    """
    FIRST = -1
    SECOND = -2
    SECOND_TAIL = -3


# Six equally spaced headings with a vertical axis: up, up-right (330),
# down-right (30), down, down-left (150), up-left (210).
_SIX_WAY_ANGLES = {
    "up": 270.0,
    "up_right": 330.0,
    "down_right": 30.0,
    "down": 90.0,
    "down_left": 150.0,
    "up_left": 210.0,
}

# Key index lookup per sector count: list of (angle, key index).
# Indices follow the on-screen placement of the key labels, not the
# clockwise order of the headings.
FOUR_KEY_TABLE = [
    (270.0, 0),  # up
    (0.0, 1),    # right
    (180.0, 2),  # left
    (90.0, 3),   # down
]

TWO_STROKE_TABLE = [
    (_SIX_WAY_ANGLES["up_right"], 0),
    (_SIX_WAY_ANGLES["up"], 1),
    (_SIX_WAY_ANGLES["up_left"], 2),
    (_SIX_WAY_ANGLES["down_right"], 3),
    (_SIX_WAY_ANGLES["down"], 4),
    (_SIX_WAY_ANGLES["down_left"], 5),
]

# Three columns by two rows, read left to right
SIX_KEY_TABLE = [
    (_SIX_WAY_ANGLES["up_left"], 0),
    (_SIX_WAY_ANGLES["up"], 1),
    (_SIX_WAY_ANGLES["up_right"], 2),
    (_SIX_WAY_ANGLES["down_left"], 3),
    (_SIX_WAY_ANGLES["down"], 4),
    (_SIX_WAY_ANGLES["down_right"], 5),
]

EIGHT_KEY_TABLE = [
    (float(Heading.UP_LEFT), 0),
    (float(Heading.UP), 1),
    (float(Heading.UP_RIGHT), 2),
    (float(Heading.RIGHT), 3),
    (float(Heading.LEFT), 4),
    (float(Heading.DOWN_LEFT), 5),
    (float(Heading.DOWN), 6),
    (float(Heading.DOWN_RIGHT), 7),
]

# Second stroke on a two-letter key: up for the first letter, down for the second
TAIL_PAIR_TABLE = [
    (float(Heading.UP), 0),
    (float(Heading.DOWN), 1),
]

DIRECTION_TABLES: Dict[int, list] = {
    4: FOUR_KEY_TABLE,
    6: SIX_KEY_TABLE,
    8: EIGHT_KEY_TABLE,
    int(StrokeTable.FIRST): TWO_STROKE_TABLE,
    int(StrokeTable.SECOND): TWO_STROKE_TABLE,
    int(StrokeTable.SECOND_TAIL): TAIL_PAIR_TABLE,
    int(KeyboardLayout.MSR): TWO_STROKE_TABLE,
}

SectorCount = Union[int, StrokeTable, KeyboardLayout]


def vector_angle(vector: Vector) -> float:
    """Angle in degrees clockwise from +x, normalized to [0, 360)."""
    dx, dy = vector
    return math.degrees(math.atan2(dy, dx)) % 360.0


def _angular_distance(a: float, b: float) -> float:
    d = abs(a - b) % 360.0
    return min(d, 360.0 - d)


def classify(vector: Vector, sector_count: SectorCount) -> Optional[int]:
    """
    Resolve a swipe vector to a key index.

    Args:
        vector: (dx, dy) drag delta, y increasing downward.
        sector_count: 4, 6 or 8 for single-stroke layouts, a StrokeTable
            sentinel for two-stroke input, or the MSR layout value.

    Returns:
        Key index from the layout's table, or None for a zero-length
        vector or an unknown sector count.
    """
    table = DIRECTION_TABLES.get(int(sector_count))
    if table is None:
        return None
    dx, dy = vector
    if dx == 0 and dy == 0:
        return None

    angle = vector_angle(vector)
    best_index = None
    best_distance = float("inf")
    for heading, key_index in table:
        distance = _angular_distance(angle, heading)
        # Strict comparison keeps the first heading in table order on ties
        if distance < best_distance:
            best_distance = distance
            best_index = key_index
    return best_index


def direction(vector: Vector) -> SwipeDirection:
    """Dominant axis first, then the sign along it."""
    dx, dy = vector
    if abs(dx) > abs(dy):
        return SwipeDirection.RIGHT if dx > 0 else SwipeDirection.LEFT
    return SwipeDirection.DOWN if dy > 0 else SwipeDirection.UP


def swipe_vector(translation: Vector, velocity: Vector, lookahead: float = 0.1) -> Vector:
    """Blend the drag translation with a short projection of its velocity."""
    return (
        translation[0] + velocity[0] * lookahead,
        translation[1] + velocity[1] * lookahead,
    )


def is_tap(translation: Vector, velocity: Vector,
           min_distance: float = 20.0, min_velocity: float = 100.0) -> bool:
    """A drag counts as a tap when it is both short and slow."""
    distance = math.hypot(*translation)
    speed = math.hypot(*velocity)
    return distance < min_distance and speed < min_velocity


# ---------------------------------------------------------------------------
# Batch helpers for sampled drags (velocity history)
# ---------------------------------------------------------------------------

def classify_samples(samples: Sequence[Vector], sector_count: SectorCount) -> np.ndarray:
    """
    Classify many vectors at once.
    Returns an int array of key indices, -1 where a sample is zero-length
    or the sector count is unknown.
    """
    points = np.asarray(samples, dtype=float).reshape(-1, 2)
    table = DIRECTION_TABLES.get(int(sector_count))
    if table is None or len(points) == 0:
        return np.full(len(points), -1, dtype=int)

    headings = np.array([h for h, _ in table])
    keys = np.array([k for _, k in table])

    angles = np.degrees(np.arctan2(points[:, 1], points[:, 0])) % 360.0
    diff = np.abs(angles[:, None] - headings[None, :]) % 360.0
    diff = np.minimum(diff, 360.0 - diff)
    # argmin returns the first minimum, same tie rule as classify()
    result = keys[np.argmin(diff, axis=1)]

    zero = (points[:, 0] == 0) & (points[:, 1] == 0)
    result[zero] = -1
    return result


def _key_slots(sector_count: SectorCount) -> int:
    table = DIRECTION_TABLES.get(int(sector_count))
    if not table:
        return 0
    return max(k for _, k in table) + 1


def majority_key(samples: Sequence[Vector], sector_count: SectorCount,
                 weighted: bool = False) -> Optional[int]:
    """
    Key chosen by most samples of a drag.
    With weighted=True later samples count more (weight (i + 1) / n,
    scaled to integers). Ties go to the lowest key index.
    """
    keys = classify_samples(samples, sector_count)
    slots = _key_slots(sector_count)
    valid = keys >= 0
    if slots == 0 or not valid.any():
        return None

    if weighted:
        n = len(keys)
        weights = ((np.arange(n) + 1) / n * 10).astype(int)
        counts = np.bincount(keys[valid], weights=weights[valid], minlength=slots)
    else:
        counts = np.bincount(keys[valid], minlength=slots)

    if counts.max() <= 0:
        return None
    return int(np.argmax(counts))


def gesture_confidence(samples: Sequence[Vector], sector_count: SectorCount) -> float:
    """
    Confidence in [0, 1]: consistency of the sampled directions times
    how much data there is (saturating at five samples).
    """
    if len(samples) < 2:
        return 0.0
    slots = _key_slots(sector_count)
    if slots < 2:
        return 0.0
    keys = classify_samples(samples, sector_count)
    unique = len(np.unique(keys))
    consistency = 1.0 - (unique - 1) / (slots - 1)
    data_confidence = min(1.0, len(samples) / 5.0)
    return max(0.0, consistency) * data_confidence
