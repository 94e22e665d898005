"""
Prediction engine interface shared by all back-ends.
An engine maps a sequence of key indices to (word, score) candidates
ranked best first.
"""
import string
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

Suggestion = Tuple[str, int]


class UnsupportedWordError(ValueError):
    """A word holds a character the current key grouping does not cover."""

    def __init__(self, invalid_char: str, word: str = ""):
        self.invalid_char = invalid_char
        self.word = word
        super().__init__(f"Unsupported character {invalid_char!r} in word {word!r}")


class PredictionEngineType(Enum):
    """Registered engine identifiers."""
    CUSTOM = "custom"
    LEXICON = "lexicon"
    HYBRID = "hybrid"

    @property
    def display_name(self) -> str:
        return {
            PredictionEngineType.CUSTOM: "Custom Trie Engine",
            PredictionEngineType.LEXICON: "Word List Engine",
            PredictionEngineType.HYBRID: "Hybrid Engine",
        }[self]

    @property
    def description(self) -> str:
        return {
            PredictionEngineType.CUSTOM: "Fast offline prediction using the custom dictionary",
            PredictionEngineType.LEXICON: "Prefix completion over a system word list",
            PredictionEngineType.HYBRID: "Combines both engines for best results",
        }[self]


@dataclass(frozen=True)
class EngineMetrics:
    """Snapshot of an engine's query performance."""
    average_response_time: float
    total_queries: int
    cache_hit_rate: float
    memory_usage: int  # bytes
    last_updated: float = field(default_factory=time.time)


@runtime_checkable
class PredictionEngine(Protocol):
    """Capability every prediction back-end provides."""

    @property
    def engine_type(self) -> PredictionEngineType: ...

    @property
    def is_available(self) -> bool: ...

    @property
    def performance_metrics(self) -> Optional[EngineMetrics]: ...

    def set_key_letter_grouping(self, grouping: Sequence[str], two_strokes: bool) -> None: ...

    def insert(self, word: str, frequency: int) -> None: ...

    def contains(self, word: str) -> bool: ...

    def suggestions(self, key_sequence: Sequence[int]) -> List[Suggestion]: ...


def build_key_letter_grouping(grouping: Sequence[str], two_strokes: bool) -> Dict[str, int]:
    """
    Letter -> key index table.
    In two-stroke mode every letter a-z maps to its own character code;
    otherwise a letter maps to the index of the group containing it.
    """
    if two_strokes:
        return {letter: ord(letter) for letter in string.ascii_lowercase}
    table = {}
    for index, group in enumerate(grouping):
        for letter in group:
            table[letter] = index
    return table


def serialize_keys(key_sequence: Sequence[int]) -> str:
    """Cache key for a key sequence."""
    return ",".join(str(k) for k in key_sequence)


class QueryStats:
    """Thread-safe query counters for EngineMetrics."""

    def __init__(self):
        self._lock = threading.Lock()
        self.total_queries = 0
        self.total_time = 0.0
        self.cache_hits = 0

    def record(self, elapsed: float, cache_hit: bool = False):
        with self._lock:
            self.total_queries += 1
            self.total_time += elapsed
            if cache_hit:
                self.cache_hits += 1

    def reset(self):
        with self._lock:
            self.total_queries = 0
            self.total_time = 0.0
            self.cache_hits = 0

    def snapshot(self, memory_usage: int = 0) -> EngineMetrics:
        with self._lock:
            queries = self.total_queries
            average = self.total_time / queries if queries else 0.0
            hit_rate = self.cache_hits / queries if queries else 0.0
        return EngineMetrics(
            average_response_time=average,
            total_queries=queries,
            cache_hit_rate=hit_rate,
            memory_usage=memory_usage,
        )
