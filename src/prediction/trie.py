"""
Ambiguous-keyboard word trie.
Nodes are keyed by key index rather than by letter, and every node keeps
the frequency-sorted list of words whose key path ends there.
"""
import threading
import time
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .engine import (
    EngineMetrics,
    PredictionEngineType,
    QueryStats,
    Suggestion,
    UnsupportedWordError,
    build_key_letter_grouping,
)


class TrieNode:
    """Single node of the key-index trie."""

    __slots__ = ("children", "words")

    def __init__(self):
        self.children: Dict[int, "TrieNode"] = {}
        self.words: List[Suggestion] = []

    def add_word(self, word: str, frequency: int):
        """Insert ahead of the first entry whose frequency is <= frequency."""
        for i, (_, stored) in enumerate(self.words):
            if frequency >= stored:
                self.words.insert(i, (word, frequency))
                return
        self.words.append((word, frequency))

    def remove_word(self, word: str):
        self.words = [entry for entry in self.words if entry[0] != word]


class PredictionTrie:
    """
    Word store for ambiguous key sequences.

    Ranking is paid at insert time: a query is a walk of the key path and
    returns the node's list as stored.
    """

    def __init__(self):
        self._root = TrieNode()
        self._words: Dict[str, int] = {}
        # Key path each word was stored under, which outlives grouping changes
        self._paths: Dict[str, Tuple[int, ...]] = {}
        self._key_letter_grouping: Dict[str, int] = {}
        self._lock = threading.RLock()
        self._stats = QueryStats()

    # --- PredictionEngine capability -----------------------------------------

    @property
    def engine_type(self) -> PredictionEngineType:
        return PredictionEngineType.CUSTOM

    @property
    def is_available(self) -> bool:
        return True

    @property
    def performance_metrics(self) -> Optional[EngineMetrics]:
        return self._stats.snapshot(memory_usage=self._estimate_memory_usage())

    def set_key_letter_grouping(self, grouping: Sequence[str], two_strokes: bool):
        """
        Rebuild the letter -> key table. Stored words keep the paths they
        were inserted under.
        """
        with self._lock:
            self._key_letter_grouping = build_key_letter_grouping(grouping, two_strokes)

    def key_sequence_for(self, word: str) -> List[int]:
        """Key path of a word under the current grouping."""
        keys = []
        for char in word:
            key = self._key_letter_grouping.get(char)
            if key is None:
                raise UnsupportedWordError(char, word)
            keys.append(key)
        return keys

    def insert(self, word: str, frequency: int):
        """
        Add a word, or move it if it is already stored.

        Raises:
            UnsupportedWordError: on the first character outside the
                grouping; the trie is left untouched.
        """
        if not word:
            return
        with self._lock:
            keys = self.key_sequence_for(word)

            node = self._root
            for key in keys:
                child = node.children.get(key)
                if child is None:
                    child = TrieNode()
                    node.children[key] = child
                node = child

            old_path = self._paths.get(word)
            if old_path is not None:
                old_node = self._walk(old_path)
                if old_node is not None:
                    old_node.remove_word(word)
            node.add_word(word, frequency)
            self._words[word] = frequency
            self._paths[word] = tuple(keys)

    def contains(self, word: str) -> bool:
        return word in self._words

    def suggestions(self, key_sequence: Sequence[int]) -> List[Suggestion]:
        """Words on the exact key path, best first. Empty if the path is missing."""
        start = time.perf_counter()
        try:
            with self._lock:
                node = self._walk(key_sequence)
                return list(node.words) if node is not None else []
        finally:
            self._stats.record(time.perf_counter() - start)

    # --- Dictionary maintenance ------------------------------------------------

    def frequency(self, word: str) -> Optional[int]:
        return self._words.get(word)

    def words(self) -> Iterator[Tuple[str, int]]:
        """All stored (word, frequency) pairs."""
        with self._lock:
            items = list(self._words.items())
        return iter(items)

    def clear(self):
        """Drop every word. The grouping is kept."""
        with self._lock:
            self._root = TrieNode()
            self._words.clear()
            self._paths.clear()
            self._stats.reset()

    def __len__(self) -> int:
        return len(self._words)

    def __contains__(self, word: str) -> bool:
        return self.contains(word)

    def _walk(self, key_sequence: Sequence[int]) -> Optional[TrieNode]:
        node = self._root
        for key in key_sequence:
            node = node.children.get(key)
            if node is None:
                return None
        return node

    def _estimate_memory_usage(self) -> int:
        with self._lock:
            return sum(len(w.encode("utf-8")) + 8 for w in self._words)
