"""Hybrid engine: exact trie matches first, word-list completions after."""
from typing import List, Optional, Sequence

from .engine import EngineMetrics, PredictionEngineType, Suggestion


class HybridPredictionEngine:
    """
    Combines a primary engine (the user's dictionary trie) with a
    secondary one (a word list). Inserts go to the primary engine only.
    """

    def __init__(self, primary, secondary, limit: int = 10):
        self.primary = primary
        self.secondary = secondary
        self.limit = limit

    @property
    def engine_type(self) -> PredictionEngineType:
        return PredictionEngineType.HYBRID

    @property
    def is_available(self) -> bool:
        return self.primary.is_available

    @property
    def performance_metrics(self) -> Optional[EngineMetrics]:
        return None

    def set_key_letter_grouping(self, grouping: Sequence[str], two_strokes: bool):
        self.primary.set_key_letter_grouping(grouping, two_strokes)
        self.secondary.set_key_letter_grouping(grouping, two_strokes)

    def insert(self, word: str, frequency: int):
        self.primary.insert(word, frequency)

    def contains(self, word: str) -> bool:
        return self.primary.contains(word) or self.secondary.contains(word)

    def suggestions(self, key_sequence: Sequence[int]) -> List[Suggestion]:
        results = list(self.primary.suggestions(key_sequence))
        seen = {word for word, _ in results}
        if self.secondary.is_available:
            for word, score in self.secondary.suggestions(key_sequence):
                if word not in seen:
                    seen.add(word)
                    results.append((word, score))
        return results[: self.limit] if self.limit else results
