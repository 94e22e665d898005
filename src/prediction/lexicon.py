"""
Word-list prediction engine.
Expands an ambiguous key sequence into the letter prefixes it can spell
and completes each prefix from a plain word list, the way a system spell
checker offers completions.
"""
import logging
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple, Union

from .engine import (
    EngineMetrics,
    PredictionEngineType,
    Suggestion,
    UnsupportedWordError,
    build_key_letter_grouping,
)

log = logging.getLogger("swipekeys.prediction")

DEFAULT_LIMIT = 10
COMPLETIONS_PER_PREFIX = 25


class _LetterNode:
    """Letter trie node holding the best-ranked completions below it."""

    __slots__ = ("children", "completions", "is_terminal")

    def __init__(self):
        self.children: Dict[str, "_LetterNode"] = {}
        self.completions: List[str] = []
        self.is_terminal = False


class _Grouping(NamedTuple):
    """Everything derived from one key grouping, swapped in as a unit."""
    two_strokes: bool
    key_for_letter: Dict[str, int]
    letters_for_key: Dict[int, str]


class LexiconPredictionEngine:
    """
    Read-only engine over a ranked word list.

    Scores follow completion position: the n-th completion of a prefix
    scores ``max(1000 - 10 * n, 1)``. Results are de-duplicated, keeping
    the best score, and cut to ``limit``.
    """

    def __init__(self, words: Union[Iterable[Tuple[str, int]], Iterable[str]] = (),
                 limit: int = DEFAULT_LIMIT):
        self.limit = limit
        self._root = _LetterNode()
        self._rank: Dict[str, int] = {}
        self._grouping = _Grouping(False, {}, {})
        for entry in words:
            word = entry[0] if isinstance(entry, tuple) else entry
            self._add(word)

    def _add(self, word: str):
        if not word or word in self._rank:
            return
        self._rank[word] = len(self._rank)
        node = self._root
        for ch in word:
            node = node.children.setdefault(ch, _LetterNode())
            if len(node.completions) < COMPLETIONS_PER_PREFIX:
                node.completions.append(word)
        node.is_terminal = True

    # --- PredictionEngine capability -----------------------------------------

    @property
    def engine_type(self) -> PredictionEngineType:
        return PredictionEngineType.LEXICON

    @property
    def is_available(self) -> bool:
        return bool(self._rank)

    @property
    def performance_metrics(self) -> Optional[EngineMetrics]:
        # Counted by the caching wrapper the manager puts around this engine
        return None

    def set_key_letter_grouping(self, grouping: Sequence[str], two_strokes: bool):
        key_for_letter = build_key_letter_grouping(grouping, two_strokes)
        letters: Dict[int, str] = {}
        for letter, key in sorted(key_for_letter.items()):
            letters[key] = letters.get(key, "") + letter
        self._grouping = _Grouping(two_strokes, key_for_letter, letters)

    def insert(self, word: str, frequency: int):
        """
        The word list is read-only. Words are still checked against the
        grouping so callers get the same error as from the trie engine.
        """
        key_for_letter = self._grouping.key_for_letter
        for ch in word:
            if ch not in key_for_letter:
                raise UnsupportedWordError(ch, word)
        log.debug("Lexicon engine ignores insert of %r", word)

    def contains(self, word: str) -> bool:
        return word in self._rank

    def suggestions(self, key_sequence: Sequence[int]) -> List[Suggestion]:
        if not key_sequence:
            return []

        scores: Dict[str, int] = {}
        for node in self._prefix_nodes(key_sequence, self._grouping):
            for index, completion in enumerate(node.completions):
                score = max(1000 - index * 10, 1)
                if score > scores.get(completion, 0):
                    scores[completion] = score

        ranked = sorted(scores.items(), key=lambda item: (-item[1], self._rank[item[0]]))
        return ranked[: self.limit]

    def _prefix_nodes(self, key_sequence: Sequence[int], grouping: _Grouping) -> List[_LetterNode]:
        """Trie nodes for every prefix the key sequence can spell."""
        if grouping.two_strokes:
            node = self._root
            for code in key_sequence:
                letter = chr(code) if 0 <= code < 0x110000 else ""
                node = node.children.get(letter)
                if node is None:
                    return []
            return [node]

        frontier = [self._root]
        for key in key_sequence:
            letters = grouping.letters_for_key.get(key, "")
            next_frontier = []
            for node in frontier:
                for letter in letters:
                    child = node.children.get(letter)
                    if child is not None:
                        next_frontier.append(child)
            frontier = next_frontier
            if not frontier:
                break
        return frontier

    def __len__(self) -> int:
        return len(self._rank)
