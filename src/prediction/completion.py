"""
Prediction list composition.
Turns the entered key sequence into the words shown in the prediction
slots and the word shown in the input box.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from ..keyboard.layouts import letter_from_code
from .engine import Suggestion

LETTER_CODES = list(range(ord("a"), ord("z") + 1))
DEFAULT_MAX_SUGGESTIONS = 4
DEFAULT_MAX_SEARCH_LEVEL = 4
LETTER_CODE_MAX_SEARCH_LEVEL = 2


@dataclass
class Completion:
    predictions: List[Suggestion] = field(default_factory=list)
    display_word: str = ""

    @property
    def words(self) -> List[str]:
        return [word for word, _ in self.predictions]


def literal_word(key_sequence: Sequence[int]) -> str:
    """Letters typed in a letter-code layout, unknown codes skipped."""
    return "".join(letter_from_code(code) or "" for code in key_sequence)


def _extensions(sequences: List[List[int]], alphabet: Sequence[int]) -> List[List[int]]:
    return [sequence + [key] for sequence in sequences for key in alphabet]


def compose_predictions(query: Callable[[Sequence[int]], List[Suggestion]],
                        key_sequence: Sequence[int],
                        key_count: int,
                        letter_codes: bool = False,
                        previous_word: str = "",
                        max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
                        max_search_level: int = DEFAULT_MAX_SEARCH_LEVEL) -> Completion:
    """
    Build the prediction list for a key sequence.

    When the exact sequence gives fewer than max_suggestions words, the
    sequence is extended one key at a time (every key of the layout, or
    every letter code) and the longer words are collected, sorted by
    frequency and placed after the exact results.

    Args:
        query: Engine lookup, usually PredictionEngineManager.suggestions.
        key_sequence: Entered keys.
        key_count: Keys on the ambiguous layout.
        letter_codes: Keys are letter codes (two-stroke and MSR layouts).
            The typed letters are then always offered first.
        previous_word: Word shown before this key; gets a "?" appended
            when nothing matches.
        max_suggestions: Number of prediction slots.
        max_search_level: How many keys to extend by at most.

    Returns:
        Completion with at most max_suggestions predictions.
    """
    keys = list(key_sequence)
    if not keys:
        return Completion()

    results = list(query(keys))
    if len(results) >= max_suggestions:
        return Completion(results[:max_suggestions], results[0][0])

    alphabet = LETTER_CODES if letter_codes else list(range(max(key_count, 0)))
    if letter_codes:
        max_search_level = min(max_search_level, LETTER_CODE_MAX_SEARCH_LEVEL)

    extended: List[Suggestion] = []
    sequences = [keys]
    level = 0
    while len(extended) < max_suggestions - len(results) and level < max_search_level:
        sequences = _extensions(sequences, alphabet)
        for sequence in sequences:
            extended.extend(query(sequence))
        level += 1

    extended.sort(key=lambda s: s[1], reverse=True)
    predictions = results + extended

    if letter_codes:
        typed = literal_word(keys)
        if not predictions or predictions[0][0] != typed:
            predictions.insert(0, (typed, 0))

    if not predictions:
        return Completion([], (previous_word + "?")[: len(keys)])

    first = predictions[0][0]
    if len(first) >= len(keys):
        display_word = first[: len(keys)]
    else:
        display_word = (previous_word + "?")[: len(keys)]
    return Completion(predictions[:max_suggestions], display_word)
