"""Word lists: frequency CSV loading, user-added words and engine bootstrap."""

import logging
import os
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from .engine import UnsupportedWordError

log = logging.getLogger("swipekeys.prediction")

DEFAULT_WORD_FREQUENCY = 99999
MAX_USER_ADDED_WORDS = 1000

_VALID_WORD = re.compile(r"^[A-Za-z]+$")

LEXICON_SEARCH_PATHS = [
    "words.txt",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "..", "words.txt"),
    "/usr/share/dict/words",
]


def is_word_valid(word: str) -> bool:
    """Letters only, at least one."""
    return bool(_VALID_WORD.match(word))


def load_word_frequencies(path: Union[str, Path]) -> List[Tuple[str, int]]:
    """
    Read ``word,frequency`` lines. Words are lowercased; a frequency that
    is not an integer becomes DEFAULT_WORD_FREQUENCY. Lines without a
    comma are skipped. Returns [] if the file cannot be read.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        log.warning("Could not read word list %s: %s", path, e)
        return []

    entries: List[Tuple[str, int]] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        parts = line.split(",")
        if len(parts) < 2:
            continue
        word = parts[0].strip().lower()
        try:
            frequency = int(parts[1])
        except ValueError:
            frequency = DEFAULT_WORD_FREQUENCY
        entries.append((word, frequency))
    log.info("Loaded %s words from %s", f"{len(entries):,}", path)
    return entries


def load_lexicon(path: Optional[Union[str, Path]] = None) -> List[Tuple[str, int]]:
    """
    Word list for the lexicon engine, most common first when the file
    carries frequencies. Plain one-word-per-line files are ranked by
    position. Only lowercase alphabetic words are kept. Tries ``path``
    then the usual locations; returns [] if nothing is found.
    """
    search_paths: List[str] = []
    if path:
        search_paths.append(str(path))
    search_paths.extend(LEXICON_SEARCH_PATHS)

    for candidate in search_paths:
        if not os.path.exists(candidate):
            continue
        seen: Set[str] = set()
        entries: List[Tuple[str, int]] = []
        with open(candidate, "r", encoding="utf-8", errors="ignore") as f:
            for line in f:
                parts = line.strip().split(",")
                word = parts[0].strip()
                if not word or not word.isalpha() or not word.islower() or word in seen:
                    continue
                frequency = 0
                if len(parts) > 1:
                    try:
                        frequency = int(parts[1])
                    except ValueError:
                        frequency = DEFAULT_WORD_FREQUENCY
                seen.add(word)
                entries.append((word, frequency))
        if entries:
            if any(freq for _, freq in entries):
                entries.sort(key=lambda e: e[1], reverse=True)
            log.info("Loaded %s lexicon words from %s", f"{len(entries):,}", candidate)
            return entries

    log.warning("No word list found -- the lexicon engine is unavailable.")
    return []


class UserDictionary:
    """
    Words the user added, newest first, plus how often each word was
    picked. The external store saves and restores both lists.
    """

    def __init__(self, words: Iterable[str] = (), ratings: Optional[Dict[str, int]] = None,
                 max_words: int = MAX_USER_ADDED_WORDS):
        self.max_words = max_words
        self.words: List[str] = list(words)[:max_words]
        self.ratings: Dict[str, int] = dict(ratings or {})

    def add_word(self, word: str) -> None:
        self.words.insert(0, word)
        if len(self.words) > self.max_words:
            self.words.pop()

    def remove_word(self, index: int) -> None:
        if 0 <= index < len(self.words):
            del self.words[index]

    def clear_words(self) -> None:
        self.words = []

    def increment_rating(self, word: str) -> None:
        self.ratings[word] = self.ratings.get(word, 0) + 1

    def rating(self, word: str) -> Optional[int]:
        return self.ratings.get(word)

    def __contains__(self, word: str) -> bool:
        return word in self.words


def populate_engine(engine, word_frequencies: Iterable[Tuple[str, int]],
                    user_dictionary: Optional[UserDictionary] = None) -> int:
    """
    Fill an engine: user words first at DEFAULT_WORD_FREQUENCY + rating,
    then dictionary words (a rated word is lifted to the same boost).
    Words the grouping cannot spell are skipped. Returns the number of
    words inserted.
    """
    inserted = 0
    if user_dictionary is not None:
        for word in user_dictionary.words:
            rating = user_dictionary.rating(word) or 0
            try:
                engine.insert(word, DEFAULT_WORD_FREQUENCY + rating)
                inserted += 1
            except UnsupportedWordError as e:
                log.warning("Cannot add word %r, invalid char %r", word, e.invalid_char)

    skipped = 0
    for word, frequency in word_frequencies:
        rating = user_dictionary.rating(word) if user_dictionary is not None else None
        if rating is not None:
            frequency = DEFAULT_WORD_FREQUENCY + rating
        try:
            engine.insert(word, frequency)
            inserted += 1
        except UnsupportedWordError:
            skipped += 1

    if skipped:
        log.debug("Skipped %d dictionary words with unsupported characters", skipped)
    return inserted
