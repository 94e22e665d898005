"""
Background worker answering prediction queries.
Runs in a separate QThread so slow engines never block gesture handling.
"""
from dataclasses import dataclass
from typing import Tuple

from PyQt5.QtCore import QObject, pyqtSignal, pyqtSlot

from .completion import (
    DEFAULT_MAX_SEARCH_LEVEL,
    DEFAULT_MAX_SUGGESTIONS,
    Completion,
    compose_predictions,
)
from .manager import PredictionEngineManager


@dataclass(frozen=True)
class SuggestionResult:
    """Answer to one query, tagged with the generation that asked for it."""
    generation: int
    keys: Tuple[int, ...]
    completion: Completion


class PredictionWorker(QObject):
    """
    Worker that composes predictions for the latest key sequence.
    Queries already superseded when they are dequeued are skipped.
    """
    suggestions_ready = pyqtSignal(object)  # Emits SuggestionResult
    error = pyqtSignal(str)

    def __init__(self, manager: PredictionEngineManager,
                 max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
                 max_search_level: int = DEFAULT_MAX_SEARCH_LEVEL, parent=None):
        super().__init__(parent)
        self._manager = manager
        self._max_suggestions = max_suggestions
        self._max_search_level = max_search_level

    @pyqtSlot(int, object, int, bool, str)
    def query(self, generation: int, keys, key_count: int, letter_codes: bool,
              previous_word: str = ""):
        """Compose predictions for keys and emit them. Runs in worker thread."""
        if not self._manager.is_latest(generation):
            return
        try:
            completion = compose_predictions(
                self._manager.suggestions,
                keys,
                key_count,
                letter_codes=letter_codes,
                previous_word=previous_word,
                max_suggestions=self._max_suggestions,
                max_search_level=self._max_search_level,
            )
        except Exception as e:
            self.error.emit(f"Prediction failed: {e}")
            return
        self.suggestions_ready.emit(SuggestionResult(generation, tuple(keys), completion))
