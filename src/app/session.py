"""
Keyboard session.
Owns the layout, input sequencer, prediction engines, user dictionary and
the prediction worker thread, and reports changes through Qt signals.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from PyQt5.QtCore import QObject, QThread, pyqtSignal

from ..keyboard.geometry import Vector, is_tap, majority_key, swipe_vector
from ..keyboard.layouts import ControlAction, KeyboardLayoutDescriptor, get_layout
from ..keyboard.sequencer import NOOP, EventKind, InputSequencer, SequencerEvent
from ..prediction.completion import Completion
from ..prediction.dictionary import (
    DEFAULT_WORD_FREQUENCY,
    UserDictionary,
    is_word_valid,
    load_lexicon,
    load_word_frequencies,
    populate_engine,
)
from ..prediction.engine import PredictionEngineType, Suggestion, UnsupportedWordError
from ..prediction.hybrid import HybridPredictionEngine
from ..prediction.lexicon import LexiconPredictionEngine
from ..prediction.manager import PredictionEngineManager
from ..prediction.trie import PredictionTrie
from ..prediction.worker import PredictionWorker, SuggestionResult
from .config import Config

log = logging.getLogger("swipekeys.app")


class KeyboardSession(QObject):
    """
    Top-level object of a typing session.

    Gestures come in through handle_drag / handle_swipe_samples / handle_tap,
    go through the InputSequencer, and every change of the key sequence
    triggers a prediction query. With ``prediction.threaded`` the query
    runs on a worker QThread; results of superseded queries are dropped.
    """
    keys_changed = pyqtSignal(object)         # Emits tuple of key indices
    suggestions_changed = pyqtSignal(object)  # Emits Completion
    control_action = pyqtSignal(object)       # Emits ControlAction
    word_committed = pyqtSignal(str)
    sentence_changed = pyqtSignal(str)
    error = pyqtSignal(str)

    _query_requested = pyqtSignal(int, object, int, bool, str)

    def __init__(self, config: Optional[Config] = None,
                 word_frequencies: Optional[Sequence[Tuple[str, int]]] = None,
                 lexicon_words: Optional[Sequence[Tuple[str, int]]] = None,
                 parent=None):
        """
        Args:
            config: Session configuration. Engine switches and user words
                are written back into it.
            word_frequencies: Dictionary for the trie engine. Loaded from
                ``prediction.dictionary_path`` when None.
            lexicon_words: Word list for the lexicon engine. Loaded from
                ``prediction.lexicon_path`` or the system word list when None.
        """
        super().__init__(parent)
        self._config = config or Config()
        prediction = self._config.prediction

        if word_frequencies is None:
            word_frequencies = (
                load_word_frequencies(prediction.dictionary_path)
                if prediction.dictionary_path else []
            )
        if lexicon_words is None:
            lexicon_words = load_lexicon(prediction.lexicon_path)
        self._word_frequencies = list(word_frequencies)

        self._layout = get_layout(self._config.keyboard.layout)
        self._sequencer = InputSequencer(self._layout)
        self._user_dictionary = UserDictionary(
            self._config.user.words, self._config.user.word_ratings
        )
        self._sentence: List[str] = []
        self._completion = Completion()

        # Engines
        self._trie = PredictionTrie()
        self._manager = PredictionEngineManager(
            preferences=prediction,
            custom_engine=self._trie,
            cache_capacity=prediction.cache_capacity,
            cache_eviction_batch=prediction.cache_eviction_batch,
        )
        lexicon = LexiconPredictionEngine(lexicon_words, limit=prediction.lexicon_limit)
        self._manager.register_engine(lexicon, PredictionEngineType.LEXICON, cached=True)
        self._manager.register_engine(
            HybridPredictionEngine(self._trie, lexicon, limit=prediction.lexicon_limit),
            PredictionEngineType.HYBRID,
            cached=True,
        )
        self._apply_layout()
        self._manager.restore_preferred_engine()

        # Worker
        self._worker = PredictionWorker(
            self._manager,
            max_suggestions=prediction.max_suggestions,
            max_search_level=prediction.max_search_level,
        )
        self._thread: Optional[QThread] = None
        if prediction.threaded:
            self._thread = QThread()
            self._worker.moveToThread(self._thread)
            self._thread.start()
        self._query_requested.connect(self._worker.query)
        self._worker.suggestions_ready.connect(self._on_suggestions_ready)
        self._worker.error.connect(self.error)

    # --- State -------------------------------------------------------------

    @property
    def config(self) -> Config:
        return self._config

    @property
    def layout(self) -> KeyboardLayoutDescriptor:
        return self._layout

    @property
    def sequencer(self) -> InputSequencer:
        return self._sequencer

    @property
    def manager(self) -> PredictionEngineManager:
        return self._manager

    @property
    def user_dictionary(self) -> UserDictionary:
        return self._user_dictionary

    @property
    def keys(self) -> Tuple[int, ...]:
        return self._sequencer.keys

    @property
    def completion(self) -> Completion:
        return self._completion

    @property
    def predictions(self) -> List[Suggestion]:
        return list(self._completion.predictions)

    @property
    def display_word(self) -> str:
        return self._completion.display_word

    @property
    def sentence(self) -> str:
        return " ".join(self._sentence)

    @property
    def has_text(self) -> bool:
        return bool(self._sequencer.keys) or bool(self._sentence)

    # --- Gestures ----------------------------------------------------------

    def handle_drag(self, translation: Vector, velocity: Vector,
                    tapped_key: Optional[int] = None) -> SequencerEvent:
        """
        End of a drag. Short slow drags are taps on tapped_key (ignored
        when no key was under the finger); anything else is a swipe.
        """
        gestures = self._config.gestures
        if is_tap(translation, velocity, gestures.min_swipe_distance, gestures.min_swipe_velocity):
            if tapped_key is None:
                return NOOP
            return self.handle_tap(tapped_key)

        vector = swipe_vector(translation, velocity, gestures.velocity_lookahead)
        event = self._sequencer.swipe(vector, has_text=self.has_text)
        log.debug("swipe %s -> %s", vector, event.kind.name)
        return self._after_event(event)

    def handle_swipe_samples(self, samples: Sequence[Vector], weighted: bool = False) -> SequencerEvent:
        """Swipe given as sampled velocities; the majority key wins."""
        key = majority_key(samples, self._sequencer.current_table(), weighted=weighted)
        if key is None:
            return NOOP
        event = self._sequencer.stroke(key, is_swipe=True, has_text=self.has_text)
        return self._after_event(event)

    def handle_tap(self, key: int) -> SequencerEvent:
        event = self._sequencer.stroke(key, is_swipe=False, has_text=self.has_text)
        return self._after_event(event)

    def backspace(self) -> SequencerEvent:
        """Undo the last key, or the last sentence word when no key is entered."""
        event = self._sequencer.backspace()
        if event.kind == EventKind.NOOP and self._sentence:
            removed = self._sentence.pop()
            log.debug("removed word %r from sentence", removed)
            self.sentence_changed.emit(self.sentence)
            return SequencerEvent(EventKind.REMOVED)
        return self._after_event(event)

    def backspace_all(self) -> SequencerEvent:
        return self._after_event(self._sequencer.clear())

    def _after_event(self, event: SequencerEvent) -> SequencerEvent:
        if event.kind == EventKind.CONTROL:
            self.control_action.emit(event.action)
            if event.action == ControlAction.SPEAK and self._sequencer.keys:
                self.commit_word()
                return event
        if event.changed_sequence:
            self.keys_changed.emit(self._sequencer.keys)
            self.refresh_predictions()
        return event

    # --- Words -------------------------------------------------------------

    def commit_word(self, word: Optional[str] = None) -> Optional[str]:
        """
        Add a word to the sentence and reset the key sequence.
        Defaults to the first prediction. Words the current engine does
        not know become user words; every commit raises the word's rating.
        """
        if word is None:
            word = self._completion.predictions[0][0] if self._completion.predictions else ""
        word = word.strip().lower()
        if not word:
            return None

        if is_word_valid(word) and not self._manager.contains(word):
            try:
                self._manager.insert(word, DEFAULT_WORD_FREQUENCY)
                if self._manager.current_engine_type == PredictionEngineType.LEXICON:
                    self._trie.insert(word, DEFAULT_WORD_FREQUENCY)
            except UnsupportedWordError as e:
                log.warning("Cannot add word %r, invalid char %r", word, e.invalid_char)
                self.error.emit(str(e))
            else:
                self._user_dictionary.add_word(word)
                log.info("Added user word %r", word)
        self._user_dictionary.increment_rating(word)

        self._sentence.append(word)
        self._sequencer.clear()
        self.word_committed.emit(word)
        self.sentence_changed.emit(self.sentence)
        self.keys_changed.emit(self._sequencer.keys)
        self.refresh_predictions()
        return word

    def clear_sentence(self):
        self._sentence = []
        self.sentence_changed.emit("")

    def sync_config(self):
        """Copy user words and ratings back into the config for saving."""
        self._config.user.words = list(self._user_dictionary.words)
        self._config.user.word_ratings = dict(self._user_dictionary.ratings)

    # --- Layout and engines ---------------------------------------------------

    def set_layout(self, name) -> KeyboardLayoutDescriptor:
        """Switch layout; the word in progress is dropped and engines re-keyed."""
        self._layout = get_layout(name)
        self._config.keyboard.layout = self._layout.name
        self._sequencer.set_layout(self._layout)
        self._apply_layout()
        log.info("Keyboard layout %s (%d keys)", self._layout.name, self._layout.visible_keys)
        self.keys_changed.emit(self._sequencer.keys)
        self.refresh_predictions()
        return self._layout

    def switch_engine(self, engine_id) -> bool:
        if not self._manager.switch_to_engine(engine_id):
            return False
        self._manager.set_key_letter_grouping(self._layout.grouping, self._layout.uses_letter_codes)
        self.refresh_predictions()
        return True

    def _apply_layout(self):
        grouping = self._layout.grouping
        letter_codes = self._layout.uses_letter_codes

        self._trie.clear()
        self._trie.set_key_letter_grouping(grouping, letter_codes)
        inserted = populate_engine(self._trie, self._word_frequencies, self._user_dictionary)
        log.info("Dictionary ready: %s words for layout %s", f"{inserted:,}", self._layout.name)

        # Wrapped engines drop their caches here
        for engine in self._manager.engines.values():
            engine.set_key_letter_grouping(grouping, letter_codes)

    # --- Predictions -------------------------------------------------------

    def refresh_predictions(self) -> int:
        """Queue a query for the current keys. Returns its generation."""
        generation = self._manager.begin_query()
        self._query_requested.emit(
            generation,
            self._sequencer.keys,
            self._layout.key_count,
            self._layout.uses_letter_codes,
            self._completion.display_word,
        )
        return generation

    def _on_suggestions_ready(self, result: SuggestionResult):
        if not self._manager.is_latest(result.generation):
            log.debug("dropping stale predictions for generation %d", result.generation)
            return
        self._completion = result.completion
        self.suggestions_changed.emit(result.completion)

    def shutdown(self):
        """Stop the worker thread and store user words in the config."""
        if self._thread is not None:
            self._thread.quit()
            self._thread.wait(2000)
            self._thread = None
        self.sync_config()
