"""
Registry of interchangeable prediction engines with one current engine.
"""
import logging
import threading
from typing import Dict, List, Optional, Sequence, Union

from .cache import (
    DEFAULT_CAPACITY,
    DEFAULT_EVICTION_BATCH,
    CachedPredictionEngine,
    SuggestionCache,
)
from .engine import EngineMetrics, PredictionEngine, PredictionEngineType, Suggestion
from .trie import PredictionTrie

log = logging.getLogger("swipekeys.prediction")

EngineId = Union[PredictionEngineType, str]


def _engine_type(engine_id: EngineId) -> Optional[PredictionEngineType]:
    if isinstance(engine_id, PredictionEngineType):
        return engine_id
    try:
        return PredictionEngineType(str(engine_id).lower())
    except ValueError:
        return None


class PredictionEngineManager:
    """
    Holds the registered engines and forwards queries to the current one.

    A trie engine is always registered as CUSTOM and is current until a
    switch succeeds. Engines registered with ``cached=True`` are wrapped
    in a bounded SuggestionCache.

    Queries answered off the interactive thread are tagged with a
    generation from begin_query(); only the latest generation's result
    should be applied.
    """

    def __init__(self, preferences=None, custom_engine: Optional[PredictionTrie] = None,
                 cache_capacity: int = DEFAULT_CAPACITY,
                 cache_eviction_batch: int = DEFAULT_EVICTION_BATCH):
        """
        Args:
            preferences: Object with an ``engine`` attribute that receives
                the id of the engine switched to (e.g. PredictionConfig).
            custom_engine: Trie engine to register as CUSTOM.
            cache_capacity: Entry bound for cached engines.
            cache_eviction_batch: Entries dropped per overflow.
        """
        self._preferences = preferences
        self._cache_capacity = cache_capacity
        self._cache_eviction_batch = cache_eviction_batch
        self._engines: Dict[PredictionEngineType, PredictionEngine] = {}
        self._current_type = PredictionEngineType.CUSTOM

        self._generation = 0
        self._generation_lock = threading.Lock()

        self.register_engine(custom_engine or PredictionTrie(), PredictionEngineType.CUSTOM)

    # --- Registry -------------------------------------------------------------

    def register_engine(self, engine: PredictionEngine,
                        engine_type: Optional[PredictionEngineType] = None,
                        cached: bool = False) -> PredictionEngine:
        """Register (or replace) an engine. Returns the registered object."""
        if engine_type is None:
            engine_type = engine.engine_type
        if cached:
            cache = SuggestionCache(self._cache_capacity, self._cache_eviction_batch)
            engine = CachedPredictionEngine(engine, cache)
        self._engines[engine_type] = engine
        return engine

    @property
    def engines(self) -> Dict[PredictionEngineType, PredictionEngine]:
        return dict(self._engines)

    @property
    def current_engine_type(self) -> PredictionEngineType:
        return self._current_type

    @property
    def current_engine(self) -> Optional[PredictionEngine]:
        return self._engines.get(self._current_type)

    @property
    def available_engines(self) -> List[PredictionEngine]:
        return [engine for engine in self._engines.values() if engine.is_available]

    def engine(self, engine_id: EngineId) -> Optional[PredictionEngine]:
        engine_type = _engine_type(engine_id)
        return self._engines.get(engine_type) if engine_type else None

    def switch_to_engine(self, engine_id: EngineId) -> bool:
        """
        Make another engine current if it is registered and available.
        The caller must re-apply the key grouping to the new engine.
        """
        engine_type = _engine_type(engine_id)
        engine = self._engines.get(engine_type) if engine_type else None
        if engine is None or not engine.is_available:
            log.info("Engine %r unavailable, staying on %s", engine_id, self._current_type.value)
            return False

        self._current_type = engine_type
        if self._preferences is not None:
            self._preferences.engine = engine_type.value
        log.info("Switched prediction engine to %s", engine_type.display_name)
        return True

    def restore_preferred_engine(self) -> bool:
        """Switch to the engine saved in preferences, if any."""
        preferred = getattr(self._preferences, "engine", None)
        if not preferred:
            return False
        return self.switch_to_engine(preferred)

    # --- Uniform engine surface ---------------------------------------------------

    def set_key_letter_grouping(self, grouping: Sequence[str], two_strokes: bool):
        engine = self.current_engine
        if engine is not None:
            engine.set_key_letter_grouping(grouping, two_strokes)

    def insert(self, word: str, frequency: int):
        """Raises UnsupportedWordError from the current engine."""
        engine = self.current_engine
        if engine is not None:
            engine.insert(word, frequency)

    def contains(self, word: str) -> bool:
        engine = self.current_engine
        return engine.contains(word) if engine is not None else False

    def suggestions(self, key_sequence: Sequence[int]) -> List[Suggestion]:
        """Ranked candidates from the current engine. Never raises."""
        engine = self.current_engine
        if engine is None:
            return []
        try:
            return list(engine.suggestions(list(key_sequence)))
        except Exception as e:
            log.warning("Suggestion query %s failed: %s", list(key_sequence), e)
            return []

    @property
    def performance_metrics(self) -> Optional[EngineMetrics]:
        engine = self.current_engine
        return engine.performance_metrics if engine is not None else None

    # --- Query generations ----------------------------------------------------------

    def begin_query(self) -> int:
        """New generation number; every older one is superseded."""
        with self._generation_lock:
            self._generation += 1
            return self._generation

    def is_latest(self, generation: int) -> bool:
        with self._generation_lock:
            return generation == self._generation
