"""
Bounded suggestion cache safe for concurrent readers and writers.
"""
import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, List, Optional

from .engine import EngineMetrics, PredictionEngineType, QueryStats, Suggestion, serialize_keys

log = logging.getLogger("swipekeys.prediction")

DEFAULT_CAPACITY = 1000
DEFAULT_EVICTION_BATCH = 100

# Given the live entries and how many must go, return the keys to drop
EvictionPolicy = Callable[[Dict[str, List[Suggestion]], int], List[str]]


def evict_oldest_batch(batch_size: int = DEFAULT_EVICTION_BATCH) -> EvictionPolicy:
    """
    Bulk eviction: drop the oldest-inserted entries, at least batch_size
    of them.
    """
    def policy(entries: Dict[str, List[Suggestion]], overflow: int) -> List[str]:
        count = max(overflow, batch_size)
        victims = []
        for key in entries:
            if len(victims) >= count:
                break
            victims.append(key)
        return victims
    return policy


class ReadWriteLock:
    """
    Many readers or one writer. Waiting writers block new readers, so a
    steady stream of queries cannot starve an insert.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self):
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SuggestionCache:
    """
    Key-sequence -> ranked suggestions.
    Never grows past its capacity: an insert that would overflow evicts a
    batch first. Failures are logged and swallowed; callers then
    recompute.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY,
                 eviction_batch: int = DEFAULT_EVICTION_BATCH,
                 policy: Optional[EvictionPolicy] = None):
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._policy = policy or evict_oldest_batch(eviction_batch)
        self._entries: Dict[str, List[Suggestion]] = {}
        self._epoch = 0
        self._lock = ReadWriteLock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def epoch(self) -> int:
        """Bumped by every clear(); read it before computing a value to put."""
        with self._lock.read():
            return self._epoch

    def get(self, key: str) -> Optional[List[Suggestion]]:
        try:
            with self._lock.read():
                value = self._entries.get(key)
        except Exception as e:
            log.warning("Cache read failed for %r: %s", key, e)
            return None
        return list(value) if value is not None else None

    def put(self, key: str, suggestions: List[Suggestion], epoch: Optional[int] = None):
        """
        Store suggestions for key. With epoch set, the write is dropped
        if the cache was cleared since that epoch was read.
        """
        try:
            with self._lock.write():
                if epoch is not None and epoch != self._epoch:
                    log.debug("Dropping cache write for %r from before a clear", key)
                    return
                if key not in self._entries and len(self._entries) >= self._capacity:
                    overflow = len(self._entries) - self._capacity + 1
                    for victim in self._policy(self._entries, overflow):
                        self._entries.pop(victim, None)
                    # A policy that frees too little must not break the bound
                    while len(self._entries) >= self._capacity:
                        self._entries.pop(next(iter(self._entries)))
                self._entries[key] = list(suggestions)
        except Exception as e:
            log.warning("Cache write failed for %r: %s", key, e)

    def clear(self):
        try:
            with self._lock.write():
                self._entries.clear()
                self._epoch += 1
        except Exception as e:
            log.warning("Cache clear failed: %s", e)

    def memory_usage(self) -> int:
        """Estimated bytes held: keys plus words plus one int per score."""
        with self._lock.read():
            total = 0
            for key, value in self._entries.items():
                total += len(key.encode("utf-8"))
                total += sum(len(word.encode("utf-8")) + 8 for word, _ in value)
            return total

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock.read():
            return key in self._entries


class CachedPredictionEngine:
    """
    Wraps an engine whose queries are not cheap with a SuggestionCache.
    Grouping changes and inserts clear the cache, since cached sequences
    are only valid for the state that produced them.
    """

    def __init__(self, engine, cache: Optional[SuggestionCache] = None):
        self._engine = engine
        self._cache = cache if cache is not None else SuggestionCache()
        self._stats = QueryStats()

    @property
    def wrapped(self):
        return self._engine

    @property
    def cache(self) -> SuggestionCache:
        return self._cache

    @property
    def engine_type(self) -> PredictionEngineType:
        return self._engine.engine_type

    @property
    def is_available(self) -> bool:
        return self._engine.is_available

    @property
    def performance_metrics(self) -> Optional[EngineMetrics]:
        return self._stats.snapshot(memory_usage=self._safe_memory_usage())

    def set_key_letter_grouping(self, grouping, two_strokes: bool):
        self._engine.set_key_letter_grouping(grouping, two_strokes)
        self._cache.clear()

    def insert(self, word: str, frequency: int):
        self._engine.insert(word, frequency)
        self._cache.clear()

    def contains(self, word: str) -> bool:
        return self._engine.contains(word)

    def suggestions(self, key_sequence) -> List[Suggestion]:
        start = time.perf_counter()
        key = serialize_keys(key_sequence)
        # Read before computing so a clear during the query voids the put
        epoch = self._cache.epoch

        cached = self._cache.get(key)
        if cached is not None:
            self._stats.record(time.perf_counter() - start, cache_hit=True)
            return cached

        try:
            result = self._engine.suggestions(key_sequence)
        except Exception as e:
            log.warning("%s engine failed for %s: %s", self.engine_type.value, key, e)
            result = []
        else:
            self._cache.put(key, result, epoch)
        self._stats.record(time.perf_counter() - start)
        return list(result)

    def _safe_memory_usage(self) -> int:
        try:
            return self._cache.memory_usage()
        except Exception as e:
            log.warning("Cache size estimate failed: %s", e)
            return 0
