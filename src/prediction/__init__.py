"""
SwipeKeys Prediction Module

Ambiguous-keyboard word prediction: trie engine, word-list engines,
engine manager with caching, and the background query worker.
"""
from .engine import (
    EngineMetrics,
    PredictionEngine,
    PredictionEngineType,
    UnsupportedWordError,
)
from .trie import PredictionTrie
from .cache import SuggestionCache, CachedPredictionEngine
from .lexicon import LexiconPredictionEngine
from .hybrid import HybridPredictionEngine
from .manager import PredictionEngineManager
from .dictionary import UserDictionary, load_word_frequencies, load_lexicon, populate_engine
from .completion import Completion, compose_predictions
from .worker import PredictionWorker, SuggestionResult

__all__ = [
    'EngineMetrics',
    'PredictionEngine',
    'PredictionEngineType',
    'UnsupportedWordError',
    'PredictionTrie',
    'SuggestionCache',
    'CachedPredictionEngine',
    'LexiconPredictionEngine',
    'HybridPredictionEngine',
    'PredictionEngineManager',
    'UserDictionary',
    'load_word_frequencies',
    'load_lexicon',
    'populate_engine',
    'Completion',
    'compose_predictions',
    'PredictionWorker',
    'SuggestionResult',
]
