import pytest
from src.keyboard.layouts import GROUPING_6_KEYS
from src.prediction.engine import PredictionEngineType, UnsupportedWordError
from src.prediction.hybrid import HybridPredictionEngine
from src.prediction.lexicon import LexiconPredictionEngine
from src.prediction.trie import PredictionTrie

WORDS = [("hello", 900), ("help", 800), ("gem", 700), ("feel", 600), ("hell", 500), ("idea", 400)]


@pytest.fixture
def lexicon():
    engine = LexiconPredictionEngine(WORDS, limit=10)
    engine.set_key_letter_grouping(GROUPING_6_KEYS, False)
    return engine


def test_lexicon_completes_every_letter_combination(lexicon):
    # [1, 1] spells he, ge, fe, ... among others
    words = [w for w, _ in lexicon.suggestions([1, 1])]
    assert set(words) == {"hello", "help", "gem", "feel", "hell"}
    assert "idea" not in words


def test_lexicon_scores_by_position(lexicon):
    result = lexicon.suggestions([1, 1])
    assert result[0] == ("hello", 1000)
    scores = dict(result)
    # Second completion under "he"
    assert scores["help"] == 990


def test_lexicon_limit():
    engine = LexiconPredictionEngine(WORDS, limit=2)
    engine.set_key_letter_grouping(GROUPING_6_KEYS, False)
    assert len(engine.suggestions([1])) == 2


def test_lexicon_no_match(lexicon):
    assert lexicon.suggestions([5, 5, 5]) == []
    assert lexicon.suggestions([]) == []


def test_lexicon_is_read_only(lexicon):
    lexicon.insert("gel", 10)
    assert not lexicon.contains("gel")
    with pytest.raises(UnsupportedWordError):
        lexicon.insert("ge!", 10)


def test_lexicon_two_strokes():
    engine = LexiconPredictionEngine(WORDS)
    engine.set_key_letter_grouping([], True)
    words = [w for w, _ in engine.suggestions([ord("h"), ord("e"), ord("l")])]
    assert words == ["hello", "help", "hell"]


def test_lexicon_availability():
    assert not LexiconPredictionEngine([]).is_available
    engine = LexiconPredictionEngine(["b", "a", "b"])
    assert engine.is_available
    assert len(engine) == 2
    assert engine.engine_type == PredictionEngineType.LEXICON


def test_hybrid_puts_exact_results_first(lexicon):
    trie = PredictionTrie()
    trie.set_key_letter_grouping(GROUPING_6_KEYS, False)
    trie.insert("he", 50)
    hybrid = HybridPredictionEngine(trie, lexicon, limit=4)

    result = hybrid.suggestions([1, 1])
    assert result[0] == ("he", 50)
    assert len(result) == 4
    assert len({w for w, _ in result}) == 4


def test_hybrid_deduplicates(lexicon):
    trie = PredictionTrie()
    trie.set_key_letter_grouping(GROUPING_6_KEYS, False)
    trie.insert("gem", 3)
    hybrid = HybridPredictionEngine(trie, lexicon)
    words = [w for w, _ in hybrid.suggestions([1, 1, 3])]
    assert words.count("gem") == 1
    assert words[0] == "gem"


def test_hybrid_inserts_into_primary(lexicon):
    trie = PredictionTrie()
    hybrid = HybridPredictionEngine(trie, lexicon)
    hybrid.set_key_letter_grouping(GROUPING_6_KEYS, False)
    hybrid.insert("face", 9)
    assert trie.contains("face")
    assert hybrid.contains("face")
    assert hybrid.contains("idea")
    assert hybrid.engine_type == PredictionEngineType.HYBRID


def test_lexicon_grouping_swap_is_complete(lexicon):
    lexicon.set_key_letter_grouping([], True)
    assert [w for w, _ in lexicon.suggestions([ord("g")])] == ["gem"]

    # Back to ambiguous keys: both the mode and the key letters change together
    lexicon.set_key_letter_grouping(GROUPING_6_KEYS, False)
    assert {w for w, _ in lexicon.suggestions([1])} == {"hello", "help", "gem", "feel", "hell"}
    with pytest.raises(UnsupportedWordError):
        lexicon.insert("hi!", 1)
