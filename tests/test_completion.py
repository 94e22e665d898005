import pytest
from src.keyboard.layouts import GROUPING_4_KEYS
from src.prediction.completion import Completion, compose_predictions, literal_word
from src.prediction.trie import PredictionTrie


@pytest.fixture
def trie():
    t = PredictionTrie()
    t.set_key_letter_grouping(GROUPING_4_KEYS, False)
    return t


def test_empty_sequence(trie):
    completion = compose_predictions(trie.suggestions, [], 4)
    assert completion == Completion()


def test_enough_exact_results(trie):
    # a, b, c, d, e all sit on key 0
    for word, freq in [("a", 5), ("b", 4), ("c", 3), ("d", 2), ("e", 1)]:
        trie.insert(word, freq)
    completion = compose_predictions(trie.suggestions, [0], 4)
    assert completion.words == ["a", "b", "c", "d"]
    assert completion.display_word == "a"


def test_extends_sequence_when_short(trie):
    trie.insert("to", 10)       # [3, 2]
    trie.insert("tim", 50)      # [3, 1, 2]
    trie.insert("the", 90)      # [3, 1, 0]
    trie.insert("t", 1)         # [3]
    completion = compose_predictions(trie.suggestions, [3], 4, max_search_level=1)
    assert completion.words == ["t", "to"]

    # Exact match first, longer words by frequency after
    completion = compose_predictions(trie.suggestions, [3], 4)
    assert completion.words == ["t", "the", "tim", "to"]
    assert completion.display_word == "t"


def test_stops_after_max_search_level(trie):
    trie.insert("than", 10)
    completion = compose_predictions(trie.suggestions, [3], 4, max_search_level=2)
    assert completion.words == []


def test_question_mark_when_nothing_matches(trie):
    completion = compose_predictions(trie.suggestions, [0, 0], 4, previous_word="a")
    assert completion.predictions == []
    assert completion.display_word == "a?"


def test_display_word_trimmed_to_sequence_length(trie):
    trie.insert("hello", 7)
    completion = compose_predictions(trie.suggestions, [1, 0], 4, max_search_level=3)
    assert completion.words == ["hello"]
    assert completion.display_word == "he"


def test_literal_word_first_in_letter_code_mode():
    t = PredictionTrie()
    t.set_key_letter_grouping([], True)
    t.insert("hi", 20)
    t.insert("his", 10)
    keys = [ord("h"), ord("i")]

    completion = compose_predictions(t.suggestions, keys, -1, letter_codes=True)
    assert completion.words == ["hi", "his"]

    completion = compose_predictions(t.suggestions, [ord("h")], -1, letter_codes=True)
    assert completion.words[0] == "h"
    assert completion.predictions[0] == ("h", 0)
    assert "hi" in completion.words


def test_literal_word():
    assert literal_word([ord("o"), ord("k")]) == "ok"
    assert literal_word([1, ord("a")]) == "a"
