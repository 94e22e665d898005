import pytest
from src.keyboard.layouts import GROUPING_6_KEYS
from src.prediction.dictionary import (
    DEFAULT_WORD_FREQUENCY,
    UserDictionary,
    is_word_valid,
    load_lexicon,
    load_word_frequencies,
    populate_engine,
)
from src.prediction.trie import PredictionTrie


@pytest.fixture
def trie():
    t = PredictionTrie()
    t.set_key_letter_grouping(GROUPING_6_KEYS, False)
    return t


def test_load_word_frequencies(tmp_path):
    path = tmp_path / "words.csv"
    path.write_text("Hello,120\nhelp,abc\nnocomma\n\nworld,7\n", encoding="utf-8")
    entries = load_word_frequencies(path)
    assert entries == [("hello", 120), ("help", DEFAULT_WORD_FREQUENCY), ("world", 7)]


def test_load_word_frequencies_missing_file(tmp_path):
    assert load_word_frequencies(tmp_path / "nope.csv") == []


def test_load_lexicon_plain_list(tmp_path):
    path = tmp_path / "words"
    path.write_text("zebra\nApple\nant\nzebra\ncan't\n", encoding="utf-8")
    assert load_lexicon(path) == [("zebra", 0), ("ant", 0)]


def test_load_lexicon_sorts_by_frequency(tmp_path):
    path = tmp_path / "words.csv"
    path.write_text("rare,3\ncommon,300\n", encoding="utf-8")
    assert load_lexicon(path) == [("common", 300), ("rare", 3)]


def test_is_word_valid():
    assert is_word_valid("Hello")
    assert not is_word_valid("")
    assert not is_word_valid("it's")
    assert not is_word_valid("abc1")


def test_user_dictionary_newest_first_and_capped():
    user = UserDictionary(max_words=2)
    user.add_word("one")
    user.add_word("two")
    user.add_word("three")
    assert user.words == ["three", "two"]
    assert "one" not in user


def test_user_dictionary_ratings():
    user = UserDictionary(ratings={"cat": 2})
    user.increment_rating("cat")
    user.increment_rating("dog")
    assert user.rating("cat") == 3
    assert user.rating("dog") == 1
    assert user.rating("emu") is None


def test_user_dictionary_remove_and_clear():
    user = UserDictionary(["a", "b"])
    user.remove_word(5)
    user.remove_word(0)
    assert user.words == ["b"]
    user.clear_words()
    assert user.words == []


def test_populate_engine(trie):
    user = UserDictionary(["face"], {"face": 2, "bad": 1})
    inserted = populate_engine(trie, [("bad", 40), ("cab", 30), ("c3po", 1)], user)
    assert inserted == 3
    assert trie.frequency("face") == DEFAULT_WORD_FREQUENCY + 2
    # Rated dictionary words get the user boost
    assert trie.frequency("bad") == DEFAULT_WORD_FREQUENCY + 1
    assert trie.frequency("cab") == 30
    assert not trie.contains("c3po")


def test_populate_engine_skips_unsupported_user_words(trie):
    user = UserDictionary(["ok", "no way"])
    assert populate_engine(trie, [], user) == 1
    assert trie.contains("ok")
