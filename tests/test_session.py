import pytest
from src.app.config import Config
from src.app.session import KeyboardSession
from src.keyboard.layouts import ControlAction
from src.keyboard.sequencer import EventKind
from src.prediction.completion import Completion
from src.prediction.dictionary import DEFAULT_WORD_FREQUENCY
from src.prediction.engine import PredictionEngineType
from src.prediction.worker import SuggestionResult

WORDS = [("the", 90), ("tie", 50), ("hello", 30)]
LEXICON = [("then", 0), ("there", 0)]

UP, DOWN, LEFT, RIGHT = (0, -100), (0, 100), (-100, 0), (100, 0)
STILL = (0, 0)


@pytest.fixture
def config():
    config = Config()
    config.keyboard.layout = "keys4"
    config.prediction.threaded = False
    return config


@pytest.fixture
def session(config):
    s = KeyboardSession(config, word_frequencies=WORDS, lexicon_words=LEXICON)
    yield s
    s.shutdown()


def type_the(session):
    # t -> down, h -> right, e -> up on the 4-key layout
    for vector in (DOWN, RIGHT, UP):
        session.handle_drag(vector, STILL)


def test_swipes_produce_predictions(session):
    updates = []
    session.suggestions_changed.connect(updates.append)

    type_the(session)
    assert session.keys == (3, 1, 0)
    assert session.completion.words[:2] == ["the", "tie"]
    assert session.display_word == "the"
    assert isinstance(updates[-1], Completion)


def test_tap_versus_swipe(session):
    assert session.handle_drag((5, 5), (10, 0)).kind == EventKind.NOOP
    assert session.keys == ()

    event = session.handle_drag((5, 5), (10, 0), tapped_key=2)
    assert event.kind == EventKind.KEY_APPENDED
    assert not event.is_swipe
    assert session.keys == (2,)


def test_swipe_samples_majority(session):
    event = session.handle_swipe_samples([RIGHT, RIGHT, DOWN])
    assert event.key == 1
    assert event.is_swipe


def test_commit_known_word(session):
    committed = []
    session.word_committed.connect(committed.append)

    type_the(session)
    assert session.commit_word() == "the"
    assert committed == ["the"]
    assert session.sentence == "the"
    assert session.keys == ()
    assert session.completion == Completion()
    assert session.user_dictionary.rating("the") == 1
    assert "the" not in session.user_dictionary


def test_commit_new_word_becomes_user_word(session):
    session.commit_word("zap")
    assert "zap" in session.user_dictionary
    assert session.manager.contains("zap")

    # z a p -> 3 0 2 on the 4-key layout
    for vector in (DOWN, UP, LEFT):
        session.handle_drag(vector, STILL)
    assert session.completion.predictions[0] == ("zap", DEFAULT_WORD_FREQUENCY)


def test_commit_with_nothing_typed(session):
    assert session.commit_word() is None
    assert session.sentence == ""


def test_backspace(session):
    type_the(session)
    session.backspace()
    assert session.keys == (3, 1)
    session.backspace_all()
    assert session.keys == ()


def test_backspace_removes_sentence_word(session):
    session.commit_word("tie")
    session.commit_word("the")
    session.backspace()
    assert session.sentence == "tie"


def test_stale_results_are_dropped(session):
    type_the(session)
    current = session.completion

    stale = session.manager.begin_query()
    session.refresh_predictions()
    session._on_suggestions_ready(SuggestionResult(stale, (3,), Completion([("old", 1)], "o")))
    assert session.completion == current


def test_set_layout_rekeys_dictionary(session, config):
    session.set_layout("keys6")
    assert config.keyboard.layout == "keys6"
    assert session.layout.key_count == 6

    # t h e -> 4 1 1 under the 6-key grouping
    for key in (4, 1, 1):
        session.handle_tap(key)
    assert "the" in session.completion.words


def test_msr_control_actions(session):
    actions = []
    session.control_action.connect(actions.append)
    session.set_layout("msr")

    session.handle_tap(1)
    event = session.handle_tap(1)
    assert event.action == ControlAction.YES
    assert actions == [ControlAction.YES]
    assert session.keys == ()


def test_msr_speak_commits_word(session):
    session.set_layout("msr")
    session.handle_tap(0)
    session.handle_tap(0)   # a
    assert session.keys == (ord("a"),)

    session.handle_tap(1)
    session.handle_tap(1)   # speak, now that there is text
    assert session.sentence == "a"
    assert session.keys == ()


def test_switch_engine(session, config):
    assert not session.switch_engine("spellchecker")
    assert session.switch_engine("hybrid")
    assert session.manager.current_engine_type == PredictionEngineType.HYBRID
    assert config.prediction.engine == "hybrid"

    type_the(session)
    words = session.completion.words
    assert words[0] == "the"
    assert "then" in words


def test_unavailable_engine_keeps_current(config):
    s = KeyboardSession(config, word_frequencies=WORDS, lexicon_words=[])
    assert not s.switch_engine("lexicon")
    assert s.manager.current_engine_type == PredictionEngineType.CUSTOM


def test_preferred_engine_restored(config):
    config.prediction.engine = "lexicon"
    s = KeyboardSession(config, word_frequencies=WORDS, lexicon_words=LEXICON)
    assert s.manager.current_engine_type == PredictionEngineType.LEXICON


def test_sync_config(session, config):
    session.commit_word("zap")
    session.sync_config()
    assert config.user.words == ["zap"]
    assert config.user.word_ratings == {"zap": 1}


def test_user_words_loaded_from_config(config):
    config.user.words = ["qux"]
    config.user.word_ratings = {"qux": 4}
    s = KeyboardSession(config, word_frequencies=WORDS, lexicon_words=[])
    assert s.manager.contains("qux")
    assert s.manager.current_engine.frequency("qux") == DEFAULT_WORD_FREQUENCY + 4
