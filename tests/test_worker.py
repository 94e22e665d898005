import pytest
from src.keyboard.layouts import GROUPING_6_KEYS
from src.prediction.manager import PredictionEngineManager
from src.prediction.worker import PredictionWorker, SuggestionResult


@pytest.fixture
def manager():
    m = PredictionEngineManager()
    m.set_key_letter_grouping(GROUPING_6_KEYS, False)
    m.insert("ab", 5)
    return m


def test_worker_emits_result(manager):
    worker = PredictionWorker(manager)
    received = []
    worker.suggestions_ready.connect(received.append)

    generation = manager.begin_query()
    worker.query(generation, (0, 0), 6, False, "")

    assert len(received) == 1
    result = received[0]
    assert isinstance(result, SuggestionResult)
    assert result.generation == generation
    assert result.keys == (0, 0)
    assert result.completion.words == ["ab"]


def test_worker_skips_superseded_query(manager):
    worker = PredictionWorker(manager)
    received = []
    worker.suggestions_ready.connect(received.append)

    stale = manager.begin_query()
    manager.begin_query()
    worker.query(stale, (0, 0), 6, False, "")
    assert received == []


def test_worker_reports_errors(manager):
    worker = PredictionWorker(manager)
    errors = []
    worker.error.connect(errors.append)

    generation = manager.begin_query()
    # A non-sequence key list cannot be composed
    worker.query(generation, None, 6, False, "")
    assert len(errors) == 1
    assert errors[0].startswith("Prediction failed")
