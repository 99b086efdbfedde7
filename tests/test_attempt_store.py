from datetime import datetime, timezone
import json

from soma_exam.core.services.attempt_store import (
    AttemptStore,
    JsonFileStore,
    MemoryStore,
    answers_key,
    completed_key,
    start_time_key,
)

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def test_key_layout_matches_browser_storage():
    assert start_time_key(3, 42) == "quiz_3_student_42_startTime"
    assert answers_key(3, 42) == "quiz_3_student_42_answers"
    assert completed_key(3) == "completed_quiz_3"


def test_start_time_is_initialised_once():
    backend = MemoryStore()
    store = AttemptStore(backend)

    first = store.load_or_init_start_time(1, 2, NOW)
    later = store.load_or_init_start_time(1, 2, NOW.replace(hour=10))

    assert first == later == NOW
    assert backend.get(start_time_key(1, 2)) == NOW.isoformat()


def test_naive_start_time_is_read_as_utc():
    store = AttemptStore(MemoryStore({start_time_key(1, 2): "2026-03-02T09:00:00"}))
    assert store.load_or_init_start_time(1, 2, NOW.replace(hour=11)) == NOW


def test_malformed_start_time_is_reinitialised():
    backend = MemoryStore({start_time_key(1, 2): "yesterday-ish"})
    store = AttemptStore(backend)

    assert store.load_or_init_start_time(1, 2, NOW) == NOW
    assert backend.get(start_time_key(1, 2)) == NOW.isoformat()


def test_answers_round_trip_with_integer_ids():
    backend = MemoryStore()
    store = AttemptStore(backend)
    store.save_answers(1, 2, {5: "B", 6: "\\(x^2\\)"})

    assert json.loads(backend.get(answers_key(1, 2))) == {"5": "B", "6": "\\(x^2\\)"}
    assert store.load_answers(1, 2) == {5: "B", 6: "\\(x^2\\)"}


def test_malformed_answers_are_ignored():
    for raw in ("not json", "[1, 2]", '{"abc": "B"}'):
        store = AttemptStore(MemoryStore({answers_key(1, 2): raw}))
        assert store.load_answers(1, 2) == {}


def test_clear_attempt_keeps_completion_marker():
    backend = MemoryStore()
    store = AttemptStore(backend)
    store.load_or_init_start_time(1, 2, NOW)
    store.save_answers(1, 2, {5: "B"})
    store.mark_completed(1)

    store.clear_attempt(1, 2)

    assert backend.keys() == [completed_key(1)]
    assert store.is_completed(1)
    assert not store.is_completed(2)


def test_json_file_store_persists_between_instances(tmp_path):
    path = tmp_path / "nested" / "local_storage.json"
    AttemptStore(JsonFileStore(path)).save_answers(1, 2, {5: "B"})

    reopened = JsonFileStore(path)
    assert AttemptStore(reopened).load_answers(1, 2) == {5: "B"}
    reopened.remove(answers_key(1, 2))
    assert JsonFileStore(path).keys() == []


def test_json_file_store_treats_corrupt_file_as_empty(tmp_path):
    path = tmp_path / "local_storage.json"
    path.write_text("{ not json", encoding="utf-8")

    store = JsonFileStore(path)
    assert store.get(completed_key(1)) is None
    store.set(completed_key(1), "true")
    assert json.loads(path.read_text(encoding="utf-8")) == {"completed_quiz_1": "true"}
