from __future__ import annotations

import json

from arcade_games.engine import GameLoop, JsonFileStore, ManualScheduler, MemoryStore, is_better, record_best
from arcade_games.games import make_game


def test_is_better_higher() -> None:
    assert is_better(150, 100)
    assert not is_better(80, 100)
    assert not is_better(100, 100)
    assert is_better(0, None)


def test_is_better_lower() -> None:
    assert is_better(8, 9, higher_is_better=False)
    assert not is_better(10, 9, higher_is_better=False)
    assert not is_better(9, 9, higher_is_better=False)
    assert is_better(120, None, higher_is_better=False)


def test_record_best_only_writes_improvements() -> None:
    store = MemoryStore({"snakeHighScore": 100})
    assert not record_best(store, "snakeHighScore", 80)
    assert store.get("snakeHighScore") == 100
    assert record_best(store, "snakeHighScore", 150)
    assert store.get("snakeHighScore") == 150


def test_malformed_values_read_as_missing() -> None:
    store = MemoryStore({"a": "abc", "b": True, "c": float("nan"), "d": "42"})
    assert store.get("a") is None
    assert store.get("b") is None
    assert store.get("c") is None
    assert store.get("d") == 42
    assert store.get("missing") is None


def test_json_store_round_trip(tmp_path) -> None:
    path = tmp_path / "nested" / "best.json"
    store = JsonFileStore(str(path))
    assert store.get("memoryBestTime_easy") is None
    store.set("memoryBestTime_easy", 42)
    store.set("snakeHighScore", 90)
    assert JsonFileStore(str(path)).get("memoryBestTime_easy") == 42
    assert json.loads(path.read_text()) == {"memoryBestTime_easy": 42, "snakeHighScore": 90}


def test_json_store_malformed_file(tmp_path) -> None:
    path = tmp_path / "best.json"
    path.write_text("{not json")
    store = JsonFileStore(str(path))
    assert store.get("snakeHighScore") is None
    # A write replaces the corrupt file
    assert record_best(store, "snakeHighScore", 10)
    assert store.get("snakeHighScore") == 10


def test_json_store_non_object_file(tmp_path) -> None:
    path = tmp_path / "best.json"
    path.write_text("[1, 2, 3]")
    assert JsonFileStore(str(path)).get("snakeHighScore") is None


def test_json_store_reads_file_once(tmp_path) -> None:
    path = tmp_path / "best.json"
    path.write_text(json.dumps({"snakeHighScore": 30}))
    store = JsonFileStore(str(path))
    assert store.get("snakeHighScore") == 30
    # Later edits on disk are not picked up; the first read is authoritative
    path.write_text(json.dumps({"snakeHighScore": 500}))
    assert store.get("snakeHighScore") == 30


def test_ticks_do_not_reread_the_store(tmp_path, monkeypatch) -> None:
    store = JsonFileStore(str(tmp_path / "best.json"))
    loads, writes = [], []
    real_load, real_set = store._load, store.set
    monkeypatch.setattr(store, "_load", lambda: loads.append(1) or real_load())
    monkeypatch.setattr(store, "set", lambda key, value: writes.append(value) or real_set(key, value))

    loop = GameLoop(make_game("meteor_dodge"), scheduler=ManualScheduler(), store=store, seed=0)
    loop.start()
    for _ in range(60):
        loop.tick()
    assert len(loads) == 1
    # Only the first recorded score beats the empty store
    assert writes == [0]
