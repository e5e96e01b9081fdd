"""Tests for the file-backed LocalStorage."""

from __future__ import annotations

import json
from pathlib import Path

from database.local_store import LocalStorage


def test_set_and_get_item(tmp_path: Path):
    store = LocalStorage(tmp_path / "ls.json")
    store.set_item("k", "v")
    assert store.get_item("k") == "v"
    assert store.get_item("missing") is None


def test_values_persist_between_instances(tmp_path: Path):
    path = tmp_path / "ls.json"
    LocalStorage(path).set_json("dopamind_mood_history", [3, 4])
    assert LocalStorage(path).get_json("dopamind_mood_history") == [3, 4]


def test_write_is_atomic_no_tmp_left(tmp_path: Path):
    path = tmp_path / "ls.json"
    LocalStorage(path).set_item("k", "v")
    assert not path.with_suffix(".tmp").exists()
    assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}


def test_remove_missing_key_is_noop(tmp_path: Path):
    store = LocalStorage(tmp_path / "ls.json")
    store.remove_item("nothing")
    assert store.keys() == []


def test_corrupted_file_is_moved_aside(tmp_path: Path):
    path = tmp_path / "ls.json"
    path.write_text("{not json", encoding="utf-8")
    store = LocalStorage(path)
    assert store.keys() == []
    assert not path.exists()
    assert list(tmp_path.glob("ls.corrupted_*.json"))


def test_int_helpers_default_on_garbage(tmp_path: Path):
    store = LocalStorage(tmp_path / "ls.json")
    assert store.get_int("dopamind_streak") == 0
    store.set_item("dopamind_streak", "abc")
    assert store.get_int("dopamind_streak", 5) == 5
    store.set_int("dopamind_streak", 3)
    assert store.get_int("dopamind_streak") == 3


def test_memory_only_store():
    store = LocalStorage()
    store.set_json("x", {"a": 1})
    assert store.get_json("x") == {"a": 1}
    store.clear()
    assert store.get_json("x", "default") == "default"
