"""Tests for the conversation cache document."""

from __future__ import annotations

import json
from pathlib import Path

from session_search.cache_store import CacheStore
from session_search.paths import get_cache_path
from tests.conftest import make_conversation


def test_round_trip_preserves_every_field(tmp_path: Path) -> None:
    conv = make_conversation(
        "session1",
        "/test/path",
        [
            ("user", "hello\nwith newline and ünïcödé ☕", "2024-01-15T10:00:00Z"),
            ("assistant", "", "2024-01-15T10:01:00Z"),
        ],
    )
    store = CacheStore(tmp_path / "cache.json")

    store.save({"session1": conv})
    loaded = store.load()

    assert len(loaded) == 1
    assert loaded["session1"] == conv
    assert loaded["session1"].messages[1].text == ""
    assert loaded["session1"].cwd == "/test/path"


def test_sources_round_trip(tmp_path: Path) -> None:
    store = CacheStore(tmp_path / "cache.json")
    store.save({}, {"/sessions/a.jsonl": 1700000000.25})
    document = store.load_document()
    assert document.sources == {"/sessions/a.jsonl": 1700000000.25}
    assert document.generated


def test_missing_cache_is_empty(tmp_path: Path) -> None:
    assert CacheStore(tmp_path / "absent.json").load() == {}


def test_corrupt_cache_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text("{definitely not json", encoding="utf-8")
    assert CacheStore(path).load() == {}


def test_wrong_shape_cache_is_empty(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    path.write_text(json.dumps({"conversations": {"x": {"cwd": 3}}}), encoding="utf-8")
    assert CacheStore(path).load() == {}


def test_other_version_is_ignored(tmp_path: Path) -> None:
    path = tmp_path / "cache.json"
    store = CacheStore(path)
    store.save({"session1": make_conversation()})

    data = json.loads(path.read_text(encoding="utf-8"))
    data["version"] = 99
    path.write_text(json.dumps(data), encoding="utf-8")

    assert store.load() == {}


def test_save_replaces_whole_document(tmp_path: Path) -> None:
    store = CacheStore(tmp_path / "cache.json")
    store.save({"a": make_conversation("a"), "b": make_conversation("b")})
    store.save({"c": make_conversation("c")})
    assert set(store.load()) == {"c"}


def test_save_leaves_no_temp_files(tmp_path: Path) -> None:
    store = CacheStore(tmp_path / "nested" / "cache.json")
    store.save({"a": make_conversation("a")})
    leftovers = [p.name for p in store.path.parent.iterdir() if p.suffix == ".tmp"]
    assert leftovers == []


def test_clear_removes_document(tmp_path: Path) -> None:
    store = CacheStore(tmp_path / "cache.json")
    store.save({"a": make_conversation("a")})
    store.clear()
    assert not store.path.exists()
    assert store.load() == {}


def test_default_path_comes_from_environment(isolated_env: Path) -> None:
    store = CacheStore()
    assert store.path == get_cache_path()
    assert store.path == isolated_env / "cache" / "conversations.json"
