"""Shared fixtures: isolated paths and session-file builders."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from session_search.models import Conversation, Message, Role


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every well-known location into tmp_path."""
    home = tmp_path / "home"
    monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(home / ".claude"))
    monkeypatch.setenv("SESSION_SEARCH_CACHE", str(home / "cache" / "conversations.json"))
    monkeypatch.setenv("SESSION_SEARCH_CONFIG", str(home / "config.yaml"))
    return home


def write_session(directory: Path, name: str, records: list[dict[str, Any] | str]) -> Path:
    """Write a JSONL session file; str items are written verbatim."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / name
    lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def turn(role: str, content: Any, timestamp: str | None = None, **extra: Any) -> dict[str, Any]:
    record: dict[str, Any] = {"type": role, "message": {"role": role, "content": content}}
    if timestamp is not None:
        record["timestamp"] = timestamp
    record.update(extra)
    return record


def make_conversation(
    session_id: str = "session1",
    cwd: str = "/home/user/project1",
    messages: list[tuple[str, str, str]] | None = None,
) -> Conversation:
    """Build a Conversation from (role, text, timestamp) triples."""
    if messages is None:
        messages = [
            ("user", "first message", "2024-01-15T10:00:00Z"),
            ("assistant", "response 1", "2024-01-15T10:01:00Z"),
        ]
    built = tuple(Message(role=Role(r), text=t, timestamp=ts) for r, t, ts in messages)
    return Conversation(
        session_id=session_id,
        cwd=cwd,
        first_timestamp=built[0].timestamp if built else "",
        last_timestamp=built[-1].timestamp if built else "",
        messages=built,
    )
