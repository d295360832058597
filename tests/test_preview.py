"""Tests for conversation preview rendering."""

from __future__ import annotations

from session_search.preview import EMPTY_BODY, render_conversation
from session_search.text_format import HIGHLIGHT_END, HIGHLIGHT_START
from tests.conftest import make_conversation


def test_preview_has_header_and_every_message() -> None:
    conv = make_conversation(
        "abc",
        "/home/user/app",
        [
            ("user", "how do I list files?", "2024-01-15T10:00:00Z"),
            ("assistant", "Use this:\n```sh\nls -la\n```", "2024-01-15T10:01:00Z"),
        ],
    )

    text = render_conversation(conv)

    assert "Session:  abc" in text
    assert "Project:  /home/user/app" in text
    assert "Messages: 2" in text
    assert "> User" in text
    assert "< Assistant" in text
    assert "how do I list files?" in text
    assert "┌─ sh ─" in text
    assert "│ ls -la" in text


def test_preview_highlights_query() -> None:
    conv = make_conversation(messages=[("user", "Fix the Parser bug", "2024-01-15T10:00:00Z")])
    text = render_conversation(conv, "parser")
    assert f"{HIGHLIGHT_START}Parser{HIGHLIGHT_END}" in text


def test_preview_marks_empty_messages() -> None:
    conv = make_conversation(messages=[("assistant", "", "")])
    text = render_conversation(conv)
    assert EMPTY_BODY in text
    assert "Project:  /home/user/project1" in text


def test_preview_without_timestamps_or_cwd() -> None:
    conv = make_conversation(cwd="", messages=[("user", "hi", "")])
    text = render_conversation(conv)
    assert "Project:  ?" in text
    assert "Started:  ?" in text
