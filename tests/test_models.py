"""Tests for the conversation model helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from session_search.models import Conversation, Message, Role
from tests.conftest import make_conversation


@pytest.mark.parametrize(
    ("cwd", "expected"),
    [
        ("/home/user/my-project", "my-project"),
        ("/home/user/my-project/", "my-project"),
        ("/", "/"),
        ("", ""),
    ],
)
def test_project_is_leaf_of_cwd(cwd: str, expected: str) -> None:
    assert make_conversation(cwd=cwd).project == expected


def test_topic_prefers_first_user_text() -> None:
    conv = make_conversation(
        messages=[
            ("assistant", "welcome", "t1"),
            ("user", "   ", "t2"),
            ("user", "real question", "t3"),
        ]
    )
    assert conv.topic == "real question"


def test_topic_falls_back_to_any_message() -> None:
    conv = make_conversation(messages=[("assistant", "only me", "t1")])
    assert conv.topic == "only me"
    assert Conversation(session_id="x").topic == ""


def test_models_are_frozen() -> None:
    message = Message(role=Role.USER, text="hi")
    with pytest.raises(ValidationError):
        message.text = "changed"


def test_unknown_role_rejected() -> None:
    with pytest.raises(ValidationError):
        Message(role="system", text="nope")
