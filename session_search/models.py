"""Normalized conversation model.

Conversations are immutable once parsed. A re-parse replaces the whole
object; nothing mutates messages in place. Both models round-trip through
JSON unchanged, which is what the cache store relies on.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import PurePath

from pydantic import BaseModel, ConfigDict


class Role(StrEnum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """One turn in a conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role
    text: str = ""
    timestamp: str = ""


class Conversation(BaseModel):
    """One session transcript."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    cwd: str = ""
    first_timestamp: str = ""
    last_timestamp: str = ""
    messages: tuple[Message, ...] = ()

    @property
    def project(self) -> str:
        """Leaf directory name of cwd, for display only."""
        if not self.cwd:
            return ""
        return PurePath(self.cwd.rstrip("/\\") or self.cwd).name or self.cwd

    @property
    def user_messages(self) -> list[Message]:
        return [m for m in self.messages if m.role == Role.USER]

    @property
    def topic(self) -> str:
        """First non-empty user text, else the first non-empty text of any turn."""
        for message in self.user_messages:
            if message.text.strip():
                return message.text
        for message in self.messages:
            if message.text.strip():
                return message.text
        return ""
