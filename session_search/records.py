"""Session record variants.

Each JSONL line of a session file is decoded into exactly one of:

- UserTurn: a message typed by the user
- AssistantTurn: a model reply
- OtherRecord: everything else (summaries, tool events, snapshots, ...)

Only the first two become Messages. OtherRecord keeps just enough to let the
parser capture incidental metadata such as the working directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from session_search.content import MessageContent, decode_content
from session_search.models import Role


def _optional_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


@dataclass(frozen=True)
class OtherRecord:
    """Record that does not contribute a message."""

    type: str
    cwd: str = ""


@dataclass(frozen=True)
class UserTurn:
    content: MessageContent | None = None
    timestamp: str = ""
    cwd: str = ""

    role = Role.USER


@dataclass(frozen=True)
class AssistantTurn:
    content: MessageContent | None = None
    timestamp: str = ""
    cwd: str = ""

    role = Role.ASSISTANT


Record = Union[UserTurn, AssistantTurn, OtherRecord]

_TURN_TYPES: dict[str, type[UserTurn] | type[AssistantTurn]] = {
    Role.USER.value: UserTurn,
    Role.ASSISTANT.value: AssistantTurn,
}


def decode_record(data: dict[str, Any]) -> Record:
    """Create a record variant from one decoded JSONL object.

    Fields with unexpected types are treated as absent rather than failing
    the record.
    """
    record_type = _optional_str(data, "type")
    cwd = _optional_str(data, "cwd")

    turn_cls = _TURN_TYPES.get(record_type)
    if turn_cls is None:
        return OtherRecord(type=record_type or "unknown", cwd=cwd)

    message = data.get("message")
    content = decode_content(message.get("content")) if isinstance(message, dict) else None

    return turn_cls(
        content=content,
        timestamp=_optional_str(data, "timestamp"),
        cwd=cwd,
    )
