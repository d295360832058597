"""Search index: one filterable row per conversation.

Each SearchEntry carries display columns (project, date, topic, message
count) and a search text holding the session id, the full working directory
and the untruncated text of every user message. Display truncation can
therefore never hide a match from the filter.

Line format (tab-separated, one per conversation):

    session_id  project  date  summary  search_text

The search text is always the fifth column so an external filter can be
pointed at it (e.g. `fzf --delimiter '\\t' --nth 5 --with-nth 2..4`).

Usage:
    from session_search.search_index import build_search_lines, sort_by_recency

    lines, by_id = build_search_lines(sort_by_recency(conversations))
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime

from session_search.models import Conversation
from session_search.text_format import (
    collapse_whitespace,
    format_datetime,
    pad_or_truncate,
    parse_timestamp,
)

DEFAULT_PROJECT_WIDTH = 20
DEFAULT_TOPIC_WIDTH = 60
DATE_WIDTH = 16  # YYYY-MM-DD HH:MM
COLUMN_SEPARATOR = "\t"

NO_TOPIC = "(no messages)"


def build_search_text(conversation: Conversation) -> str:
    """Session id, full cwd and every user message, space-joined."""
    parts = [conversation.session_id]
    if conversation.cwd:
        parts.append(conversation.cwd)
    parts.extend(m.text for m in conversation.user_messages if m.text)
    return " ".join(parts)


@dataclass(frozen=True)
class SearchEntry:
    """Index entry for a single conversation."""

    conversation: Conversation
    session_id: str
    project: str
    date: str
    topic: str
    message_count: int
    search_text: str

    @classmethod
    def from_conversation(
        cls,
        conversation: Conversation,
        project_width: int = DEFAULT_PROJECT_WIDTH,
        topic_width: int = DEFAULT_TOPIC_WIDTH,
    ) -> SearchEntry:
        return cls(
            conversation=conversation,
            session_id=conversation.session_id,
            project=pad_or_truncate(conversation.project, project_width),
            date=pad_or_truncate(format_datetime(conversation.last_timestamp), DATE_WIDTH),
            topic=pad_or_truncate(conversation.topic or NO_TOPIC, topic_width),
            message_count=len(conversation.messages),
            search_text=build_search_text(conversation),
        )

    @property
    def summary(self) -> str:
        noun = "msg" if self.message_count == 1 else "msgs"
        return f"{self.topic} {self.message_count:>4} {noun}"

    def to_line(self) -> str:
        # Tabs or newlines inside the search text would break the row
        search_text = collapse_whitespace(self.search_text)
        return COLUMN_SEPARATOR.join(
            [self.session_id, self.project, self.date, self.summary, search_text]
        )


def build_search_entries(
    conversations: Iterable[Conversation],
    project_width: int = DEFAULT_PROJECT_WIDTH,
    topic_width: int = DEFAULT_TOPIC_WIDTH,
) -> list[SearchEntry]:
    """One entry per conversation, in input order.

    Conversations without user messages (or without any messages) still get
    an entry; filtering by activity is left to the caller.
    """
    return [
        SearchEntry.from_conversation(c, project_width=project_width, topic_width=topic_width)
        for c in conversations
    ]


def build_search_lines(
    conversations: Iterable[Conversation],
    project_width: int = DEFAULT_PROJECT_WIDTH,
    topic_width: int = DEFAULT_TOPIC_WIDTH,
) -> tuple[list[str], dict[str, Conversation]]:
    """Render entries as filter lines.

    Returns:
        (lines, session_id -> Conversation)
    """
    entries = build_search_entries(
        conversations, project_width=project_width, topic_width=topic_width
    )
    lines = [entry.to_line() for entry in entries]
    by_id = {entry.session_id: entry.conversation for entry in entries}
    return lines, by_id


def _recency_key(conversation: Conversation) -> tuple[bool, datetime]:
    dt = parse_timestamp(conversation.last_timestamp)
    if dt is None:
        return (False, datetime.min.replace(tzinfo=UTC))
    if dt.tzinfo is None:
        # Naive timestamps are compared as UTC
        dt = dt.replace(tzinfo=UTC)
    return (True, dt)


def sort_by_recency(conversations: Iterable[Conversation]) -> list[Conversation]:
    """Newest last_timestamp first; missing or unparseable timestamps last."""
    return sorted(conversations, key=_recency_key, reverse=True)
