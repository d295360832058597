"""
Transcript Parser - turn one session file into a Conversation.

Session files are newline-delimited JSON, one record per line. Records come
in many shapes (user and assistant turns, summaries, tool events, file
snapshots) and partial or malformed lines are common in files that were
being written when a session crashed. The parser keeps whatever it can:

- a line that is not valid JSON, or not a JSON object, is skipped
- only user and assistant turns become Messages
- the working directory is taken from the first record that has one
- a file without any retained message yields None, not an error

Usage:
    from session_search.transcript_parser import parse_conversation_file

    conversation = parse_conversation_file(Path("~/.claude/projects/-home-me-app/abc.jsonl"))
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

from session_search.config import DEFAULT_EXCLUDED_PREFIXES
from session_search.content import extract_text
from session_search.models import Conversation, Message
from session_search.records import AssistantTurn, OtherRecord, Record, UserTurn, decode_record

logger = logging.getLogger(__name__)


def is_excluded(path: Path, excluded_prefixes: Iterable[str] = DEFAULT_EXCLUDED_PREFIXES) -> bool:
    """True if the file name marks a non-primary artifact (e.g. a sub-agent transcript)."""
    return any(path.name.startswith(prefix) for prefix in excluded_prefixes)


def iter_records(path: Path) -> Iterator[Record]:
    """Yield one record per decodable line.

    Raises:
        OSError: If the file cannot be opened or read
    """
    with open(path, "rb") as f:
        for line_no, raw in enumerate(f, start=1):
            if not raw.strip():
                continue
            try:
                data: Any = json.loads(raw)
            except (ValueError, RecursionError):
                # JSONDecodeError, invalid UTF-8, or nesting too deep to decode
                logger.debug("Skipping undecodable line %d in %s", line_no, path)
                continue
            if not isinstance(data, dict):
                logger.debug("Skipping non-object line %d in %s", line_no, path)
                continue
            yield decode_record(data)


def build_conversation(session_id: str, records: Iterable[Record]) -> Conversation | None:
    """Fold a record stream into a Conversation, or None if no turn survives."""
    cwd = ""
    messages: list[Message] = []

    for record in records:
        if not cwd and record.cwd:
            cwd = record.cwd

        match record:
            case UserTurn() | AssistantTurn():
                # Empty-text turns are kept so turn counts stay accurate
                messages.append(
                    Message(
                        role=record.role,
                        text=extract_text(record.content),
                        timestamp=record.timestamp,
                    )
                )
            case OtherRecord():
                continue

    if not messages:
        return None

    return Conversation(
        session_id=session_id,
        cwd=cwd,
        first_timestamp=messages[0].timestamp,
        last_timestamp=messages[-1].timestamp,
        messages=tuple(messages),
    )


def parse_conversation_file(
    path: str | Path,
    excluded_prefixes: Iterable[str] = DEFAULT_EXCLUDED_PREFIXES,
) -> Conversation | None:
    """
    Parse a session file.

    Args:
        path: Session file (*.jsonl)
        excluded_prefixes: File-name prefixes that are never session files

    Returns:
        Conversation, or None if the file is excluded or holds no turns

    Raises:
        OSError: If the file cannot be opened or read
    """
    path = Path(path)
    if is_excluded(path, excluded_prefixes):
        logger.debug("Skipping excluded file %s", path)
        return None

    conversation = build_conversation(path.stem, iter_records(path))
    if conversation is None:
        logger.debug("No conversation in %s", path)
    return conversation


class SessionParser:
    """Parser bound to a configured set of excluded prefixes.

    Instances are callables so the scanner can hand them to worker threads.
    """

    def __init__(self, excluded_prefixes: Iterable[str] = DEFAULT_EXCLUDED_PREFIXES):
        self.excluded_prefixes = tuple(excluded_prefixes)

    def __call__(self, path: Path) -> Conversation | None:
        return parse_conversation_file(path, self.excluded_prefixes)
