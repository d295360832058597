"""Preview rendering for a selected conversation.

Output is plain text with ANSI styling, meant for a filter's preview pane:

    Session:  0b6f...
    Project:  /home/me/app
    Started:  2024-01-15 10:00
    Updated:  2024-01-15 10:02
    Messages: 3

    > User  10:00
    hello
    ...
"""

from __future__ import annotations

from session_search.models import Conversation, Message, Role
from session_search.text_format import format_code_block, format_datetime, parse_timestamp

BOLD = "\x1b[1m"
CYAN = "\x1b[36m"
GREEN = "\x1b[32m"
RESET = "\x1b[0m"

EMPTY_BODY = "(empty)"

_ROLE_LABELS = {
    Role.USER: f"{BOLD}{CYAN}> User{RESET}",
    Role.ASSISTANT: f"{BOLD}{GREEN}< Assistant{RESET}",
}


def _message_time(timestamp: str) -> str:
    dt = parse_timestamp(timestamp)
    if dt is None:
        return ""
    try:
        return dt.astimezone().strftime("%H:%M")
    except (OverflowError, OSError, ValueError):
        return ""


def render_message(message: Message, query: str = "") -> str:
    label = _ROLE_LABELS[message.role]
    time_str = _message_time(message.timestamp)
    header = f"{label}  {time_str}" if time_str else label
    body = format_code_block(message.text, query) if message.text.strip() else EMPTY_BODY
    return f"{header}\n{body}"


def render_conversation(conversation: Conversation, query: str = "") -> str:
    """Render header and every message, highlighting query in prose."""
    header = [
        f"Session:  {conversation.session_id}",
        f"Project:  {conversation.cwd or '?'}",
        f"Started:  {format_datetime(conversation.first_timestamp) or '?'}",
        f"Updated:  {format_datetime(conversation.last_timestamp) or '?'}",
        f"Messages: {len(conversation.messages)}",
    ]
    blocks = ["\n".join(header)]
    blocks.extend(render_message(m, query) for m in conversation.messages)
    return "\n\n".join(blocks) + "\n"
