"""
Text shaping for fixed-width terminal rows and preview rendering.

All functions here are pure: they never raise on odd input and never touch
the terminal. Lengths are counted in code points, so slicing can never split
a multi-byte character.
"""

from __future__ import annotations

import re
from datetime import datetime

HIGHLIGHT_START = "\x1b[43;30m"  # black on yellow
HIGHLIGHT_END = "\x1b[0m"

ELLIPSIS = "..."
ELLIPSIS_GLYPH = "…"

CODE_FENCE = "```"
CODE_BOX_WIDTH = 40
DEFAULT_CODE_LANGUAGE = "code"
FULL_TIMESTAMP_RE = re.compile(r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}")


def collapse_whitespace(text: str) -> str:
    """Replace every run of whitespace (newlines included) with one space."""
    return " ".join(text.split())


def truncate(text: str, max_len: int) -> str:
    """Collapse whitespace and cut to max_len, ending with "..." when cut."""
    collapsed = collapse_whitespace(text)
    if len(collapsed) <= max_len:
        return collapsed
    if max_len <= len(ELLIPSIS):
        return collapsed[: max(max_len, 0)]
    return collapsed[: max_len - len(ELLIPSIS)] + ELLIPSIS


def pad_or_truncate(text: str, length: int) -> str:
    """Collapse whitespace and return exactly `length` characters.

    Short strings are right-padded with spaces; long ones end in a single
    ellipsis glyph so table columns stay aligned.
    """
    if length <= 0:
        return ""
    collapsed = collapse_whitespace(text)
    if len(collapsed) <= length:
        return collapsed.ljust(length)
    return collapsed[: length - 1] + ELLIPSIS_GLYPH


def parse_timestamp(value: str) -> datetime | None:
    """Parse a complete ISO-8601 date-time, accepting a trailing "Z".

    Bare dates and the compact basic form are rejected.
    """
    s = value.strip()
    if not FULL_TIMESTAMP_RE.match(s):
        return None
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(s)
    except ValueError:
        return None


def _format_local(value: str, fmt: str) -> str:
    dt = parse_timestamp(value)
    if dt is None:
        return value
    try:
        return dt.astimezone().strftime(fmt)
    except (OverflowError, OSError, ValueError):
        # Out of range for the platform clock
        return value


def format_timestamp(value: str) -> str:
    """Local calendar date (YYYY-MM-DD) of a timestamp, or the input unchanged."""
    return _format_local(value, "%Y-%m-%d")


def format_datetime(value: str) -> str:
    """Local date and minute (YYYY-MM-DD HH:MM) of a timestamp, or the input unchanged."""
    return _format_local(value, "%Y-%m-%d %H:%M")


def highlight(text: str, query: str) -> str:
    """Wrap every case-insensitive occurrence of query in highlight markers.

    Matches are non-overlapping and found leftmost-first; the matched text
    keeps its original casing.
    """
    if not query:
        return text
    pattern = re.compile(re.escape(query), re.IGNORECASE)
    return pattern.sub(lambda m: f"{HIGHLIGHT_START}{m.group(0)}{HIGHLIGHT_END}", text)


def _code_header(language: str) -> str:
    label = f"┌─ {language} "
    return label + "─" * max(CODE_BOX_WIDTH - len(label), 1)


def _code_footer() -> str:
    return "└" + "─" * (CODE_BOX_WIDTH - 1)


def format_code_block(text: str, query: str, language_hint: str = "") -> str:
    """
    Frame fenced code regions and highlight the prose around them.

    A line whose stripped form starts with ``` opens a region (the rest of
    the line is the language tag) or closes the open one. Code lines are
    prefixed with a left border and left unhighlighted. A region still open
    at the end of the text is closed there.

    Args:
        text: Message text, possibly containing fenced code
        query: Search query to highlight in prose lines
        language_hint: Label used when a fence carries no language tag

    Returns:
        Rendered multi-line string
    """
    lines: list[str] = []
    in_code = False

    for line in text.split("\n"):
        stripped = line.strip()
        if stripped.startswith(CODE_FENCE):
            if in_code:
                lines.append(_code_footer())
                in_code = False
            else:
                language = stripped[len(CODE_FENCE) :].strip()
                lines.append(_code_header(language or language_hint or DEFAULT_CODE_LANGUAGE))
                in_code = True
            continue

        if in_code:
            lines.append(f"│ {line}")
        else:
            lines.append(highlight(line, query))

    if in_code:
        lines.append(_code_footer())

    return "\n".join(lines)
