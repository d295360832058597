"""session-search - index past chat sessions for fuzzy search and resume.

This package parses session transcripts into Conversations, caches them,
and builds the search lines and preview text consumed by an external filter.
"""

from session_search.models import Conversation, Message, Role
from session_search.search_index import SearchEntry, build_search_entries, build_search_lines
from session_search.transcript_parser import parse_conversation_file

__all__ = [
    "Conversation",
    "Message",
    "Role",
    "SearchEntry",
    "build_search_entries",
    "build_search_lines",
    "parse_conversation_file",
]
