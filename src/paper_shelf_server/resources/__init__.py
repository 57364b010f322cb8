"""
Resources layer for data management.

Handles storage and retrieval of paper lists, chats, search history
and citation exports.
"""

from .store import JsonRecordStore, RecordStore
from .lists import ListManager
from .chats import ChatManager
from .history import SearchHistoryManager
from .exports import ExportWriter

__all__ = [
    "JsonRecordStore",
    "RecordStore",
    "ListManager",
    "ChatManager",
    "SearchHistoryManager",
    "ExportWriter",
]
