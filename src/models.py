"""Data models for the terminal to-do list.

Task values are immutable; the store swaps in an updated copy instead of
mutating one in place. Field names follow the persisted JSON keys except
``created_at``, which is stored as "createdAt" (milliseconds since epoch).
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict
import uuid


class Filter(str, Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"


FILTER_LABELS: Dict[Filter, str] = {
    Filter.ALL: "All",
    Filter.ACTIVE: "Active",
    Filter.COMPLETED: "Completed",
}


def new_id() -> str:
    return uuid.uuid4().hex


def now_ms() -> int:
    return int(datetime.now().timestamp() * 1000)


@dataclass(frozen=True)
class Task:
    """A single to-do item.

    Fields:
        id: Opaque unique id, never reused after deletion.
        text: Trimmed, non-empty text.
        completed: Completion flag.
        created_at: Creation time in milliseconds since the epoch.
    """
    id: str
    text: str
    completed: bool = False
    created_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'text': self.text,
            'completed': self.completed,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> Task:
        """Build a Task from one stored record; raises ValueError if malformed."""
        if not isinstance(raw, dict):
            raise ValueError(f"task record must be an object, got {type(raw).__name__}")
        tid = raw.get('id')
        text = raw.get('text')
        completed = raw.get('completed')
        created_at = raw.get('createdAt')
        if not isinstance(tid, str) or not tid:
            raise ValueError(f"invalid id: {tid!r}")
        if not isinstance(text, str) or not text.strip():
            raise ValueError(f"invalid text for task {tid}")
        if not isinstance(completed, bool):
            raise ValueError(f"invalid completed flag for task {tid}")
        # bool is an int subclass; reject it explicitly
        if isinstance(created_at, bool) or not isinstance(created_at, (int, float)):
            raise ValueError(f"invalid createdAt for task {tid}")
        return cls(id=tid, text=text.strip(), completed=completed, created_at=created_at)


@dataclass(frozen=True)
class EditSession:
    """The single task currently being edited and its uncommitted draft."""
    task_id: str
    draft: str
