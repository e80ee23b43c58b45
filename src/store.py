"""Task store: the ordered task collection, its mutations and derived views.

Newest tasks come first. Operations addressing an unknown id are silent
no-ops, since a row on screen may refer to a task that was already removed.
Every collection change is written through to storage; view state (filter,
search, edit session) is never persisted.
"""
from dataclasses import replace
from typing import Callable, List, Optional, Protocol, Sequence, Tuple, Union
import logging

from models import EditSession, Filter, Task, new_id, now_ms

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class TaskStorage(Protocol):
    def load(self) -> Optional[List[Task]]: ...

    def save(self, tasks: Sequence[Task]) -> bool: ...


class TaskStore:
    def __init__(self, storage: Optional[TaskStorage] = None):
        self._storage = storage
        self._tasks: List[Task] = []
        self._filter: Filter = Filter.ALL
        self._search: str = ''
        self._editing: Optional[EditSession] = None
        self._listeners: List[Listener] = []
        self._version: int = 0

    # -------------------- lifecycle --------------------
    def initialize(self) -> None:
        """Load the collection from storage; anything unusable yields an empty list."""
        loaded = self._storage.load() if self._storage is not None else None
        self._tasks = list(loaded) if loaded else []
        self._filter = Filter.ALL
        self._search = ''
        self._editing = None
        logger.debug("store initialized with %d tasks", len(self._tasks))
        self._changed()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every state change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    # -------------------- queries --------------------
    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    @property
    def filter(self) -> Filter:
        return self._filter

    @property
    def search(self) -> str:
        return self._search

    @property
    def editing(self) -> Optional[EditSession]:
        return self._editing

    @property
    def version(self) -> int:
        return self._version

    @property
    def remaining_count(self) -> int:
        return sum(1 for t in self._tasks if not t.completed)

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def visible_tasks(self, filter: Union[Filter, str, None] = None,
                      query: Optional[str] = None) -> List[Task]:
        """Tasks matching a status filter and a case-insensitive text query.

        Both arguments default to the current view state. A blank query
        matches everything.
        """
        selected = self._filter if filter is None else Filter(filter)
        query = self._search if query is None else query
        result = list(self._tasks)
        if selected is Filter.ACTIVE:
            result = [t for t in result if not t.completed]
        elif selected is Filter.COMPLETED:
            result = [t for t in result if t.completed]
        if query.strip():
            q = query.lower()
            result = [t for t in result if q in t.text.lower()]
        return result

    # -------------------- task operations --------------------
    def add(self, raw_text: str) -> Optional[Task]:
        text = raw_text.strip()
        if not text:
            return None
        task = Task(id=self._unique_id(), text=text, completed=False, created_at=now_ms())
        self._tasks.insert(0, task)
        logger.debug("added task %s", task.id)
        self._commit()
        return task

    def toggle(self, task_id: str) -> None:
        self._tasks = [replace(t, completed=not t.completed) if t.id == task_id else t
                       for t in self._tasks]
        self._commit()

    def remove(self, task_id: str) -> None:
        self._tasks = [t for t in self._tasks if t.id != task_id]
        self._drop_orphaned_edit()
        self._commit()

    def clear_completed(self) -> None:
        before = len(self._tasks)
        self._tasks = [t for t in self._tasks if not t.completed]
        logger.debug("cleared %d completed tasks", before - len(self._tasks))
        self._drop_orphaned_edit()
        self._commit()

    def toggle_all(self) -> None:
        """Complete every task, or reopen them all if all are already complete."""
        all_done = all(t.completed for t in self._tasks)
        self._tasks = [replace(t, completed=not all_done) for t in self._tasks]
        self._commit()

    def reset(self) -> None:
        self._tasks = []
        self._editing = None
        self._commit()

    # -------------------- edit session --------------------
    def begin_edit(self, task_id: str) -> None:
        """Start editing a task; any edit already in progress is discarded."""
        task = self.get(task_id)
        if task is None:
            return
        self._editing = EditSession(task_id=task.id, draft=task.text)
        self._changed()

    def update_draft(self, text: str) -> None:
        if self._editing is None:
            return
        self._editing = replace(self._editing, draft=text)
        self._changed()

    def save_edit(self, task_id: str, draft_text: Optional[str] = None) -> None:
        """Commit the draft as the task's text; a blank draft cancels instead.

        Without ``draft_text`` the session draft is used, but only when the
        session belongs to ``task_id``; otherwise nothing happens.
        """
        if draft_text is None:
            if self._editing is None or self._editing.task_id != task_id:
                return
            draft_text = self._editing.draft
        text = draft_text.strip()
        if not text:
            self.cancel_edit()
            return
        self._tasks = [replace(t, text=text) if t.id == task_id else t for t in self._tasks]
        self._editing = None
        self._commit()

    def cancel_edit(self) -> None:
        self._editing = None
        self._changed()

    # -------------------- view state --------------------
    def set_filter(self, filter: Union[Filter, str]) -> None:
        self._filter = Filter(filter)
        self._changed()

    def set_search(self, query: str) -> None:
        self._search = query
        self._changed()

    # -------------------- internals --------------------
    def _unique_id(self) -> str:
        taken = {t.id for t in self._tasks}
        tid = new_id()
        while tid in taken:
            tid = new_id()
        return tid

    def _drop_orphaned_edit(self) -> None:
        if self._editing is not None and self.get(self._editing.task_id) is None:
            self._editing = None

    def _commit(self) -> None:
        if self._storage is not None:
            self._storage.save(tuple(self._tasks))
        self._changed()

    def _changed(self) -> None:
        self._version += 1
        for listener in list(self._listeners):
            listener()

    def __str__(self) -> str:
        return f'{len(self._tasks)} tasks, {self.remaining_count} remaining'
