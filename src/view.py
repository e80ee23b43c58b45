"""Terminal rendering of the task store.

Rows are numbered by their position in the visible (filtered/searched)
list; the CLI resolves those numbers back to task ids. The view owns no
task state of its own.
"""
from typing import List, Optional, Tuple
import shutil

from models import FILTER_LABELS, Filter, Task
from store import TaskStore
from theme import (
    color, BOLD, HEADER_COLOR, ROW_COLOR, EMPTY_COLOR,
    ACTIVE_COLOR, COMPLETED_COLOR, EDIT_COLOR,
)

TITLE = "To-Do List"
EMPTY_MESSAGE = "No tasks to show. Add something above."
CHECKED = "[x] "
UNCHECKED = "[ ] "
EDITING = "[~] "
MIN_WIDTH = 30


def remaining_label(count: int) -> str:
    return f"{count} {'task' if count == 1 else 'tasks'} remaining"


class TodoView:
    def __init__(self, store: TaskStore, width: Optional[int] = None):
        self.store: TaskStore = store
        self.width: Optional[int] = width

    def display(self) -> None:
        for line in self.render():
            print(line)

    def render(self) -> List[str]:
        width = self.width or shutil.get_terminal_size((80, 30)).columns
        width = max(MIN_WIDTH, width)
        lines: List[str] = [color(TITLE, HEADER_COLOR, BOLD), self._toolbar()]
        lines.append(color('-' * width, HEADER_COLOR))
        visible = self.store.visible_tasks()
        if not visible:
            lines.append(color(EMPTY_MESSAGE, EMPTY_COLOR))
        for number, task in enumerate(visible, start=1):
            lines.extend(self._wrap_task(number, task, width))
        lines.append(color('-' * width, HEADER_COLOR))
        lines.append(remaining_label(self.store.remaining_count))
        return lines

    def _toolbar(self) -> str:
        cells: List[str] = []
        for f in Filter:
            label = FILTER_LABELS[f]
            if f is self.store.filter:
                cells.append(color(f"[{label}]", HEADER_COLOR, BOLD))
            else:
                cells.append(label)
        bar = ' '.join(cells)
        if self.store.search.strip():
            bar += f'   search: "{self.store.search}"'
        return bar

    def _task_segments(self, number: int, task: Task) -> Tuple[str, str, str, str]:
        editing = self.store.editing
        prefix_visible = f"{number}. "
        prefix_colored = color(f"{number}.", ROW_COLOR) + ' '
        if editing is not None and editing.task_id == task.id:
            return prefix_visible + EDITING, prefix_colored + EDITING, editing.draft, EDIT_COLOR
        box = CHECKED if task.completed else UNCHECKED
        style = COMPLETED_COLOR if task.completed else ACTIVE_COLOR
        return prefix_visible + box, prefix_colored + box, task.text, style

    def _wrap_task(self, number: int, task: Task, width: int) -> List[str]:
        pv, pc, text, style = self._task_segments(number, task)
        limit = max(1, width - len(pv))
        lines_raw: List[str] = []
        current = ''
        for w in text.split():
            candidate = w if not current else current + ' ' + w
            if len(candidate) <= limit:
                current = candidate
            else:
                if current:
                    lines_raw.append(current)
                current = w
        if current:
            lines_raw.append(current)
        if not lines_raw:
            return [pc + color('<empty>', style)]
        indent = ' ' * len(pv)
        return [(pc if idx == 0 else indent) + color(raw, style)
                for idx, raw in enumerate(lines_raw)]
