import re
from typing import List, Optional, Sequence

import pytest

from models import Task
from storage import Storage
from store import TaskStore

ANSI_RE = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub('', text)


class MemoryStorage:
    """Storage double that records every saved snapshot."""

    def __init__(self, initial: Optional[List[Task]] = None):
        self.initial = initial
        self.saves: List[List[Task]] = []

    def load(self) -> Optional[List[Task]]:
        return list(self.initial) if self.initial is not None else None

    def save(self, tasks: Sequence[Task]) -> bool:
        self.saves.append(list(tasks))
        return True


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def store(memory_storage):
    s = TaskStore(memory_storage)
    s.initialize()
    return s


@pytest.fixture
def file_storage(tmp_path):
    return Storage(tmp_path)
