"""Persistence helpers (load/save) for the to-do list.

The payload lives under a versioned key ("todos-v1") so a future schema
can move to a new file without reading old data by mistake. Loading never
raises: any unreadable or malformed payload is reported as absent.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Iterable, List, Optional, Set

from config import DEFAULT_DATA_DIR
from models import Task

logger = logging.getLogger(__name__)

STORAGE_KEY = 'todos-v1'


class Storage:
    def __init__(self, data_dir: Path = DEFAULT_DATA_DIR, key: str = STORAGE_KEY):
        self.path: Path = Path(data_dir) / f'{key}.json'

    def load(self) -> Optional[List[Task]]:
        """Load tasks from disk.

        Returns None when the file is missing, unreadable, not valid JSON,
        or contains a record that does not describe a task. Records whose
        id was already seen are dropped (first occurrence wins).
        """
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.debug("no stored tasks at %s", self.path)
            return None
        # RecursionError: pathologically nested arrays/objects
        except (OSError, ValueError, RecursionError) as exc:
            logger.warning("could not read %s: %s", self.path, exc)
            return None
        try:
            tasks = _decode(data)
        except ValueError as exc:
            logger.warning("ignoring malformed payload in %s: %s", self.path, exc)
            return None
        logger.debug("loaded %d tasks from %s", len(tasks), self.path)
        return tasks

    def save(self, tasks: Iterable[Task]) -> bool:
        """Persist the full collection, replacing the file atomically.

        Returns False (after logging) if the write failed.
        """
        payload = [task.to_dict() for task in tasks]
        tmp_name: Optional[str] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f'.{self.path.name}.', suffix='.tmp', dir=str(self.path.parent)
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=4)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as exc:
            logger.warning("could not save tasks to %s: %s", self.path, exc)
            return False
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.debug("stale temp file left at %s", tmp_name)
        return True


def _decode(data: Any) -> List[Task]:
    if not isinstance(data, list):
        raise ValueError(f"expected a list of tasks, got {type(data).__name__}")
    seen: Set[str] = set()
    tasks: List[Task] = []
    for raw in data:
        task = Task.from_dict(raw)
        if task.id in seen:
            logger.warning("dropping duplicate task id %s", task.id)
            continue
        seen.add(task.id)
        tasks.append(task)
    return tasks
