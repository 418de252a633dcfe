"""File storage for Luma Task: one markdown file with YAML frontmatter.

The frontmatter holds the task records and is the source of truth. The
markdown body is a readable checklist regenerated on every save, so the
file can be skimmed in any editor.
"""

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import frontmatter
import yaml

from .config import ConfigModel
from .task import Task
from .utils.datetime import day_bounds, ensure_aware, now_local, to_iso_string

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


class StorageError(Exception):
    """Raised when the task file cannot be read or written."""


class TaskMarkdownFormat:
    """Handles conversion between Task objects and the store file."""

    @staticmethod
    def to_markdown(task: Task) -> str:
        """Render one task as a checklist line."""
        checkbox = "- [x]" if task.is_completed else "- [ ]"
        parts = [checkbox]
        if task.icon:
            parts.append(task.icon)
        parts.append(task.title)
        if task.due_date:
            parts.append(f"({task.due_date.strftime('%d.%m.%Y %H:%M')})")
        if task.recurrence:
            parts.append(f"↻ {task.recurrence.describe()}")
        if task.tags:
            parts.append(" ".join(f"#{tag}" for tag in task.tags))
        parts.append(f"<!-- id:{task.id} -->")
        return " ".join(parts)

    @classmethod
    def dumps(cls, tasks: Iterable[Task], next_id: int) -> str:
        """Serialize tasks into frontmatter + checklist body."""
        tasks = sorted(tasks, key=lambda t: t.id)
        open_tasks = [t for t in tasks if not t.is_completed]
        done_tasks = [t for t in tasks if t.is_completed]

        lines = ["# Aufgaben", ""]
        if open_tasks:
            lines.append("## Offen")
            lines.append("")
            lines.extend(cls.to_markdown(t) for t in open_tasks)
            lines.append("")
        if done_tasks:
            lines.append("## Erledigt")
            lines.append("")
            lines.extend(cls.to_markdown(t) for t in done_tasks)
            lines.append("")

        post = frontmatter.Post(
            "\n".join(lines),
            version=FORMAT_VERSION,
            next_id=next_id,
            updated=to_iso_string(now_local()),
            tasks=[t.to_dict() for t in tasks],
        )
        return frontmatter.dumps(post)

    @staticmethod
    def loads(content: str) -> Tuple[Dict[int, Task], int]:
        """Parse the store file into ``({id: task}, next_id)``."""
        post = frontmatter.loads(content)
        tasks: Dict[int, Task] = {}
        for record in post.metadata.get("tasks") or []:
            try:
                task = Task.from_dict(record)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed task record {record!r}: {e}")
                continue
            tasks[task.id] = task
        next_id = max([post.metadata.get("next_id", 1), *(i + 1 for i in tasks)])
        return tasks, next_id


class TaskStore:
    """Task store keyed by id, with lookup by due date."""

    def __init__(self, path: Path):
        self.path = Path(path)

    @classmethod
    def from_config(cls, config: ConfigModel) -> "TaskStore":
        return cls(config.get_store_path())

    def _load(self) -> Tuple[Dict[int, Task], int]:
        if not self.path.exists():
            return {}, 1
        try:
            content = self.path.read_text(encoding="utf-8")
            return TaskMarkdownFormat.loads(content)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading tasks from {self.path}: {e}")
            raise StorageError(f"Cannot read task file {self.path}: {e}") from e

    def _save(self, tasks: Dict[int, Task], next_id: int) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(TaskMarkdownFormat.dumps(tasks.values(), next_id), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            logger.error(f"Error saving tasks to {self.path}: {e}")
            raise StorageError(f"Cannot write task file {self.path}: {e}") from e

    def all(self) -> List[Task]:
        """All tasks ordered by id."""
        tasks, _ = self._load()
        return [tasks[task_id] for task_id in sorted(tasks)]

    def get(self, task_id: int) -> Optional[Task]:
        tasks, _ = self._load()
        return tasks.get(task_id)

    def add(self, task: Task) -> Task:
        """Store a new task, assigning the next free id when needed."""
        tasks, next_id = self._load()
        if not task.id or task.id in tasks:
            task.id = next_id
        tasks[task.id] = task
        self._save(tasks, max(next_id, task.id + 1))
        logger.debug(f"Added task {task.id}: {task.title!r}")
        return task

    def update(self, task: Task) -> bool:
        """Replace a stored task. Returns False if the id is unknown."""
        tasks, next_id = self._load()
        if task.id not in tasks:
            return False
        tasks[task.id] = task
        self._save(tasks, next_id)
        return True

    def put_many(self, incoming: Iterable[Task]) -> int:
        """Insert or overwrite tasks by id. Returns how many were written."""
        tasks, next_id = self._load()
        count = 0
        for task in incoming:
            tasks[task.id] = task
            next_id = max(next_id, task.id + 1)
            count += 1
        self._save(tasks, next_id)
        return count

    def delete(self, task_id: int) -> bool:
        tasks, next_id = self._load()
        if tasks.pop(task_id, None) is None:
            return False
        self._save(tasks, next_id)
        return True

    def due_between(self, start: datetime, end: datetime) -> List[Task]:
        """Tasks due in ``[start, end)``, earliest first."""
        start, end = ensure_aware(start), ensure_aware(end)
        hits = [t for t in self.all() if t.due_date and start <= t.due_date < end]
        return sorted(hits, key=lambda t: t.due_date)

    def due_on(self, day: date, reference: Optional[datetime] = None) -> List[Task]:
        """Tasks due on the given calendar day."""
        start, end = day_bounds(day, reference)
        return self.due_between(start, end)
