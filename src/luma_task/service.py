"""Task creation and editing on top of the parser and the task store."""

import json
import logging
from datetime import datetime
from typing import List, Optional

from .parsers import ParsedTask, TaskParser
from .recurring import next_occurrence
from .storage import TaskStore
from .task import Task
from .utils.datetime import ensure_aware, now_local

logger = logging.getLogger(__name__)


class TaskNotFoundError(LookupError):
    """Raised when a task id does not exist in the store."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class TaskBuilder:
    """Builds Task objects from parsed input."""

    def build(self, parsed: ParsedTask, content: str, task_id: int = 0) -> Task:
        return Task(
            id=task_id,
            content=content,
            title=parsed.title,
            due_date=parsed.date,
            recurrence=parsed.recurrence,
            tags=list(parsed.tags),
            icon=parsed.icon,
        )

    def apply_edit(self, task: Task, parsed: ParsedTask, content: str) -> Task:
        """Merge a fresh parse of edited text into an existing task.

        Title and content always follow the new text. Due date, recurrence
        and icon are only replaced when the new text yields a value; tags
        are replaced when the new text yields at least one.
        """
        task.content = content
        task.title = parsed.title
        if parsed.date is not None:
            task.due_date = ensure_aware(parsed.date)
        if parsed.recurrence is not None:
            task.recurrence = parsed.recurrence
        if parsed.icon is not None:
            task.icon = parsed.icon
        if parsed.tags:
            task.tags = sorted(parsed.tags)
        return task


class TaskService:
    """Application-level task operations."""

    def __init__(self, store: TaskStore, parser: Optional[TaskParser] = None):
        self.store = store
        self.parser = parser or TaskParser()
        self.builder = TaskBuilder()

    def _require(self, task_id: int) -> Task:
        task = self.store.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def preview(self, text: str, now: Optional[datetime] = None) -> ParsedTask:
        """Parse without storing anything."""
        return self.parser.parse(text, now)

    def add(self, text: str, now: Optional[datetime] = None,
            due_override: Optional[datetime] = None) -> Task:
        """Parse ``text`` and store the resulting task."""
        parsed = self.parser.parse(text, now)
        task = self.builder.build(parsed, content=text)
        if due_override is not None:
            task.due_date = ensure_aware(due_override)
        task = self.store.add(task)
        logger.info(f"Created task {task.id} {task.title!r}")
        return task

    def edit(self, task_id: int, text: str, now: Optional[datetime] = None) -> Task:
        task = self._require(task_id)
        parsed = self.parser.parse(text, now)
        self.builder.apply_edit(task, parsed, content=text)
        self.store.update(task)
        return task

    def complete(self, task_id: int, now: Optional[datetime] = None) -> Optional[Task]:
        """Complete a task. Returns the next occurrence for recurring tasks."""
        task = self._require(task_id)
        if task.is_completed:
            return None
        next_due = None
        if task.recurrence and task.due_date:
            try:
                next_due = next_occurrence(task.due_date, task.recurrence)
            except (OverflowError, ValueError) as e:
                logger.warning(f"No further occurrence for task {task.id}: {e}")

        task.complete(now)
        self.store.update(task)

        if next_due is None:
            return None
        follow_up = Task(
            id=0,
            content=task.content,
            title=task.title,
            due_date=next_due,
            recurrence=task.recurrence,
            tags=list(task.tags),
            icon=task.icon,
            has_reminder=task.has_reminder,
        )
        follow_up = self.store.add(follow_up)
        logger.info(f"Scheduled next occurrence of task {task.id} as {follow_up.id}")
        return follow_up

    def reopen(self, task_id: int) -> Task:
        task = self._require(task_id)
        task.reopen()
        self.store.update(task)
        return task

    def postpone(self, task_id: int, days: int = 1, now: Optional[datetime] = None) -> Task:
        task = self._require(task_id)
        task.postpone(days, now)
        self.store.update(task)
        return task

    def delete(self, task_id: int) -> None:
        if not self.store.delete(task_id):
            raise TaskNotFoundError(task_id)

    def list_open(self, tag: Optional[str] = None) -> List[Task]:
        """Open tasks, dated ones first by due date, then undated by id."""
        tasks = [t for t in self.store.all() if not t.is_completed]
        if tag:
            tasks = [t for t in tasks if tag.lower() in (x.lower() for x in t.tags)]
        return sorted(tasks, key=lambda t: (t.due_date is None, t.due_date or now_local(), t.id))

    def due_today(self, now: Optional[datetime] = None) -> List[Task]:
        now = ensure_aware(now) or now_local()
        return [t for t in self.store.due_on(now.date(), now) if not t.is_completed]

    def known_tags(self) -> List[str]:
        return sorted({tag for task in self.store.all() for tag in task.tags})

    def export_json(self) -> str:
        return json.dumps([t.to_dict() for t in self.store.all()], indent=2, ensure_ascii=False)

    def import_json(self, data: str) -> int:
        """Merge exported tasks into the store by id."""
        records = json.loads(data)
        if not isinstance(records, list):
            raise ValueError("Expected a JSON list of tasks")
        return self.store.put_many(Task.from_dict(record) for record in records)
