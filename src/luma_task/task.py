"""Task data model for Luma Task."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from .parsers.recurrence import Recurrence
from .utils.datetime import ensure_aware, now_local, parse_iso, to_iso_string


@dataclass
class Task:
    """A persisted task built from parsed input."""

    id: int
    content: str  # raw input as typed
    title: str

    due_date: Optional[datetime] = None
    recurrence: Optional[Recurrence] = None
    tags: List[str] = field(default_factory=list)
    icon: Optional[str] = None

    # Lifecycle
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=now_local)
    postponed_count: int = 0
    original_due_date: Optional[datetime] = None  # due date before the first postpone

    # Reminders
    has_reminder: bool = False
    reminder_date: Optional[datetime] = None  # defaults to due_date when unset

    def __post_init__(self):
        self.due_date = ensure_aware(self.due_date)
        self.completed_at = ensure_aware(self.completed_at)
        self.created_at = ensure_aware(self.created_at)
        self.original_due_date = ensure_aware(self.original_due_date)
        self.reminder_date = ensure_aware(self.reminder_date)
        self.tags = sorted(set(self.tags))

        if self.is_completed and not self.completed_at:
            self.completed_at = now_local()

    def complete(self, when: Optional[datetime] = None):
        """Mark the task as completed."""
        if self.is_completed:
            return
        self.is_completed = True
        self.completed_at = ensure_aware(when) or now_local()

    def reopen(self):
        """Reopen a completed task."""
        self.is_completed = False
        self.completed_at = None

    def postpone(self, days: int = 1, now: Optional[datetime] = None):
        """Push the due date back by ``days``; undated tasks are scheduled from now."""
        if days < 1:
            raise ValueError(f"Cannot postpone by {days} days")
        if self.original_due_date is None:
            self.original_due_date = self.due_date
        base = self.due_date or ensure_aware(now) or now_local()
        self.due_date = base + timedelta(days=days)
        self.postponed_count += 1

    @property
    def reminder_at(self) -> Optional[datetime]:
        if not self.has_reminder:
            return None
        return self.reminder_date or self.due_date

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """Check if the task is overdue."""
        if self.due_date and not self.is_completed:
            return (ensure_aware(now) or now_local()) > self.due_date
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert the Task to a dictionary with ISO timestamps."""
        return {
            "id": self.id,
            "content": self.content,
            "title": self.title,
            "due_date": to_iso_string(self.due_date),
            "recurrence": self.recurrence.to_dict() if self.recurrence else None,
            "tags": list(self.tags),
            "icon": self.icon,
            "is_completed": self.is_completed,
            "completed_at": to_iso_string(self.completed_at),
            "created_at": to_iso_string(self.created_at),
            "postponed_count": self.postponed_count,
            "original_due_date": to_iso_string(self.original_due_date),
            "has_reminder": self.has_reminder,
            "reminder_date": to_iso_string(self.reminder_date),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Create a Task from a dictionary."""
        recurrence = data.get("recurrence")
        return cls(
            id=int(data["id"]),
            content=data.get("content", ""),
            title=data.get("title", ""),
            due_date=parse_iso(data.get("due_date")),
            recurrence=Recurrence.from_dict(recurrence) if recurrence else None,
            tags=data.get("tags") or [],
            icon=data.get("icon"),
            is_completed=data.get("is_completed", False),
            completed_at=parse_iso(data.get("completed_at")),
            created_at=parse_iso(data.get("created_at")) or now_local(),
            postponed_count=data.get("postponed_count", 0),
            original_due_date=parse_iso(data.get("original_due_date")),
            has_reminder=data.get("has_reminder", False),
            reminder_date=parse_iso(data.get("reminder_date")),
        )
