"""Tests for the Task model."""

from datetime import datetime, timedelta, timezone

import pytest

from luma_task.parsers.recurrence import Recurrence, Unit
from luma_task.task import Task

DUE = datetime(2026, 10, 15, 14, 30, tzinfo=timezone.utc)


class TestTask:
    """Test Task model functionality."""

    def test_task_creation(self):
        """Test basic task creation."""
        task = Task(id=1, content="zahnarzt morgen 14:30", title="Zahnarzt")

        assert task.id == 1
        assert task.title == "Zahnarzt"
        assert task.is_completed is False
        assert task.due_date is None
        assert task.tags == []
        assert task.created_at.tzinfo is not None

    def test_tags_are_sorted_and_unique(self):
        task = Task(id=1, content="", title="x", tags=["Termin", "Fitness", "Termin"])
        assert task.tags == ["Fitness", "Termin"]

    def test_naive_dates_become_aware(self):
        task = Task(id=1, content="", title="x", due_date=datetime(2026, 10, 15, 9, 0))
        assert task.due_date.tzinfo is not None

    def test_task_completion(self):
        """Test task completion."""
        task = Task(id=1, content="", title="Test task")
        when = DUE + timedelta(hours=1)

        task.complete(when)

        assert task.is_completed is True
        assert task.completed_at == when

    def test_completing_twice_keeps_first_timestamp(self):
        task = Task(id=1, content="", title="Test task")
        task.complete(DUE)
        task.complete(DUE + timedelta(days=1))
        assert task.completed_at == DUE

    def test_task_reopen(self):
        """Test reopening a completed task."""
        task = Task(id=1, content="", title="Test task")
        task.complete()

        task.reopen()

        assert not task.is_completed
        assert task.completed_at is None

    def test_completed_flag_sets_timestamp(self):
        task = Task(id=1, content="", title="x", is_completed=True)
        assert task.completed_at is not None


class TestPostpone:
    def test_postpone_moves_due_date(self):
        task = Task(id=1, content="", title="x", due_date=DUE)

        task.postpone(2)

        assert task.due_date == DUE + timedelta(days=2)
        assert task.original_due_date == DUE
        assert task.postponed_count == 1

    def test_original_due_date_is_kept_across_postpones(self):
        task = Task(id=1, content="", title="x", due_date=DUE)

        task.postpone()
        task.postpone()

        assert task.original_due_date == DUE
        assert task.due_date == DUE + timedelta(days=2)
        assert task.postponed_count == 2

    def test_postpone_undated_task_schedules_from_now(self):
        task = Task(id=1, content="", title="x")

        task.postpone(1, now=DUE)

        assert task.due_date == DUE + timedelta(days=1)
        assert task.original_due_date is None

    def test_postpone_rejects_non_positive_days(self):
        task = Task(id=1, content="", title="x", due_date=DUE)
        with pytest.raises(ValueError):
            task.postpone(0)


class TestOverdueAndReminder:
    def test_overdue(self):
        task = Task(id=1, content="", title="x", due_date=DUE)

        assert task.is_overdue(DUE + timedelta(minutes=1))
        assert not task.is_overdue(DUE - timedelta(minutes=1))

    def test_completed_task_is_never_overdue(self):
        task = Task(id=1, content="", title="x", due_date=DUE)
        task.complete(DUE)
        assert not task.is_overdue(DUE + timedelta(days=3))

    def test_undated_task_is_never_overdue(self):
        assert not Task(id=1, content="", title="x").is_overdue(DUE)

    def test_reminder_defaults_to_due_date(self):
        task = Task(id=1, content="", title="x", due_date=DUE, has_reminder=True)
        assert task.reminder_at == DUE

    def test_explicit_reminder_date(self):
        reminder = DUE - timedelta(hours=1)
        task = Task(id=1, content="", title="x", due_date=DUE,
                    has_reminder=True, reminder_date=reminder)
        assert task.reminder_at == reminder

    def test_no_reminder(self):
        task = Task(id=1, content="", title="x", due_date=DUE)
        assert task.reminder_at is None


class TestSerialization:
    def test_to_dict_and_back(self):
        """A fully populated task survives a dict round trip."""
        task = Task(
            id=7,
            content="sport montags und donnerstags 7 uhr",
            title="Sport",
            due_date=DUE,
            recurrence=Recurrence.weekly([1, 4]),
            tags=["Fitness"],
            icon="🏃",
            postponed_count=1,
            original_due_date=DUE - timedelta(days=1),
            has_reminder=True,
        )

        restored = Task.from_dict(task.to_dict())

        assert restored == task

    def test_to_dict_uses_iso_strings(self):
        data = Task(id=1, content="", title="x", due_date=DUE).to_dict()

        assert data["due_date"] == "2026-10-15T14:30:00+00:00"
        assert data["completed_at"] is None
        assert data["recurrence"] is None

    def test_interval_recurrence_serialization(self):
        task = Task(id=1, content="", title="x", recurrence=Recurrence.every(3, Unit.MONTH))
        assert Task.from_dict(task.to_dict()).recurrence == Recurrence.every(3, Unit.MONTH)

    def test_from_dict_tolerates_missing_fields(self):
        task = Task.from_dict({"id": "3", "title": "Alt"})

        assert task.id == 3
        assert task.content == ""
        assert task.due_date is None
        assert task.tags == []

    def test_from_dict_ignores_malformed_dates(self):
        task = Task.from_dict({"id": 1, "title": "x", "due_date": "not a date"})
        assert task.due_date is None

    def test_from_dict_requires_id(self):
        with pytest.raises(KeyError):
            Task.from_dict({"title": "x"})
