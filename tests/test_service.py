"""Tests for task creation, editing and lifecycle operations."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from luma_task.parsers import Recurrence
from luma_task.service import TaskNotFoundError, TaskService
from luma_task.storage import TaskStore


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def service(tmp_path):
    return TaskService(TaskStore(tmp_path / "tasks.md"))


class TestAdd:
    def test_add_parses_and_stores(self, service, utc_now):
        task = service.add("Zahnarzt morgen 14:30", now=utc_now)

        assert task.id == 1
        assert task.content == "Zahnarzt morgen 14:30"
        assert task.title == "Zahnarzt"
        assert task.due_date == utc(2026, 10, 15, 14, 30)
        assert task.icon == "🏥"
        assert service.store.get(1) == task

    def test_due_override(self, service, utc_now):
        override = utc(2026, 12, 24, 18, 0)
        task = service.add("Geschenke morgen", now=utc_now, due_override=override)

        assert task.due_date == override
        assert task.title == "Geschenke"

    def test_preview_does_not_store(self, service, utc_now):
        parsed = service.preview("Gym Montag 18 Uhr", now=utc_now)

        assert parsed.title == "Gym"
        assert service.store.all() == []


class TestEdit:
    def test_title_always_follows_new_text(self, service, utc_now):
        task = service.add("Zahnarzt morgen 14:30", now=utc_now)

        edited = service.edit(task.id, "Kieferorthopäde", now=utc_now)

        assert edited.title == "Kieferorthopäde"
        assert edited.content == "Kieferorthopäde"

    def test_missing_values_keep_previous_ones(self, service, utc_now):
        task = service.add("Gym täglich 18 uhr", now=utc_now)

        edited = service.edit(task.id, "Krafttraining", now=utc_now)

        assert edited.due_date == utc(2026, 10, 14, 18, 0)
        assert edited.recurrence == Recurrence.daily()
        assert edited.icon == "🏋️"
        # "training" yields a tag, so tags are replaced
        assert edited.tags == ["Fitness"]

    def test_tags_kept_when_new_text_has_none(self, service, utc_now):
        task = service.add("Meeting morgen", now=utc_now)

        edited = service.edit(task.id, "Abstimmung", now=utc_now)

        assert edited.tags == ["Termin"]
        assert edited.icon == "📅"

    def test_new_values_replace_old_ones(self, service, utc_now):
        task = service.add("Zahnarzt morgen 14:30", now=utc_now)

        edited = service.edit(task.id, "Gym übermorgen", now=utc_now)

        assert edited.due_date == utc(2026, 10, 16, 9, 0)
        assert edited.icon == "🏋️"
        assert edited.tags == ["Fitness"]
        assert service.store.get(task.id).title == "Gym"

    def test_edit_unknown_task(self, service):
        with pytest.raises(TaskNotFoundError):
            service.edit(99, "egal")


class TestLifecycle:
    def test_complete(self, service, utc_now):
        task = service.add("Zahnarzt morgen", now=utc_now)

        follow_up = service.complete(task.id, now=utc_now)

        assert follow_up is None
        assert service.store.get(task.id).is_completed
        assert service.complete(task.id, now=utc_now) is None

    def test_completing_recurring_task_schedules_next(self, service, utc_now):
        task = service.add("Yoga täglich 7 uhr", now=utc_now)
        assert task.due_date == utc(2026, 10, 15, 7, 0)

        follow_up = service.complete(task.id, now=utc_now)

        assert follow_up.id == 2
        assert follow_up.title == "Yoga"
        assert follow_up.due_date == utc(2026, 10, 16, 7, 0)
        assert follow_up.recurrence == Recurrence.daily()
        assert not follow_up.is_completed
        assert [t.id for t in service.list_open()] == [2]

    def test_recurring_task_without_due_date_has_no_follow_up(self, service, utc_now):
        task = service.add("jeden montag yoga", now=utc_now)
        assert service.complete(task.id, now=utc_now) is None

    def test_out_of_range_next_occurrence_still_completes(self, service, utc_now):
        task = service.add("Putzen morgen alle 999999999 tage", now=utc_now)

        assert service.complete(task.id, now=utc_now) is None
        assert service.store.get(task.id).is_completed
        assert service.list_open() == []

    def test_reopen(self, service, utc_now):
        task = service.add("Zahnarzt", now=utc_now)
        service.complete(task.id, now=utc_now)

        assert not service.reopen(task.id).is_completed
        assert not service.store.get(task.id).is_completed

    def test_postpone(self, service, utc_now):
        task = service.add("Zahnarzt morgen 14:30", now=utc_now)

        postponed = service.postpone(task.id, days=3, now=utc_now)

        assert postponed.due_date == utc(2026, 10, 18, 14, 30)
        assert service.store.get(task.id).original_due_date == utc(2026, 10, 15, 14, 30)

    def test_delete(self, service, utc_now):
        task = service.add("Zahnarzt", now=utc_now)
        service.delete(task.id)

        assert service.store.all() == []
        with pytest.raises(TaskNotFoundError):
            service.delete(task.id)


class TestQueries:
    @pytest.fixture
    def populated(self, service, utc_now):
        service.add("Fenster putzen", now=utc_now)
        service.add("Zahnarzt morgen 14:30", now=utc_now)
        service.add("Kochen heute abend", now=utc_now)
        service.add("Meeting übermorgen", now=utc_now)
        done = service.add("Gym heute 18 uhr", now=utc_now)
        service.complete(done.id, now=utc_now)
        return service

    def test_list_open_orders_by_due_date(self, populated):
        titles = [t.title for t in populated.list_open()]
        assert titles == ["Kochen", "Zahnarzt", "Meeting", "Fenster putzen"]

    def test_list_open_by_tag(self, populated):
        assert [t.title for t in populated.list_open(tag="termin")] == ["Meeting"]

    def test_due_today(self, populated, utc_now):
        assert [t.title for t in populated.due_today(utc_now)] == ["Kochen"]

    def test_known_tags(self, populated):
        assert populated.known_tags() == ["Fitness", "Termin"]


class TestExportImport:
    def test_export_and_import(self, service, tmp_path, utc_now):
        service.add("Zahnarzt morgen 14:30", now=utc_now)
        service.add("Müll raustragen alle 2 wochen", now=utc_now)
        exported = service.export_json()

        other = TaskService(TaskStore(tmp_path / "other.md"))
        assert other.import_json(exported) == 2
        assert other.store.all() == service.store.all()

    def test_export_is_json_list(self, service, utc_now):
        service.add("Müll raustragen", now=utc_now)
        data = json.loads(service.export_json())

        assert data[0]["title"] == "Müll raustragen"

    def test_import_rejects_non_list(self, service):
        with pytest.raises(ValueError):
            service.import_json('{"id": 1}')

    def test_import_overwrites_same_id(self, service, utc_now):
        task = service.add("Zahnarzt", now=utc_now)
        record = task.to_dict()
        record["title"] = "Zahnreinigung"

        service.import_json(json.dumps([record]))

        assert service.store.get(task.id).title == "Zahnreinigung"
        assert service.store.get(task.id).due_date is None

    def test_imported_ids_advance_counter(self, service, utc_now):
        record = service.add("Alt", now=utc_now).to_dict()
        record["id"] = 20
        service.import_json(json.dumps([record]))

        assert service.add("Neu", now=utc_now).id == 21

    def test_postpone_then_export_keeps_history(self, service, utc_now):
        task = service.add("Zahnarzt morgen", now=utc_now)
        service.postpone(task.id, now=utc_now)

        data = json.loads(service.export_json())

        assert data[0]["postponed_count"] == 1
        assert data[0]["due_date"] == (utc(2026, 10, 15, 9, 0) + timedelta(days=1)).isoformat()
