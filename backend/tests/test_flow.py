# tests/test_flow.py
"""
Tests for flow: tasks, recurrence, ideas and time allocation.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from flow.commands import (
    archive_task,
    create_idea,
    create_task,
    create_time_allocation,
    delete_idea,
    delete_time_allocation,
    log_time,
    reorder_tasks,
    update_idea_status,
    update_task,
    update_task_status,
)
from flow.filters import filter_tasks
from flow.models import Idea, Task, TimeAllocation, TimeLog
from flow.recurrence import add_months, next_due_date
from flow.summary import time_allocation_summary


# =============================================================================
# Recurrence arithmetic
# =============================================================================

class TestNextDueDate:

    @pytest.mark.parametrize("recurrence_type,interval,expected", [
        ("daily", 1, date(2025, 3, 11)),
        ("daily", 3, date(2025, 3, 13)),
        ("weekly", 2, date(2025, 3, 24)),
        ("monthly", 1, date(2025, 4, 10)),
        ("yearly", 1, date(2026, 3, 10)),
    ])
    def test_intervals(self, recurrence_type, interval, expected):
        assert next_due_date(date(2025, 3, 10), recurrence_type, interval) == expected

    def test_month_end_is_clamped(self):
        assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert add_months(date(2025, 11, 30), 3) == date(2026, 2, 28)

    def test_leap_day_yearly(self):
        assert next_due_date(date(2024, 2, 29), "yearly") == date(2025, 2, 28)

    def test_unknown_type(self):
        assert next_due_date(date(2025, 3, 10), "hourly") is None


# =============================================================================
# Task commands
# =============================================================================

@pytest.mark.django_db
class TestRecurringTasks:

    def _recurring(self, actor, **extra):
        data = {
            "title": "Water plants",
            "due_date": date(2025, 1, 31),
            "is_recurring": True,
            "recurrence_type": "monthly",
            "tags": ["home"],
        }
        data.update(extra)
        return create_task(actor, **data).data

    def test_completing_spawns_next_occurrence(self, actor):
        task = self._recurring(actor)

        result = update_task_status(actor, task.pk, Task.Status.COMPLETED)

        next_task = result.data["next_task"]
        assert next_task.status == Task.Status.TODO
        assert next_task.due_date == date(2025, 2, 28)
        assert next_task.parent_task_id == task.pk
        assert next_task.tags == ["home"]
        assert next_task.is_recurring is True

    def test_occurrences_point_at_series_root(self, actor):
        root = self._recurring(actor)
        second = update_task_status(actor, root.pk, Task.Status.COMPLETED).data["next_task"]

        third = update_task_status(actor, second.pk, Task.Status.COMPLETED).data["next_task"]

        assert third.parent_task_id == root.pk
        assert third.due_date == date(2025, 3, 28)

    def test_completing_twice_spawns_once(self, actor):
        task = self._recurring(actor)
        update_task_status(actor, task.pk, Task.Status.COMPLETED)

        again = update_task_status(actor, task.pk, Task.Status.COMPLETED)

        assert again.data["next_task"] is None
        assert Task.objects.filter(parent_task=task).count() == 1

    def test_end_date_stops_series(self, actor):
        task = self._recurring(actor, recurrence_end_date=date(2025, 2, 15))

        result = update_task_status(actor, task.pk, Task.Status.COMPLETED)

        assert result.data["next_task"] is None

    def test_last_counted_occurrence_stops_recurring(self, actor):
        task = self._recurring(actor, recurrence_count=2)

        second = update_task_status(actor, task.pk, Task.Status.COMPLETED).data["next_task"]
        last = update_task_status(actor, second.pk, Task.Status.COMPLETED)

        assert second.recurrence_count == 1
        assert last.data["next_task"] is None
        second.refresh_from_db()
        assert second.is_recurring is False

    def test_non_recurring_task_spawns_nothing(self, actor):
        task = create_task(actor, title="Once").data

        result = update_task_status(actor, task.pk, Task.Status.COMPLETED)

        assert result.data["next_task"] is None
        assert Task.objects.count() == 1

    def test_invalid_status(self, actor):
        task = create_task(actor, title="Once").data
        assert not update_task_status(actor, task.pk, "done").success


@pytest.mark.django_db
class TestTaskCommands:

    def test_update_ignores_status(self, actor):
        task = create_task(actor, title="Draft").data

        update_task(actor, task.pk, title="Final", status=Task.Status.COMPLETED)

        task.refresh_from_db()
        assert task.title == "Final"
        assert task.status == Task.Status.TODO

    def test_idea_from_other_workspace_is_missing(self, actor, other_actor):
        idea = create_idea(other_actor, title="Theirs").data

        assert create_task(actor, title="Task", idea_id=idea.pk).not_found

    def test_reorder_skips_foreign_tasks(self, actor, other_actor):
        mine = create_task(actor, title="Mine").data
        theirs = create_task(other_actor, title="Theirs").data

        result = reorder_tasks(actor, [
            {"task_id": mine.pk, "status": Task.Status.IN_PROGRESS, "position": 3},
            {"task_id": theirs.pk, "position": 0},
        ])

        assert result.data == {"updated": 1, "skipped": 1}
        mine.refresh_from_db()
        theirs.refresh_from_db()
        assert (mine.status, mine.position) == (Task.Status.IN_PROGRESS, 3)
        assert theirs.position == 0

    def test_archive_and_restore(self, actor):
        task = create_task(actor, title="Old").data

        assert archive_task(actor, task.pk).data.is_archived is True
        assert archive_task(actor, task.pk, is_archived=False).data.is_archived is False


@pytest.mark.django_db
class TestFilters:

    @pytest.fixture
    def tasks(self, actor):
        create_task(actor, title="Buy milk", tags=["shopping"], priority="low")
        create_task(actor, title="File taxes", description="Steuererklärung", tags=["admin", "money"], priority="high")
        archived = create_task(actor, title="Old taxes", tags=["money"]).data
        archive_task(actor, archived.pk)
        return Task.objects.filter(workspace=actor.workspace)

    def test_archived_hidden_by_default(self, tasks):
        assert len(filter_tasks(tasks)) == 2
        assert len(filter_tasks(tasks, include_archived=True)) == 3

    def test_search_title_and_description(self, tasks):
        assert [t.title for t in filter_tasks(tasks, search="steuer")] == ["File taxes"]
        assert [t.title for t in filter_tasks(tasks, search="MILK")] == ["Buy milk"]

    def test_any_tag_matches(self, tasks):
        titles = {t.title for t in filter_tasks(tasks, tags=["shopping", "money"])}
        assert titles == {"Buy milk", "File taxes"}

    def test_priority(self, tasks):
        assert [t.title for t in filter_tasks(tasks, priority="high")] == ["File taxes"]


@pytest.mark.django_db
class TestSummary:

    def test_allocation_totals(self, actor, workspace):
        create_task(actor, title="A", daily_allocation=Decimal("1.5"), time_spent=Decimal("2"))
        done = create_task(actor, title="B", weekly_allocation=Decimal("4")).data
        create_task(actor, title="C")
        update_task_status(actor, done.pk, Task.Status.COMPLETED)

        summary = time_allocation_summary(workspace)

        assert summary["total_daily_allocation"] == Decimal("1.5")
        assert summary["total_weekly_allocation"] == Decimal("4")
        assert summary["total_time_spent"] == Decimal("2")
        assert summary["tasks_with_allocation"] == 2
        assert summary["completed_tasks"] == 1
        assert summary["total_tasks"] == 3


# =============================================================================
# Ideas
# =============================================================================

@pytest.mark.django_db
class TestIdeas:

    def test_delete_unlinks_tasks(self, actor):
        idea = create_idea(actor, title="Garden").data
        task = create_task(actor, title="Buy seeds", idea_id=idea.pk).data

        result = delete_idea(actor, idea.pk)

        assert result.data == {"tasks_unlinked": 1}
        task.refresh_from_db()
        assert task.idea is None

    def test_status_validation(self, actor):
        idea = create_idea(actor, title="Garden").data

        assert not update_idea_status(actor, idea.pk, "maybe").success
        assert update_idea_status(actor, idea.pk, Idea.Status.REVIEWING).data.status == Idea.Status.REVIEWING


# =============================================================================
# Time allocation
# =============================================================================

SESSION_START = timezone.make_aware(datetime(2025, 3, 10, 9))


@pytest.mark.django_db
class TestTimeAllocation:

    def test_week_number_follows_date(self, actor):
        allocation = create_time_allocation(actor, date(2025, 3, 10), 90, task_name="Writing").data

        assert allocation.week_number == 11
        assert allocation.user == actor.user

    def test_week_number_at_year_boundary(self, actor):
        allocation = create_time_allocation(actor, date(2024, 12, 30), 30, task_name="Review").data

        assert allocation.week_number == 1

    def test_task_supplies_name(self, actor):
        task = create_task(actor, title="Tax return").data

        allocation = create_time_allocation(actor, date(2025, 3, 10), 60, task_id=task.pk).data

        assert allocation.task_name == "Tax return"
        assert allocation.task == task

    def test_name_or_task_required(self, actor):
        assert not create_time_allocation(actor, date(2025, 3, 10), 60).success

    def test_foreign_task_is_missing(self, actor, other_actor):
        theirs = create_task(other_actor, title="Theirs").data

        assert create_time_allocation(actor, date(2025, 3, 10), 60, task_id=theirs.pk).not_found

    def test_logging_adds_to_task_time(self, actor):
        task = create_task(actor, title="Tax return").data
        allocation = create_time_allocation(actor, date(2025, 3, 10), 60, task_id=task.pk).data

        result = log_time(
            actor, SESSION_START, SESSION_START + timedelta(minutes=50), 45 * 60, allocation_id=allocation.pk,
        )

        assert result.success
        task.refresh_from_db()
        assert task.time_spent == Decimal("0.75")

    def test_log_without_allocation(self, actor):
        result = log_time(actor, SESSION_START, SESSION_START + timedelta(minutes=10), 600)

        assert result.success
        assert result.data.allocation is None

    def test_elapsed_longer_than_session_rejected(self, actor):
        result = log_time(actor, SESSION_START, SESSION_START + timedelta(minutes=10), 601)

        assert not result.success
        assert not TimeLog.objects.exists()

    def test_end_before_start_rejected(self, actor):
        assert not log_time(actor, SESSION_START, SESSION_START - timedelta(minutes=1), 0).success

    def test_deleting_allocation_keeps_logs(self, actor):
        allocation = create_time_allocation(actor, date(2025, 3, 10), 60, task_name="Reading").data
        entry = log_time(actor, SESSION_START, SESSION_START + timedelta(minutes=5), 300, allocation_id=allocation.pk).data

        assert delete_time_allocation(actor, allocation.pk).success

        entry.refresh_from_db()
        assert entry.allocation is None
        assert not TimeAllocation.objects.filter(pk=allocation.pk).exists()


@pytest.mark.django_db
class TestFlowAPI:

    def test_create_and_filter_by_tags(self, owner_client, ws_url):
        owner_client.post(ws_url("flow/tasks/"), {"title": "Buy milk", "tags": ["shopping"]}, format="json")
        owner_client.post(ws_url("flow/tasks/"), {"title": "Call mum", "tags": ["family"]}, format="json")

        response = owner_client.get(ws_url("flow/tasks/"), {"tags": "family, work"})

        assert response.status_code == 200
        assert [t["title"] for t in response.data] == ["Call mum"]

    def test_recurring_needs_type(self, owner_client, ws_url):
        response = owner_client.post(ws_url("flow/tasks/"), {"title": "Repeat", "is_recurring": True}, format="json")
        assert response.status_code == 400

    def test_status_endpoint_returns_next_task(self, owner_client, ws_url, actor):
        task = create_task(
            actor, title="Weekly review", due_date=date(2025, 3, 7),
            is_recurring=True, recurrence_type="weekly",
        ).data

        response = owner_client.post(ws_url(f"flow/tasks/{task.pk}/status/"), {"status": "completed"}, format="json")

        assert response.status_code == 200
        assert response.data["task"]["status"] == "completed"
        assert response.data["next_task"]["due_date"] == "2025-03-14"

    def test_foreign_task_is_404(self, owner_client, ws_url, other_actor):
        theirs = create_task(other_actor, title="Theirs").data

        response = owner_client.delete(ws_url(f"flow/tasks/{theirs.pk}/"))

        assert response.status_code == 404

    def test_time_allocation_day_view(self, owner_client, ws_url, actor):
        allocation = create_time_allocation(actor, date(2025, 3, 10), 60, task_name="Reading").data
        create_time_allocation(actor, date(2025, 3, 11), 30, task_name="Tomorrow")
        log_time(actor, SESSION_START, SESSION_START + timedelta(minutes=20), 900, allocation_id=allocation.pk)

        response = owner_client.get(ws_url("flow/time-allocations/"), {"date": "2025-03-10"})

        assert response.status_code == 200
        assert [(a["task_name"], a["logged_seconds"]) for a in response.data] == [("Reading", 900)]

    def test_time_allocation_needs_date(self, owner_client, ws_url):
        assert owner_client.get(ws_url("flow/time-allocations/")).status_code == 400

    def test_log_time_endpoint(self, owner_client, ws_url):
        response = owner_client.post(ws_url("flow/time-logs/"), {
            "session_start": "2025-03-10T09:00:00Z",
            "session_end": "2025-03-10T09:30:00Z",
            "elapsed_seconds": 1800,
        }, format="json")

        assert response.status_code == 201
        assert response.data["elapsed_seconds"] == 1800
