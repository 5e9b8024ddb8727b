# tests/test_lessons.py
"""
Tests for lesson status, reassignment, bulk delete and attendance reports.

Tests cover:
- Cancellation window per lesson type and who may override it
- Status feeding monthly invoice generation
- Notification emails
- Attendance reports with per-student progress
- API endpoints
"""

from datetime import datetime, timedelta

import pytest
from django.core import mail
from django.core.exceptions import PermissionDenied
from django.utils import timezone

from accounts.models import PermissionModule
from customers.models import Customer, Student, StudentGroup
from invoicing.commands import (
    create_attendance_report,
    create_lesson,
    delete_attendance_report,
    delete_lessons,
    generate_monthly_invoices,
    reassign_lesson,
    update_attendance_report,
    update_lesson_status,
)
from invoicing.models import AttendanceReport, Invoice, Lesson


def aware(*args):
    return timezone.make_aware(datetime(*args))


NOW = aware(2025, 3, 1, 12)


@pytest.fixture
def customer(workspace):
    return Customer.objects.create(workspace=workspace, name="Acme GmbH", default_hourly_rate="40.00")


@pytest.fixture
def group(workspace, customer):
    return StudentGroup.objects.create(workspace=workspace, customer=customer, name="Beginners")


@pytest.fixture
def anna(workspace, customer, group):
    return Student.objects.create(
        workspace=workspace, customer=customer, group=group,
        first_name="Anna", last_name="Adler", email="anna@test.com",
    )


@pytest.fixture
def ben(workspace, customer, group):
    return Student.objects.create(workspace=workspace, customer=customer, group=group, first_name="Ben", last_name="Berg")


@pytest.fixture
def make_lesson(workspace, customer):
    def _make(hours_ahead=72, lesson_type=Lesson.LessonType.IN_PERSON, **extra):
        start = NOW + timedelta(hours=hours_ahead)
        return Lesson.objects.create(
            workspace=workspace, customer=customer, title="Lesson", lesson_type=lesson_type,
            start=start, end=start + timedelta(hours=1), **extra,
        )
    return _make


@pytest.fixture
def teacher_actor(make_member_actor):
    """Member who may add lessons but not edit shared data."""
    return make_member_actor(module=PermissionModule.INVOICING, add=True)


# =============================================================================
# Status & cancellation policy
# =============================================================================

@pytest.mark.django_db
class TestLessonStatus:

    def test_attended_is_billable(self, actor, make_lesson):
        lesson = make_lesson(is_billable=False)

        result = update_lesson_status(actor, lesson.pk, Lesson.Status.ATTENDED, now=NOW)

        assert result.success
        lesson.refresh_from_db()
        assert lesson.status == Lesson.Status.ATTENDED
        assert lesson.is_billable
        assert lesson.cancelled_at is None

    def test_missed_is_billable_and_stamped(self, actor, owner, make_lesson):
        lesson = make_lesson()

        update_lesson_status(actor, lesson.pk, Lesson.Status.MISSED, now=NOW)

        lesson.refresh_from_db()
        assert lesson.is_billable
        assert lesson.cancelled_at == NOW
        assert lesson.cancelled_by == owner

    def test_on_time_inside_online_window_rejected(self, teacher_actor, make_lesson):
        lesson = make_lesson(hours_ahead=10, lesson_type=Lesson.LessonType.ONLINE)

        result = update_lesson_status(teacher_actor, lesson.pk, Lesson.Status.CANCELLED_ON_TIME, now=NOW)

        assert not result.success
        assert result.error == (
            "Too late to cancel without penalty. Please contact admin or mark as Cancelled Late."
        )
        lesson.refresh_from_db()
        assert lesson.status == Lesson.Status.SCHEDULED

    def test_late_inside_window_is_billable(self, teacher_actor, make_lesson):
        lesson = make_lesson(hours_ahead=10, lesson_type=Lesson.LessonType.ONLINE)

        result = update_lesson_status(
            teacher_actor, lesson.pk, Lesson.Status.CANCELLED_LATE, cancellation_reason="Sick", now=NOW,
        )

        assert result.success
        lesson.refresh_from_db()
        assert lesson.is_billable
        assert lesson.cancellation_reason == "Sick"

    def test_in_person_window_is_longer(self, teacher_actor, make_lesson):
        online = make_lesson(hours_ahead=30, lesson_type=Lesson.LessonType.ONLINE)
        in_person = make_lesson(hours_ahead=30, lesson_type=Lesson.LessonType.IN_PERSON)

        assert update_lesson_status(teacher_actor, online.pk, Lesson.Status.CANCELLED_ON_TIME, now=NOW).success
        assert not update_lesson_status(
            teacher_actor, in_person.pk, Lesson.Status.CANCELLED_ON_TIME, now=NOW,
        ).success

    def test_on_time_outside_window_is_not_billable(self, teacher_actor, make_lesson):
        lesson = make_lesson(hours_ahead=72)

        result = update_lesson_status(teacher_actor, lesson.pk, Lesson.Status.CANCELLED_ON_TIME, now=NOW)

        assert result.success
        lesson.refresh_from_db()
        assert not lesson.is_billable
        assert lesson.cancelled_at == NOW

    def test_late_outside_window_rejected(self, teacher_actor, make_lesson):
        lesson = make_lesson(hours_ahead=72)

        result = update_lesson_status(teacher_actor, lesson.pk, Lesson.Status.CANCELLED_LATE, now=NOW)

        assert not result.success

    def test_owner_chooses_cancellation_freely(self, actor, make_lesson):
        soon = make_lesson(hours_ahead=2)
        later = make_lesson(hours_ahead=72)

        update_lesson_status(actor, soon.pk, Lesson.Status.CANCELLED_ON_TIME, now=NOW)
        update_lesson_status(actor, later.pk, Lesson.Status.CANCELLED_LATE, now=NOW)

        soon.refresh_from_db()
        later.refresh_from_db()
        assert (soon.status, soon.is_billable) == (Lesson.Status.CANCELLED_ON_TIME, False)
        assert (later.status, later.is_billable) == (Lesson.Status.CANCELLED_LATE, True)

    def test_shared_edit_grant_overrides_window(self, make_member_actor, make_lesson):
        manager = make_member_actor(module=PermissionModule.INVOICING, add=True, edit_shared=True)
        lesson = make_lesson(hours_ahead=2)

        result = update_lesson_status(manager, lesson.pk, Lesson.Status.CANCELLED_ON_TIME, now=NOW)

        assert result.success
        assert not result.data.is_billable

    def test_attended_clears_cancellation(self, actor, make_lesson):
        lesson = make_lesson()
        update_lesson_status(actor, lesson.pk, Lesson.Status.CANCELLED_ON_TIME, cancellation_reason="Ill", now=NOW)

        update_lesson_status(actor, lesson.pk, Lesson.Status.ATTENDED, now=NOW)

        lesson.refresh_from_db()
        assert lesson.cancelled_at is None
        assert lesson.cancelled_by is None
        assert lesson.cancellation_reason == ""

    def test_scheduled_cannot_be_set(self, actor, make_lesson):
        result = update_lesson_status(actor, make_lesson().pk, Lesson.Status.SCHEDULED, now=NOW)

        assert not result.success

    def test_invoiced_lesson_is_locked(self, actor, workspace, customer, make_lesson):
        invoice = Invoice.objects.create(
            workspace=workspace, customer=customer, invoice_number="25/03/1000",
            date=NOW.date(), due_date=NOW.date(),
        )
        lesson = make_lesson(invoice=invoice)

        result = update_lesson_status(actor, lesson.pk, Lesson.Status.CANCELLED_ON_TIME, now=NOW)

        assert not result.success
        assert result.error == "Invoiced lessons cannot change status."

    def test_other_workspace_lesson_is_missing(self, other_actor, make_lesson):
        result = update_lesson_status(other_actor, make_lesson().pk, Lesson.Status.ATTENDED, now=NOW)

        assert result.not_found

    def test_viewer_cannot_change_status(self, viewer_actor, make_lesson):
        with pytest.raises(PermissionDenied):
            update_lesson_status(viewer_actor, make_lesson().pk, Lesson.Status.ATTENDED, now=NOW)


@pytest.mark.django_db
class TestStatusBilling:

    def test_only_billable_statuses_are_invoiced(self, actor, make_lesson):
        attended = make_lesson(hours_ahead=48)
        on_time = make_lesson(hours_ahead=72)
        late = make_lesson(hours_ahead=96)
        for lesson, new_status in (
            (attended, Lesson.Status.ATTENDED),
            (on_time, Lesson.Status.CANCELLED_ON_TIME),
            (late, Lesson.Status.CANCELLED_LATE),
        ):
            assert update_lesson_status(actor, lesson.pk, new_status, now=NOW).success

        result = generate_monthly_invoices(actor, 2025, 3)

        invoice = Invoice.objects.get(pk=result.data[0])
        assert set(invoice.lessons.values_list("pk", flat=True)) == {attended.pk, late.pk}


# =============================================================================
# Reassignment, bulk delete, notifications
# =============================================================================

@pytest.mark.django_db
class TestLessonManagement:

    def test_create_with_teacher_and_type(self, actor, viewer_actor, member, customer):
        result = create_lesson(
            actor, customer.pk, "Online", aware(2025, 3, 5, 10), aware(2025, 3, 5, 11),
            lesson_type=Lesson.LessonType.ONLINE, teacher_id=member.pk,
        )

        assert result.success
        assert result.data.teacher == member
        assert result.data.lesson_type == Lesson.LessonType.ONLINE

    def test_reassign_to_workspace_member(self, actor, viewer_actor, member, make_lesson):
        lesson = make_lesson()

        result = reassign_lesson(actor, lesson.pk, member.pk)

        assert result.success
        lesson.refresh_from_db()
        assert lesson.teacher == member

    def test_reassign_to_outsider_rejected(self, actor, outsider, make_lesson):
        result = reassign_lesson(actor, make_lesson().pk, outsider.pk)

        assert not result.success
        assert result.error == "Teacher is not a member of this workspace."

    def test_reassign_to_unknown_user_is_missing(self, actor, make_lesson):
        result = reassign_lesson(actor, make_lesson().pk, 999999)

        assert result.not_found

    def test_bulk_delete_skips_foreign_ids(self, actor, other_workspace, make_lesson):
        first, second = make_lesson(), make_lesson(hours_ahead=96)
        foreign_customer = Customer.objects.create(workspace=other_workspace, name="Foreign")
        foreign = Lesson.objects.create(
            workspace=other_workspace, customer=foreign_customer, title="Foreign",
            start=NOW, end=NOW + timedelta(hours=1),
        )

        result = delete_lessons(actor, [second.pk, foreign.pk, first.pk, 999999])

        assert result.success
        assert result.data == {"deleted": sorted([first.pk, second.pk]), "skipped": [foreign.pk, 999999]}
        assert Lesson.objects.filter(pk=foreign.pk).exists()
        assert not Lesson.objects.filter(pk__in=[first.pk, second.pk]).exists()

    def test_bulk_delete_requires_delete_grant(self, teacher_actor, make_lesson):
        with pytest.raises(PermissionDenied):
            delete_lessons(teacher_actor, [make_lesson().pk])


@pytest.mark.django_db(transaction=True)
class TestLessonEmails:

    def test_cancellation_mails_student(self, actor, anna, make_lesson):
        lesson = make_lesson(student=anna)

        update_lesson_status(actor, lesson.pk, Lesson.Status.CANCELLED_ON_TIME, cancellation_reason="Holiday", now=NOW)

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["anna@test.com"]
        assert "Holiday" in mail.outbox[0].body

    def test_attended_sends_nothing(self, actor, anna, make_lesson):
        lesson = make_lesson(student=anna)

        update_lesson_status(actor, lesson.pk, Lesson.Status.ATTENDED, now=NOW)

        assert mail.outbox == []

    def test_reassign_mails_new_teacher(self, actor, viewer_actor, member, make_lesson):
        reassign_lesson(actor, make_lesson().pk, member.pk)

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == ["member@test.com"]


# =============================================================================
# Attendance reports
# =============================================================================

@pytest.mark.django_db
class TestAttendanceReports:

    @pytest.fixture
    def lesson(self, make_lesson, group):
        return make_lesson(group=group)

    @pytest.fixture
    def report(self, actor, lesson, anna, ben):
        result = create_attendance_report(
            actor, lesson.pk,
            students_present=[anna.pk],
            students_absent=[ben.pk],
            general_notes="Verbs",
            student_progress=[{"student_id": anna.pk, "progress_notes": "Solid", "skill_level": "intermediate"}],
        )
        assert result.success, result.error
        return result.data

    def test_create_copies_customer_and_group(self, report, customer, group, anna, ben):
        assert report.customer == customer
        assert report.group == group
        assert list(report.students_present.all()) == [anna]
        assert list(report.students_absent.all()) == [ben]
        progress = report.progress.get()
        assert (progress.student, progress.skill_level) == (anna, "intermediate")

    def test_one_report_per_lesson(self, actor, lesson, report):
        result = create_attendance_report(actor, lesson.pk)

        assert not result.success
        assert result.error == "This lesson already has an attendance report."

    def test_student_of_other_customer_rejected(self, actor, workspace, lesson):
        other = Customer.objects.create(workspace=workspace, name="Other")
        stranger = Student.objects.create(workspace=workspace, customer=other, first_name="Cem", last_name="Cakir")

        result = create_attendance_report(actor, lesson.pk, students_present=[stranger.pk])

        assert not result.success
        assert result.error == "Students must belong to the lesson's customer."

    def test_student_cannot_be_present_and_absent(self, actor, lesson, anna):
        result = create_attendance_report(actor, lesson.pk, students_present=[anna.pk], students_absent=[anna.pk])

        assert not result.success

    def test_update_keeps_progress_unless_given(self, actor, report, anna, ben):
        result = update_attendance_report(actor, report.pk, students_present=[anna.pk, ben.pk], students_absent=[])

        assert result.success
        assert set(report.students_present.values_list("pk", flat=True)) == {anna.pk, ben.pk}
        assert report.students_absent.count() == 0
        assert report.progress.count() == 1

    def test_update_replaces_progress(self, actor, report, ben):
        update_attendance_report(
            actor, report.pk, student_progress=[{"student_id": ben.pk, "progress_notes": "Catching up"}],
        )

        assert list(report.progress.values_list("student_id", "progress_notes")) == [(ben.pk, "Catching up")]

    def test_delete_keeps_lesson(self, actor, report, lesson):
        assert delete_attendance_report(actor, report.pk).success

        assert not AttendanceReport.objects.filter(pk=report.pk).exists()
        assert Lesson.objects.filter(pk=lesson.pk).exists()

    def test_deleting_lesson_removes_report(self, actor, report, lesson):
        delete_lessons(actor, [lesson.pk])

        assert not AttendanceReport.objects.filter(pk=report.pk).exists()

    def test_other_workspace_cannot_report(self, other_actor, lesson):
        assert create_attendance_report(other_actor, lesson.pk).not_found


# =============================================================================
# API
# =============================================================================

@pytest.mark.django_db
class TestLessonAPI:

    def test_status_endpoint(self, owner_client, ws_url, make_lesson):
        lesson = make_lesson(hours_ahead=24 * 365)

        response = owner_client.post(
            ws_url(f"invoicing/lessons/{lesson.pk}/status/"), {"status": "cancelled_on_time"}, format="json",
        )

        assert response.status_code == 200
        assert response.data["status"] == "cancelled_on_time"
        assert response.data["is_billable"] is False

    def test_late_on_time_cancellation_is_400(self, member_client, ws_url, teacher_actor, make_lesson):
        lesson = make_lesson(hours_ahead=-1)

        response = member_client.post(
            ws_url(f"invoicing/lessons/{lesson.pk}/status/"), {"status": "cancelled_on_time"}, format="json",
        )

        assert response.status_code == 400

    def test_bulk_delete_endpoint(self, owner_client, ws_url, make_lesson):
        lesson = make_lesson()

        response = owner_client.post(
            ws_url("invoicing/lessons/bulk-delete/"), {"lesson_ids": [lesson.pk, 999999]}, format="json",
        )

        assert response.status_code == 200
        assert response.data == {"deleted": [lesson.pk], "skipped": [999999]}

    def test_reassign_endpoint(self, owner_client, ws_url, viewer_actor, member, make_lesson):
        lesson = make_lesson()

        response = owner_client.post(
            ws_url(f"invoicing/lessons/{lesson.pk}/reassign/"), {"teacher_id": member.pk}, format="json",
        )

        assert response.status_code == 200
        assert response.data["teacher"] == member.pk

    def test_report_list_filters(self, owner_client, ws_url, actor, customer, make_lesson):
        old = create_attendance_report(actor, make_lesson().pk).data
        AttendanceReport.objects.filter(pk=old.pk).update(report_date=aware(2025, 1, 10, 12))
        recent = create_attendance_report(actor, make_lesson(hours_ahead=96).pk).data

        response = owner_client.get(
            ws_url("invoicing/attendance-reports/"), {"customer": customer.pk, "date_from": "2025-02-01"},
        )

        assert response.status_code == 200
        assert [row["id"] for row in response.data] == [recent.pk]

    def test_report_create_endpoint(self, owner_client, ws_url, make_lesson, anna):
        lesson = make_lesson()

        response = owner_client.post(ws_url("invoicing/attendance-reports/"), {
            "lesson_id": lesson.pk,
            "students_present": [anna.pk],
            "student_progress": [{"student_id": anna.pk, "progress_notes": "Great"}],
        }, format="json")

        assert response.status_code == 201
        assert response.data["students_present"] == [anna.pk]
        assert response.data["progress"][0]["student_name"] == "Anna Adler"

    def test_report_list_rejects_bad_customer(self, owner_client, ws_url):
        response = owner_client.get(ws_url("invoicing/attendance-reports/"), {"customer": "abc"})

        assert response.status_code == 400
