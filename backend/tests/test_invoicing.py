# tests/test_invoicing.py
"""
Tests for invoicing.

Tests cover:
- Totals, automatic and manual invoice numbers, gap detection
- Draft-only edits, status stamps, audit trail, archive
- Monthly generation from lessons
- DATEV / Excel exports
- API endpoints
"""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from django.core.exceptions import PermissionDenied
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone

from customers.models import Customer, StudentGroup
from invoicing.commands import (
    archive_invoice,
    calculate_totals,
    create_invoice,
    create_lesson,
    delete_invoice,
    generate_monthly_invoices,
    lesson_item,
    save_company_settings,
    update_invoice,
    update_invoice_status,
)
from invoicing.exports import datev_line, export_datev_csv
from invoicing.models import ArchivedInvoice, CompanySettings, Invoice, InvoiceAuditLog, Lesson
from invoicing.numbering import detect_invoice_gaps, format_invoice_number
from invoicing.tasks import previous_month, run_monthly_invoice_generation


ITEMS = [
    {"description": "Consulting", "quantity": Decimal("2"), "unit_price": Decimal("50.00"), "tax_rate": Decimal("19")},
    {"description": "Travel", "quantity": Decimal("1"), "unit_price": Decimal("10.00"), "tax_rate": Decimal("7")},
]


def aware(*args):
    return timezone.make_aware(datetime(*args))


@pytest.fixture
def customer(workspace):
    return Customer.objects.create(
        workspace=workspace, name="Acme GmbH", is_active=True, default_hourly_rate=Decimal("40.00"),
    )


@pytest.fixture
def invoice(actor, customer):
    result = create_invoice(actor, customer.pk, date(2025, 3, 5), date(2025, 3, 19), ITEMS)
    assert result.success, result.error
    return result.data


# =============================================================================
# Totals & numbering
# =============================================================================

class TestTotals:

    def test_line_and_tax_totals(self):
        totals = calculate_totals(ITEMS)

        assert totals == {
            "subtotal": Decimal("110.00"),
            "tax_total": Decimal("19.70"),
            "total": Decimal("129.70"),
        }

    def test_empty_invoice_is_zero(self):
        assert calculate_totals([])["total"] == Decimal("0.00")


class TestGapDetection:

    def test_reports_missing_range(self):
        assert detect_invoice_gaps(["1001", "1002", "1004", "1005"]) == [{"from": 1003, "to": 1003}]

    def test_uses_trailing_digits_only(self):
        numbers = ["25/01/1000", "25/02/1003", "RE-1001", "manual"]
        assert detect_invoice_gaps(numbers) == [{"from": 1002, "to": 1002}]

    def test_empty_and_duplicates(self):
        assert detect_invoice_gaps([]) == []
        assert detect_invoice_gaps(["1000", "1000", "1001"]) == []

    def test_number_format(self):
        assert format_invoice_number(date(2025, 3, 5), 1000) == "25/03/1000"


@pytest.mark.django_db
class TestNumbering:

    def test_auto_number_starts_at_default_counter(self, invoice, workspace):
        assert invoice.invoice_number == "25/03/1000"
        assert CompanySettings.objects.get(workspace=workspace).next_invoice_number == 1001

    def test_counter_increments(self, actor, customer, invoice):
        second = create_invoice(actor, customer.pk, date(2025, 4, 1), date(2025, 4, 15), ITEMS).data
        assert second.invoice_number == "25/04/1001"

    def test_manual_number_bumps_counter(self, actor, customer, workspace):
        CompanySettings.objects.create(workspace=workspace, next_invoice_number=1000)

        result = create_invoice(
            actor, customer.pk, date(2025, 3, 5), date(2025, 3, 19), ITEMS,
            manual_invoice_number="25/03/1500",
        )

        assert result.success
        assert CompanySettings.objects.get(workspace=workspace).next_invoice_number == 1501

    def test_manual_number_without_sequence_keeps_counter(self, actor, customer, workspace):
        CompanySettings.objects.create(workspace=workspace, next_invoice_number=1000)

        create_invoice(actor, customer.pk, date(2025, 3, 5), date(2025, 3, 19), ITEMS, manual_invoice_number="RE-7")

        assert CompanySettings.objects.get(workspace=workspace).next_invoice_number == 1000

    def test_manual_number_before_settings_exist(self, actor, customer, workspace):
        create_invoice(
            actor, customer.pk, date(2025, 3, 5), date(2025, 3, 19), ITEMS,
            manual_invoice_number="25/03/1000",
        )

        result = create_invoice(actor, customer.pk, date(2025, 3, 20), date(2025, 4, 3), ITEMS)

        assert result.success
        assert result.data.invoice_number == "25/03/1001"
        assert CompanySettings.objects.get(workspace=workspace).next_invoice_number == 1002

    def test_auto_number_skips_taken_numbers(self, actor, customer, invoice, workspace):
        save_company_settings(actor, next_invoice_number=1000)

        result = create_invoice(actor, customer.pk, date(2025, 3, 6), date(2025, 3, 20), ITEMS)

        assert result.data.invoice_number == "25/03/1001"
        assert CompanySettings.objects.get(workspace=workspace).next_invoice_number == 1002

    def test_duplicate_manual_number_rejected(self, actor, customer, invoice):
        result = create_invoice(
            actor, customer.pk, date(2025, 3, 5), date(2025, 3, 19), ITEMS,
            manual_invoice_number=invoice.invoice_number,
        )

        assert not result.success
        assert result.error == f"Invoice number {invoice.invoice_number} already exists"

    def test_same_number_allowed_in_other_workspace(self, invoice, other_actor, other_workspace):
        other_customer = Customer.objects.create(workspace=other_workspace, name="Other")

        result = create_invoice(
            other_actor, other_customer.pk, date(2025, 3, 5), date(2025, 3, 19), ITEMS,
            manual_invoice_number=invoice.invoice_number,
        )

        assert result.success


# =============================================================================
# Invoice lifecycle
# =============================================================================

@pytest.mark.django_db
class TestInvoiceLifecycle:

    def test_create_stores_items_and_snapshot(self, invoice):
        assert invoice.customer_name == "Acme GmbH"
        assert invoice.total == Decimal("129.70")
        assert list(invoice.items.values_list("position", "total")) == [
            (0, Decimal("100.00")),
            (1, Decimal("10.00")),
        ]
        assert InvoiceAuditLog.objects.filter(invoice=invoice, action="created").exists()

    def test_customer_of_other_workspace_is_missing(self, actor, other_workspace):
        foreign = Customer.objects.create(workspace=other_workspace, name="Foreign")

        result = create_invoice(actor, foreign.pk, date(2025, 3, 5), date(2025, 3, 19), ITEMS)

        assert result.not_found

    def test_update_replaces_items(self, actor, customer, invoice):
        result = update_invoice(
            actor, invoice.pk, customer.pk, date(2025, 3, 6), date(2025, 3, 20),
            [{"description": "Workshop", "quantity": Decimal("1"), "unit_price": Decimal("200"), "tax_rate": Decimal("19")}],
        )

        assert result.success
        invoice.refresh_from_db()
        assert invoice.items.count() == 1
        assert invoice.total == Decimal("238.00")

    def test_sent_invoice_cannot_be_edited_or_deleted(self, actor, customer, invoice):
        update_invoice_status(actor, invoice.pk, Invoice.Status.SENT)

        update = update_invoice(actor, invoice.pk, customer.pk, invoice.date, invoice.due_date, ITEMS)
        delete = delete_invoice(actor, invoice.pk)

        assert not update.success
        assert update.error.startswith("Cannot edit non-draft invoices")
        assert not delete.success
        assert Invoice.objects.filter(pk=invoice.pk).exists()

    def test_status_stamps_are_set_once(self, actor, invoice):
        sent = update_invoice_status(actor, invoice.pk, Invoice.Status.SENT).data
        first_sent_at = sent.sent_at

        again = update_invoice_status(actor, invoice.pk, Invoice.Status.SENT).data
        paid = update_invoice_status(actor, invoice.pk, Invoice.Status.PAID).data

        assert first_sent_at is not None
        assert again.sent_at == first_sent_at
        assert paid.paid_at is not None
        actions = list(InvoiceAuditLog.objects.filter(invoice=invoice).values_list("action", flat=True))
        assert "status_change_to_sent" in actions
        assert "status_change_to_paid" in actions

    def test_delete_draft_releases_lessons(self, actor, customer, invoice):
        lesson = Lesson.objects.create(
            workspace=actor.workspace, customer=customer, title="Lesson",
            start=aware(2025, 3, 1, 10), end=aware(2025, 3, 1, 11), invoice=invoice,
        )

        result = delete_invoice(actor, invoice.pk)

        assert result.success
        assert result.data == {"items": 2, "lessons_unlinked": 1}
        lesson.refresh_from_db()
        assert lesson.invoice is None

    def test_viewer_cannot_create(self, viewer_actor, customer):
        with pytest.raises(PermissionDenied):
            create_invoice(viewer_actor, customer.pk, date(2025, 3, 5), date(2025, 3, 19), ITEMS)


@pytest.mark.django_db
class TestArchive:

    def test_archive_once(self, actor, invoice, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path

        first = archive_invoice(actor, invoice.pk, SimpleUploadedFile("invoice.pdf", b"%PDF-1.4"))
        second = archive_invoice(actor, invoice.pk, SimpleUploadedFile("invoice.pdf", b"%PDF-1.4"))

        assert first.success
        assert first.data.retention_until > timezone.now() + timedelta(days=365 * 9)
        invoice.refresh_from_db()
        assert invoice.status == Invoice.Status.ARCHIVED
        assert not second.success
        assert second.error == "Invoice is already archived"
        assert ArchivedInvoice.objects.filter(invoice=invoice).count() == 1


@pytest.mark.django_db
class TestCompanySettings:

    def test_requires_shared_edit_grant(self, make_member_actor):
        member_actor = make_member_actor(add=True, delete=True)

        with pytest.raises(PermissionDenied):
            save_company_settings(member_actor, company_name="Mine")

    def test_owner_saves_settings(self, actor, workspace):
        result = save_company_settings(actor, company_name="Lessons & More", invoice_prefix="RE-")

        assert result.success
        company = CompanySettings.objects.get(workspace=workspace)
        assert company.company_name == "Lessons & More"
        assert company.invoice_prefix == "RE-"


# =============================================================================
# Lessons & monthly generation
# =============================================================================

@pytest.mark.django_db
class TestLessons:

    def test_end_must_follow_start(self, actor, customer):
        result = create_lesson(actor, customer.pk, "Lesson", aware(2025, 3, 1, 11), aware(2025, 3, 1, 10))
        assert not result.success

    def test_group_of_other_customer_rejected(self, actor, customer, workspace):
        other = Customer.objects.create(workspace=workspace, name="Other")
        group = StudentGroup.objects.create(workspace=workspace, customer=other, name="Group")

        result = create_lesson(
            actor, customer.pk, "Lesson", aware(2025, 3, 1, 10), aware(2025, 3, 1, 11), group_id=group.pk,
        )

        assert not result.success
        assert result.error == "Group belongs to a different customer."

    def test_hourly_item(self, customer):
        lesson = Lesson(customer=customer, title="", start=aware(2025, 3, 1, 10), end=aware(2025, 3, 1, 11, 30))

        item = lesson_item(lesson, Decimal("40"), Decimal("19"))

        assert item["description"] == "Lesson"
        assert item["quantity"] == Decimal("1.50")
        assert item["unit"] == "Hour"
        assert item["unit_price"] == Decimal("40.00")
        assert (item["start_time"], item["end_time"]) == ("10:00", "11:30")

    def test_fixed_rate_item(self, customer):
        lesson = Lesson(
            customer=customer, title="Piano", rate=Decimal("25"),
            start=aware(2025, 3, 1, 10), end=aware(2025, 3, 1, 11, 30),
        )

        item = lesson_item(lesson, Decimal("40"), Decimal("19"))

        assert (item["quantity"], item["unit"], item["unit_price"]) == (Decimal("1"), "Lesson", Decimal("25.00"))


@pytest.mark.django_db
class TestMonthlyGeneration:

    @pytest.fixture
    def lessons(self, workspace, customer):
        return [
            Lesson.objects.create(
                workspace=workspace, customer=customer, title="Hourly",
                start=aware(2025, 3, 10, 14), end=aware(2025, 3, 10, 15, 30),
            ),
            Lesson.objects.create(
                workspace=workspace, customer=customer, title="Fixed", rate=Decimal("25"),
                start=aware(2025, 3, 12, 14), end=aware(2025, 3, 12, 15),
            ),
            Lesson.objects.create(
                workspace=workspace, customer=customer, title="Not billable", is_billable=False,
                start=aware(2025, 3, 14, 14), end=aware(2025, 3, 14, 15),
            ),
            Lesson.objects.create(
                workspace=workspace, customer=customer, title="April",
                start=aware(2025, 4, 1, 14), end=aware(2025, 4, 1, 15),
            ),
        ]

    def test_one_draft_per_customer(self, actor, lessons):
        result = generate_monthly_invoices(actor, 2025, 3)

        assert result.success
        assert len(result.data) == 1
        invoice = Invoice.objects.get(pk=result.data[0])
        assert invoice.status == Invoice.Status.DRAFT
        assert invoice.subtotal == Decimal("85.00")
        assert invoice.tax_total == Decimal("16.15")
        assert invoice.total == Decimal("101.15")
        assert invoice.date == timezone.localdate()
        assert invoice.due_date == timezone.localdate() + timedelta(days=14)
        assert set(invoice.lessons.values_list("title", flat=True)) == {"Hourly", "Fixed"}

    def test_second_run_creates_nothing(self, actor, lessons):
        generate_monthly_invoices(actor, 2025, 3)

        result = generate_monthly_invoices(actor, 2025, 3)

        assert result.success
        assert result.data == []

    def test_vat_exempt_customer(self, actor, customer, lessons):
        customer.is_vat_exempt = True
        customer.save()

        invoice = Invoice.objects.get(pk=generate_monthly_invoices(actor, 2025, 3).data[0])

        assert invoice.tax_total == Decimal("0.00")
        assert invoice.total == Decimal("85.00")

    def test_invalid_month(self, actor):
        assert not generate_monthly_invoices(actor, 2025, 13).success

    def test_task_processes_every_workspace(self, actor, lessons, other_workspace):
        summary = run_monthly_invoice_generation(year=2025, month=3)

        assert summary["total"] == 1
        assert list(summary["invoices"]) == [actor.workspace.pk]
        assert summary["failed_workspaces"] == []

    def test_previous_month_wraps_year(self):
        assert previous_month(date(2025, 1, 15)) == (2024, 12)
        assert previous_month(date(2025, 7, 1)) == (2025, 6)


# =============================================================================
# Exports
# =============================================================================

class TestDatevExport:

    def test_line_format(self):
        invoice = Invoice(
            invoice_number="25/03/1000", date=date(2025, 3, 5),
            total=Decimal("1234.5"), customer_name="Müller",
        )

        assert datev_line(invoice) == "1234,50;S;8400;10000;05032025;25/03/1000;Müller"

    def test_latin1_and_crlf(self):
        invoice = Invoice(
            invoice_number="1", date=date(2025, 3, 5), total=Decimal("1"), customer_name="Müller",
        )

        content = export_datev_csv([invoice, invoice])

        assert content.count(b"\r\n") == 2
        assert b"M\xfcller" in content


# =============================================================================
# API
# =============================================================================

@pytest.mark.django_db
class TestInvoiceAPI:

    def test_create_invoice(self, owner_client, ws_url, customer):
        response = owner_client.post(ws_url("invoicing/invoices/"), {
            "customer_id": customer.pk,
            "date": "2025-03-05",
            "due_date": "2025-03-19",
            "items": [{"description": "Consulting", "quantity": "2", "unit_price": "50.00", "tax_rate": "19"}],
        }, format="json")

        assert response.status_code == 201
        assert response.data["invoice_number"] == "25/03/1000"
        assert Decimal(response.data["total"]) == Decimal("119.00")
        assert len(response.data["items"]) == 1

    def test_gaps_endpoint(self, owner_client, ws_url, workspace, customer):
        for number in ("25/01/1001", "25/01/1002", "25/01/1004"):
            Invoice.objects.create(
                workspace=workspace, customer=customer, invoice_number=number,
                date=date(2025, 1, 1), due_date=date(2025, 1, 15),
            )

        response = owner_client.get(ws_url("invoicing/invoices/gaps/"))

        assert response.status_code == 200
        assert response.data == [{"from": 1003, "to": 1003}]

    def test_datev_download(self, owner_client, ws_url, invoice):
        response = owner_client.post(
            ws_url("invoicing/invoices/export/datev/"), {"invoice_ids": [invoice.pk]}, format="json",
        )

        assert response.status_code == 200
        assert response["Content-Type"] == "text/csv; charset=iso-8859-1"
        assert response.content.startswith(b"129,70;S;8400;10000;05032025;25/03/1000;")

    def test_excel_download(self, owner_client, ws_url, invoice):
        response = owner_client.get(ws_url("invoicing/invoices/export/xlsx/"))

        assert response.status_code == 200
        assert response.content[:2] == b"PK"

    def test_archive_status_endpoint(self, owner_client, ws_url, invoice):
        response = owner_client.get(ws_url(f"invoicing/invoices/{invoice.pk}/archive/"))

        assert response.status_code == 200
        assert response.data == {"archived": False}

    def test_delete_sent_invoice_is_400(self, owner_client, ws_url, actor, invoice):
        update_invoice_status(actor, invoice.pk, Invoice.Status.SENT)

        response = owner_client.delete(ws_url(f"invoicing/invoices/{invoice.pk}/"))

        assert response.status_code == 400

    def test_generate_monthly_endpoint(self, owner_client, ws_url, workspace, customer):
        Lesson.objects.create(
            workspace=workspace, customer=customer, title="Lesson",
            start=aware(2025, 3, 10, 14), end=aware(2025, 3, 10, 15),
        )

        response = owner_client.post(
            ws_url("invoicing/invoices/generate-monthly/"), {"year": 2025, "month": 3}, format="json",
        )

        assert response.status_code == 201
        assert response.data["count"] == 1

    def test_next_number_preview(self, owner_client, ws_url, workspace):
        CompanySettings.objects.create(workspace=workspace, invoice_prefix="RE-", next_invoice_number=1042)

        response = owner_client.get(ws_url("invoicing/settings/next-number/"))

        assert response.data == {"prefix": "RE-", "number": 1042, "formatted": "RE-1042"}

    def test_lesson_list_filters(self, owner_client, ws_url, workspace, customer):
        Lesson.objects.create(
            workspace=workspace, customer=customer, title="March",
            start=aware(2025, 3, 10, 14), end=aware(2025, 3, 10, 15),
        )
        Lesson.objects.create(
            workspace=workspace, customer=customer, title="April",
            start=aware(2025, 4, 10, 14), end=aware(2025, 4, 10, 15),
        )

        response = owner_client.get(
            ws_url("invoicing/lessons/"), {"year": 2025, "month": 3, "customer": customer.pk, "uninvoiced": "true"},
        )

        assert response.status_code == 200
        assert [row["title"] for row in response.data] == ["March"]

    @pytest.mark.parametrize("params", [
        {"customer": "abc"},
        {"year": 2025, "month": 13},
        {"year": 2025},
        {"status": "postponed"},
    ])
    def test_lesson_list_rejects_bad_filters(self, owner_client, ws_url, params):
        response = owner_client.get(ws_url("invoicing/lessons/"), params)

        assert response.status_code == 400

    def test_invoice_list_rejects_unknown_status(self, owner_client, ws_url, invoice):
        response = owner_client.get(ws_url("invoicing/invoices/"), {"status": "lost"})

        assert response.status_code == 400

    def test_invoice_list_blank_status_lists_all(self, owner_client, ws_url, invoice):
        response = owner_client.get(ws_url("invoicing/invoices/"), {"status": ""})

        assert response.status_code == 200
        assert len(response.data) == 1
