# invoicing/numbering.py
"""
Invoice number allocation and gap detection.

Automatic numbers have the form ``YY/MM/<counter>`` where the counter is
CompanySettings.next_invoice_number. German bookkeeping rules (GoBD) expect
an uninterrupted sequence, so detect_invoice_gaps() reports missing ranges.
"""
import re
from datetime import date
from typing import Iterable, Optional

from django.conf import settings as django_settings

from invoicing.models import CompanySettings, Invoice

TRAILING_NUMBER = re.compile(r"\d+$")
TRAILING_SEQUENCE = re.compile(r"/(\d+)$")


def trailing_number(invoice_number: str) -> Optional[int]:
    match = TRAILING_NUMBER.search(invoice_number or "")
    return int(match.group()) if match else None


def detect_invoice_gaps(invoice_numbers: Iterable[str]) -> list[dict]:
    """
    Find holes in the numeric sequence of invoice numbers.

    Only the trailing digit run of each number counts; numbers without one
    are ignored. Duplicates never produce a gap.

    Example:
        >>> detect_invoice_gaps(["25/01/1000", "25/01/1001", "25/02/1004"])
        [{'from': 1002, 'to': 1003}]
    """
    numbers = sorted(
        n for n in (trailing_number(value) for value in invoice_numbers) if n is not None
    )

    gaps = []
    for current, following in zip(numbers, numbers[1:]):
        if following - current > 1:
            gaps.append({"from": current + 1, "to": following - 1})
    return gaps


def format_invoice_number(invoice_date: date, sequence: int) -> str:
    return f"{invoice_date:%y}/{invoice_date:%m}/{sequence}"


def locked_company_settings(workspace) -> CompanySettings:
    """
    Return the workspace's settings row locked for update, creating the
    default row (counter at DEFAULT_INVOICE_START_NUMBER) when missing.

    Must run inside a transaction.
    """
    CompanySettings.objects.get_or_create(
        workspace=workspace,
        defaults={"next_invoice_number": django_settings.DEFAULT_INVOICE_START_NUMBER},
    )
    return CompanySettings.objects.select_for_update().get(workspace=workspace)


def allocate_invoice_number(workspace, invoice_date: date) -> str:
    """
    Hand out the next automatic number and advance the counter.

    Numbers already taken in the workspace (entered manually for another
    month, say) are skipped.
    """
    company = locked_company_settings(workspace)
    taken = Invoice.objects.filter(workspace=workspace)

    sequence = company.next_invoice_number
    invoice_number = format_invoice_number(invoice_date, sequence)
    while taken.filter(invoice_number=invoice_number).exists():
        sequence += 1
        invoice_number = format_invoice_number(invoice_date, sequence)

    company.next_invoice_number = sequence + 1
    company.save(update_fields=["next_invoice_number", "updated_at"])
    return invoice_number


def register_manual_number(workspace, invoice_number: str) -> None:
    """
    Keep the counter ahead of manually entered numbers.

    A manual number ending in ``/<digits>`` at or above the counter moves
    the counter to that number + 1. Default settings are created on the way
    when the workspace has none yet.
    """
    match = TRAILING_SEQUENCE.search(invoice_number)
    if not match:
        return

    company = locked_company_settings(workspace)
    sequence = int(match.group(1))
    if sequence >= company.next_invoice_number:
        company.next_invoice_number = sequence + 1
        company.save(update_fields=["next_invoice_number", "updated_at"])
