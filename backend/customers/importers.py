# customers/importers.py
"""
Parsing of customer import files.

Supports the CSV exports German accounting tools produce (semicolon or
comma separated, UTF-8 or Windows-1252) and Excel workbooks (.xlsx).
Column headers are mapped onto Customer fields by keyword.

Usage:
    rows = parse_customer_file("kunden.csv", content)
    for row in rows:
        fields = map_row(row)
"""
import csv
import io
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from openpyxl import load_workbook

DEFAULT_PAYMENT_TERMS_DAYS = 14
MAX_PAYMENT_TERMS_DAYS = 365
# Customer.default_hourly_rate holds 10 digits, 2 of them decimals.
MAX_RATE = Decimal("100000000")
CENT = Decimal("0.01")
UNNAMED_CUSTOMER = "Unnamed Customer"


class ImportFormatError(ValueError):
    """Raised when an uploaded file cannot be read as a customer list."""


# Ordered rules: first rule whose keywords match (and whose exclusions do
# not) decides the field. PO box rules run before the plain address rules
# so that "Postfach-PLZ" does not land in zip_code.
HEADER_RULES = (
    (("postfach-postleitzahl", "postfach-plz"), (), "po_box_zip_code"),
    (("postfach-ort",), (), "po_box_city"),
    (("postfach-bundesland",), (), "po_box_state"),
    (("postfach-land",), (), "po_box_country"),
    (("postfach",), (), "po_box"),
    (("vorname", "first name"), (), "first_name"),
    (("firma", "company"), (), "company_name"),
    (("kundennummer", "customer number"), (), "customer_number"),
    (("nachname", "last name"), (), "last_name"),
    (("anrede", "salutation"), (), "salutation"),
    (("titel", "title"), (), "title"),
    (("e-mail", "email"), (), "email"),
    (("straße", "strasse", "street"), (), "street"),
    (("postleitzahl", "plz", "zip"), (), "zip_code"),
    (("bundesland", "state"), (), "state"),
    (("ort", "city"), (), "city"),
    (("land", "country"), (), "country"),
    (("telefon 1", "tel 1", "phone 1", "telefon"), ("telefon 2",), "phone1"),
    (("telefon 2", "tel 2", "phone 2"), (), "phone2"),
    (("umsatzsteuer-id", "ust-id", "ust-idnr", "vat id"), (), "vat_id"),
    (("steuer nr", "steuernr", "steuernummer", "tax number"), (), "tax_number"),
    (("notiz", "notes"), (), "notes"),
    (("zusatz 1",), (), "supplement1"),
    (("zusatz 2",), (), "supplement2"),
    (("ansprechpartner", "contact"), (), "contact_person"),
    (("zahlungsziel", "payment terms"), (), "payment_terms_days"),
    (("stundensatz", "hourly rate"), (), "default_hourly_rate"),
    (("name",), (), "last_name"),
)


def normalize_header(header: str) -> str:
    return " ".join((header or "").replace("\ufeff", "").strip().lower().split())


def field_for_header(header: str) -> Optional[str]:
    """Return the Customer field a column header maps to, or None."""
    normalized = normalize_header(header)
    if not normalized:
        return None
    for keywords, exclusions, field in HEADER_RULES:
        if any(word in normalized for word in exclusions):
            continue
        if any(word in normalized for word in keywords):
            return field
    return None


def detect_delimiter(header_line: str) -> str:
    """Semicolon wins when the header line has more semicolons than commas."""
    return ";" if header_line.count(";") > header_line.count(",") else ","


def decode_text(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("cp1252")


def parse_csv(text: str) -> list[dict]:
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return []

    reader = csv.DictReader(io.StringIO("\n".join(lines)), delimiter=detect_delimiter(lines[0]))
    rows = []
    for raw in reader:
        # Short rows yield None values, long rows a None key.
        rows.append({k: (v or "") for k, v in raw.items() if k is not None})
    return rows


def parse_xlsx(content: bytes) -> list[dict]:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise ImportFormatError(f"Could not read Excel file: {e}") from e

    sheet = workbook.active
    rows_iter = sheet.iter_rows(values_only=True)
    headers = next(rows_iter, None)
    if not headers:
        workbook.close()
        return []

    headers = [str(h) if h is not None else "" for h in headers]
    rows = []
    for values in rows_iter:
        if values is None or all(v is None or str(v).strip() == "" for v in values):
            continue
        rows.append({
            header: ("" if value is None else str(value))
            for header, value in zip(headers, values)
        })
    workbook.close()
    return rows


def parse_customer_file(file_name: str, content: bytes) -> list[dict]:
    """Parse an uploaded file into raw rows keyed by the original headers."""
    name = (file_name or "").lower()
    if name.endswith((".xlsx", ".xlsm")):
        return parse_xlsx(content)
    if name.endswith((".csv", ".txt")) or not name:
        return parse_csv(decode_text(content))
    raise ImportFormatError("Unsupported file type. Upload a .csv or .xlsx file.")


def display_name(fields: dict) -> str:
    """Company name, else "first last", else a placeholder."""
    company = (fields.get("company_name") or "").strip()
    if company:
        return company
    person = f"{fields.get('first_name') or ''} {fields.get('last_name') or ''}".strip()
    return person or UNNAMED_CUSTOMER


def _parse_int(value: str, default: int) -> int:
    """Leading integer of ``value``; ``default`` when missing or outside 0..MAX_PAYMENT_TERMS_DAYS."""
    try:
        number = int(str(value).strip().split()[0])
    except (ValueError, IndexError):
        return default
    if not 0 <= number <= MAX_PAYMENT_TERMS_DAYS:
        return default
    return number


def _parse_decimal(value: str) -> Optional[Decimal]:
    """German or English money amount rounded to cents; None unless 0 <= amount < MAX_RATE."""
    cleaned = str(value).replace("€", "").strip()
    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        return None
    if not amount.is_finite() or not 0 <= amount < MAX_RATE:
        return None
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def map_row(raw: dict, mapping: Optional[dict] = None) -> dict:
    """
    Map one raw row onto Customer fields.

    Args:
        raw: Row keyed by original column headers
        mapping: Optional explicit {header: field} overrides; a header mapped
            to "" or None is ignored

    Returns:
        Dict of Customer field values including a computed ``name``
    """
    mapping = mapping or {}
    fields = {}
    for header, value in raw.items():
        field = mapping[header] if header in mapping else field_for_header(header)
        value = (value or "").strip()
        if not field or not value or field in fields:
            continue
        fields[field] = value

    fields["payment_terms_days"] = _parse_int(
        fields.get("payment_terms_days", ""), DEFAULT_PAYMENT_TERMS_DAYS
    )
    if "default_hourly_rate" in fields:
        rate = _parse_decimal(fields["default_hourly_rate"])
        if rate is None:
            fields.pop("default_hourly_rate")
        else:
            fields["default_hourly_rate"] = rate

    fields["name"] = display_name(fields)
    return fields
