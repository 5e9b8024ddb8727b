# tests/test_importers.py
"""Tests for customer file parsing and header mapping."""

import io

import pytest
from openpyxl import Workbook

from customers.importers import (
    ImportFormatError,
    detect_delimiter,
    display_name,
    field_for_header,
    map_row,
    parse_csv,
    parse_customer_file,
)


class TestHeaderMapping:

    @pytest.mark.parametrize("header,field", [
        ("Vorname", "first_name"),
        ("Nachname", "last_name"),
        ("Name", "last_name"),
        ("Firma", "company_name"),
        ("E-Mail", "email"),
        ("Straße", "street"),
        ("PLZ", "zip_code"),
        ("Postleitzahl", "zip_code"),
        ("Ort", "city"),
        ("Land", "country"),
        ("Telefon 1", "phone1"),
        ("Telefon 2", "phone2"),
        ("USt-ID", "vat_id"),
        ("Steuer Nr", "tax_number"),
        ("Kundennummer", "customer_number"),
        ("Postfach-PLZ", "po_box_zip_code"),
        ("Postfach", "po_box"),
        ("Zusatz 1", "supplement1"),
        ("﻿First Name", "first_name"),
    ])
    def test_known_headers(self, header, field):
        assert field_for_header(header) == field

    def test_unknown_header(self):
        assert field_for_header("Lieblingsfarbe") is None
        assert field_for_header("") is None


class TestCsvParsing:

    def test_semicolon_detected_from_header_line(self):
        assert detect_delimiter("Firma;Ort;Land") == ";"
        assert detect_delimiter("Firma,Ort,Land") == ","

    def test_quoted_fields_keep_delimiters(self):
        rows = parse_csv('Firma,Notiz\n"Acme, Inc.","says ""hi"""\n')
        assert rows == [{"Firma": "Acme, Inc.", "Notiz": 'says "hi"'}]

    def test_blank_lines_and_short_rows(self):
        rows = parse_csv("Firma;Ort\n\nAcme\n")
        assert rows == [{"Firma": "Acme", "Ort": ""}]

    def test_windows_1252_content(self):
        content = "Firma;Ort\nMüller KG;Köln\n".encode("cp1252")
        rows = parse_customer_file("kunden.csv", content)
        assert rows == [{"Firma": "Müller KG", "Ort": "Köln"}]

    def test_unsupported_extension(self):
        with pytest.raises(ImportFormatError):
            parse_customer_file("kunden.pdf", b"")


class TestXlsxParsing:

    def test_reads_first_sheet(self):
        workbook = Workbook()
        sheet = workbook.active
        sheet.append(["Firma", "PLZ", "Zahlungsziel"])
        sheet.append(["Acme GmbH", 10115, 30])
        sheet.append([None, None, None])
        buffer = io.BytesIO()
        workbook.save(buffer)

        rows = parse_customer_file("kunden.xlsx", buffer.getvalue())

        assert rows == [{"Firma": "Acme GmbH", "PLZ": "10115", "Zahlungsziel": "30"}]

    def test_garbage_is_format_error(self):
        with pytest.raises(ImportFormatError):
            parse_customer_file("kunden.xlsx", b"not a workbook")


class TestRowMapping:

    def test_defaults_and_display_name(self):
        fields = map_row({"Vorname": "Anna", "Nachname": "Schmidt"})

        assert fields["name"] == "Anna Schmidt"
        assert fields["payment_terms_days"] == 14

    def test_payment_terms_and_rate_parsed(self):
        fields = map_row({"Firma": "Acme", "Zahlungsziel": "30 Tage", "Stundensatz": "45,50 €"})

        assert fields["payment_terms_days"] == 30
        assert str(fields["default_hourly_rate"]) == "45.50"

    @pytest.mark.parametrize("terms", ["-5", "-5 Tage", "10000", "sofort"])
    def test_out_of_range_payment_terms_fall_back_to_default(self, terms):
        assert map_row({"Firma": "Acme", "Zahlungsziel": terms})["payment_terms_days"] == 14

    def test_zero_payment_terms_kept(self):
        assert map_row({"Firma": "Acme", "Zahlungsziel": "0"})["payment_terms_days"] == 0

    @pytest.mark.parametrize("rate", ["NaN", "Infinity", "-inf", "-10", "100000000", "1e12", "abc"])
    def test_unusable_hourly_rate_is_dropped(self, rate):
        assert "default_hourly_rate" not in map_row({"Firma": "Acme", "Stundensatz": rate})

    def test_hourly_rate_rounded_to_cents(self):
        fields = map_row({"Firma": "Acme", "Stundensatz": "99999999,994"})
        assert str(fields["default_hourly_rate"]) == "99999999.99"

    def test_explicit_mapping_overrides_and_ignores(self):
        fields = map_row(
            {"Spalte A": "Acme", "Ort": "Berlin"},
            mapping={"Spalte A": "company_name", "Ort": None},
        )

        assert fields["company_name"] == "Acme"
        assert "city" not in fields

    def test_display_name_precedence(self):
        assert display_name({"company_name": "Acme", "first_name": "Anna"}) == "Acme"
        assert display_name({"first_name": "Anna"}) == "Anna"
        assert display_name({}) == "Unnamed Customer"
