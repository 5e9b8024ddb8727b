"""
Export utilities for invoices.
Supports the DATEV booking CSV and an Excel (.xlsx) invoice list.
"""
import io
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from django.http import HttpResponse
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter


class ExportFormat:
    DATEV = 'csv'
    EXCEL = 'xlsx'

    CONTENT_TYPES = {
        DATEV: 'text/csv; charset=iso-8859-1',
        EXCEL: 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    }


# Revenue account and debtor collective account of the SKR03 chart.
DATEV_REVENUE_ACCOUNT = '8400'
DATEV_DEBTOR_ACCOUNT = '10000'

INVOICE_COLUMNS = [
    {'key': 'invoice_number', 'header': 'Invoice No.', 'width': 16},
    {'key': 'date', 'header': 'Date', 'width': 12},
    {'key': 'due_date', 'header': 'Due', 'width': 12},
    {'key': 'customer_name', 'header': 'Customer', 'width': 30},
    {'key': 'status', 'header': 'Status', 'width': 12},
    {'key': 'subtotal', 'header': 'Net', 'width': 14, 'numeric': True},
    {'key': 'tax_total', 'header': 'Tax', 'width': 14, 'numeric': True},
    {'key': 'total', 'header': 'Gross', 'width': 14, 'numeric': True},
]


def format_value(value: Any) -> Any:
    """Format a value for a spreadsheet cell."""
    if value is None:
        return ''
    if isinstance(value, datetime):
        return value.strftime('%Y-%m-%d %H:%M:%S')
    if isinstance(value, date):
        return value.strftime('%Y-%m-%d')
    if isinstance(value, Decimal):
        return float(value)
    return value


def german_amount(value: Decimal) -> str:
    """1234.5 -> '1234,50'"""
    return f"{Decimal(value):.2f}".replace('.', ',')


def datev_line(invoice) -> str:
    """Umsatz;S/H;Konto;Gegenkonto;Datum;Belegfeld1;Buchungstext"""
    return ';'.join([
        german_amount(invoice.total),
        'S',
        DATEV_REVENUE_ACCOUNT,
        DATEV_DEBTOR_ACCOUNT,
        invoice.date.strftime('%d%m%Y'),
        invoice.invoice_number,
        invoice.customer_name,
    ])


def export_datev_csv(invoices) -> bytes:
    """
    Build the DATEV booking lines for the given invoices.

    One CRLF terminated line per invoice, encoded ISO-8859-1. Characters
    outside Latin-1 are replaced.
    """
    content = ''.join(f"{datev_line(invoice)}\r\n" for invoice in invoices)
    return content.encode('latin-1', errors='replace')


def export_invoices_to_excel(invoices, title: str = 'Invoices') -> bytes:
    """
    Export an invoice list to Excel format.

    Returns:
        Bytes of the Excel file
    """
    wb = Workbook()
    ws = wb.active
    ws.title = 'Invoices'

    header_font = Font(bold=True, color='FFFFFF')
    header_fill = PatternFill(start_color='4472C4', end_color='4472C4', fill_type='solid')
    thin_border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(INVOICE_COLUMNS))
    title_cell = ws.cell(row=1, column=1, value=title)
    title_cell.font = Font(bold=True, size=14)
    title_cell.alignment = Alignment(horizontal='center')

    header_row = 3
    for col_idx, col in enumerate(INVOICE_COLUMNS, 1):
        cell = ws.cell(row=header_row, column=col_idx, value=col['header'])
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal='center', vertical='center')
        cell.border = thin_border
        ws.column_dimensions[get_column_letter(col_idx)].width = col['width']

    row_idx = header_row
    for row_idx, invoice in enumerate(invoices, header_row + 1):
        for col_idx, col in enumerate(INVOICE_COLUMNS, 1):
            cell = ws.cell(row=row_idx, column=col_idx, value=format_value(getattr(invoice, col['key'])))
            cell.border = thin_border
            if col.get('numeric'):
                cell.number_format = '#,##0.00'
                cell.alignment = Alignment(horizontal='right')

    # Totals row
    if row_idx > header_row:
        totals_row = row_idx + 1
        ws.cell(row=totals_row, column=1, value='Total').font = Font(bold=True)
        for col_idx, col in enumerate(INVOICE_COLUMNS, 1):
            if col.get('numeric'):
                letter = get_column_letter(col_idx)
                cell = ws.cell(
                    row=totals_row,
                    column=col_idx,
                    value=f"=SUM({letter}{header_row + 1}:{letter}{row_idx})",
                )
                cell.font = Font(bold=True)
                cell.number_format = '#,##0.00'

    ws.freeze_panes = ws.cell(row=header_row + 1, column=1)

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def create_export_response(content: bytes, format: str, filename: str) -> HttpResponse:
    """
    Create an HTTP response with the exported file.

    Args:
        content: File bytes from export_datev_csv / export_invoices_to_excel
        format: Export format (csv, xlsx)
        filename: Base filename (without extension)
    """
    response = HttpResponse(content, content_type=ExportFormat.CONTENT_TYPES[format])
    response['Content-Disposition'] = f'attachment; filename="{filename}.{format}"'
    return response
