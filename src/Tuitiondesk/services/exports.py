import logging
from pathlib import Path

import openpyxl
import pandas as pd
from openpyxl.styles import Font

from Tuitiondesk.core.utils import format_currency, format_hours
from Tuitiondesk.data.repos.settings_repo import get_currency_label

logger = logging.getLogger(__name__)

BREAKDOWN_HEADERS = ["Subject", "Sessions", "Duration", "Rate", "Subtotal"]
CONSOLIDATED_HEADERS = ["Student", "Teacher"] + BREAKDOWN_HEADERS


def _autosize(ws):
    for column_cells in ws.columns:
        max_length = 0
        column = column_cells[0].column_letter
        for cell in column_cells:
            if cell.value is not None:
                max_length = max(max_length, len(str(cell.value)))
        ws.column_dimensions[column].width = max_length + 2


def export_invoice_to_excel(invoice, path, student_name=None):
    """Write one invoice as a single sheet: header block, breakdown, total.

    Returns the path written.
    """
    path = Path(path)
    label = get_currency_label()
    details = invoice.get("details") or {}
    breakdown = details.get("breakdown") or []
    consolidated = invoice.get("student_id") == "CONSOLIDATED"

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Invoice"

    bold = Font(bold=True)
    header_rows = [
        ("Invoice", invoice.get("id")),
        ("Student", invoice.get("description") if consolidated else (student_name or invoice.get("student_id"))),
        ("Period", f"{int(invoice['month']):02d}/{invoice['year']}"),
        ("Status", invoice.get("status")),
        ("Generated", invoice.get("generated_at")),
    ]
    for row, (title, value) in enumerate(header_rows, start=1):
        ws.cell(row=row, column=1, value=title).font = bold
        ws.cell(row=row, column=2, value=value)

    headers = CONSOLIDATED_HEADERS if consolidated else BREAKDOWN_HEADERS
    table_row = len(header_rows) + 2
    for col, header in enumerate(headers, start=1):
        ws.cell(row=table_row, column=col, value=header).font = bold

    row = table_row
    for row, item in enumerate(breakdown, start=table_row + 1):
        values = [
            item.get("class_name"),
            item.get("session_count"),
            format_hours(item.get("duration_hours")),
            format_currency(item.get("rate"), label),
            format_currency(item.get("subtotal"), label),
        ]
        if consolidated:
            values = [item.get("student_name"), item.get("teacher_name")] + values
        for col, value in enumerate(values, start=1):
            ws.cell(row=row, column=col, value=value)

    total_row = row + 2
    ws.cell(row=total_row, column=len(headers) - 1, value="Grand Total").font = bold
    ws.cell(row=total_row, column=len(headers),
            value=format_currency(details.get("grand_total", invoice.get("amount")), label)).font = bold

    _autosize(ws)
    path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(path)
    logger.info("invoice %s exported to %s", invoice.get("id"), path)
    return path


def export_invoices_summary(invoices, path, student_names=None):
    """One row per invoice; returns the number of rows written."""
    path = Path(path)
    student_names = student_names or {}
    label = get_currency_label()

    rows = []
    for inv in invoices:
        if inv.get("student_id") == "CONSOLIDATED":
            who = inv.get("description") or "Consolidated"
        else:
            who = student_names.get(inv.get("student_id"), inv.get("student_id"))
        rows.append({
            "Invoice": inv.get("id"),
            "Student": who,
            "Month": inv.get("month"),
            "Year": inv.get("year"),
            f"Amount ({label})": round(float(inv.get("amount") or 0), 2),
            "Status": inv.get("status"),
            "Generated": inv.get("generated_at"),
        })

    df = pd.DataFrame(rows, columns=["Invoice", "Student", "Month", "Year", f"Amount ({label})",
                                     "Status", "Generated"])
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_excel(path, index=False, sheet_name="Invoices")
    logger.info("%d invoice(s) exported to %s", len(df), path)
    return len(df)
