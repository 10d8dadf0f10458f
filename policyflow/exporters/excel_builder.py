# policyflow/exporters/excel_builder.py

from __future__ import annotations

from io import BytesIO
from typing import Any, Dict

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

STATUS_FILLS = {
    "compliant": "DCFCE7",
    "needs-review": "FEF3C7",
    "non-compliant": "FEE2E2",
}


def _autosize_columns(ws) -> None:
    for col in ws.columns:
        max_length = 0
        column = col[0].column_letter
        for cell in col:
            if cell.value is not None and len(str(cell.value)) > max_length:
                max_length = len(str(cell.value))
        ws.column_dimensions[column].width = min(max_length + 2, 60)


def build_xlsx_from_compliance(draft: Dict[str, Any]) -> bytes:
    """Compliance matrix for a policy draft: one row per compliance item plus a summary sheet."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Compliance"

    headers = ["Regulation", "Requirement", "Jurisdiction", "Status", "Risk Level"]
    ws.append(headers)
    header_fill = PatternFill(start_color="1E3A8A", end_color="1E3A8A", fill_type="solid")
    for cell in ws[1]:
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")

    counts: Dict[str, int] = {status: 0 for status in STATUS_FILLS}
    for item in draft.get("compliance") or []:
        if not isinstance(item, dict):
            continue
        status = str(item.get("status") or "")
        ws.append(
            [
                item.get("regulation", ""),
                item.get("requirement", ""),
                item.get("jurisdiction", ""),
                status,
                item.get("risk_level", ""),
            ]
        )
        if status in STATUS_FILLS:
            counts[status] += 1
            color = STATUS_FILLS[status]
            ws.cell(row=ws.max_row, column=4).fill = PatternFill(start_color=color, end_color=color, fill_type="solid")
    _autosize_columns(ws)

    summary = wb.create_sheet("Summary")
    metadata = draft.get("metadata") if isinstance(draft.get("metadata"), dict) else {}
    summary.append(["Policy", draft.get("title", "")])
    summary.append(["Type", draft.get("type", "")])
    summary.append(["Effective Date", metadata.get("effective_date", "")])
    summary.append(["Departments", metadata.get("departments", "")])
    summary.append([])
    summary.append(["Status", "Count"])
    for status, count in counts.items():
        summary.append([status, count])
    for row in summary.iter_rows(min_row=1, max_row=4, max_col=1):
        for cell in row:
            cell.font = Font(bold=True)
    _autosize_columns(summary)

    bio = BytesIO()
    wb.save(bio)
    bio.seek(0)
    return bio.read()
