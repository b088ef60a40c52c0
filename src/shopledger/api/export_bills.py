"""Export endpoint for bills (CSV/Excel)."""

import csv
import io
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.api.auth import get_current_user
from shopledger.api.bill_helpers import apply_bill_filters, bill_filters
from shopledger.core.db import get_db
from shopledger.core.logging import get_logger
from shopledger.models import Bill, User
from shopledger.utils.datetime import now_utc

logger = get_logger(__name__)

router = APIRouter(prefix="/bills", tags=["export"])

EXPORT_HEADERS = [
    "Bill Number",
    "Date",
    "Type",
    "Party Type",
    "Party",
    "Total",
    "Paid",
    "Due",
    "Payment Method",
    "Status",
    "Edited",
    "Notes",
]

# Total, Paid, Due
CURRENCY_COLUMNS = {6, 7, 8}


def _format_amount(value: Decimal | None) -> str:
    if value is None:
        return ""
    return f"{value:.2f}"


def _bill_to_row(bill: Bill, format_type: Literal["csv", "excel"]) -> list:
    """Convert a Bill to a row of data.

    CSV gets fixed two-decimal strings, Excel gets floats so cells stay numeric.
    """
    if format_type == "csv":
        format_num = _format_amount
    else:

        def format_num(x):
            return float(x) if x is not None else None

    return [
        bill.bill_number,
        bill.created_at.strftime("%Y-%m-%d %H:%M"),
        bill.bill_type,
        bill.entity_type,
        bill.entity_name,
        format_num(bill.total_amount),
        format_num(bill.paid_amount),
        format_num(bill.due_amount),
        bill.payment_method,
        bill.status,
        "Yes" if bill.is_edited else "No",
        bill.notes or "",
    ]


def _create_csv_export(bills: list[Bill]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(EXPORT_HEADERS)
    for bill in bills:
        writer.writerow(_bill_to_row(bill, format_type="csv"))

    return output.getvalue()


def _create_excel_export(bills: list[Bill]) -> bytes:
    """Generate a styled Excel workbook from bills."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Bills"

    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")

    for col_idx, header in enumerate(EXPORT_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row_idx, bill in enumerate(bills, start=2):
        for col_idx, value in enumerate(_bill_to_row(bill, format_type="excel"), start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if col_idx in CURRENCY_COLUMNS and isinstance(value, (int, float)):
                cell.number_format = "#,##0.00"

    # Column widths from header and the first 100 rows
    for col_idx, header in enumerate(EXPORT_HEADERS, start=1):
        max_length = len(header)
        for row_idx in range(2, min(102, len(bills) + 2)):
            cell_value = ws.cell(row=row_idx, column=col_idx).value
            if cell_value:
                max_length = max(max_length, len(str(cell_value)))
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max_length + 2, 50)

    ws.freeze_panes = "A2"

    output = io.BytesIO()
    wb.save(output)
    output.seek(0)
    return output.getvalue()


@router.get("/export")
async def export_bills(
    format: Literal["csv", "xlsx"] = Query("csv", description="Export format: csv or xlsx"),
    filters: dict = Depends(bill_filters),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Export the filtered bill list to CSV or Excel, newest first.

    Accepts the same filters as ``GET /bills``.
    """
    stmt = apply_bill_filters(select(Bill), current_user.id, **filters)
    stmt = stmt.order_by(Bill.created_at.desc())
    result = await db.execute(stmt)
    bills = list(result.scalars().all())

    logger.info(
        "export.bills",
        format=format,
        count=len(bills),
        shopkeeper_id=str(current_user.id),
    )

    now_str = now_utc().strftime("%Y-%m-%d_%H-%M-%S")
    if format == "xlsx":
        content = _create_excel_export(bills)
        media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        filename = f"bills_export_{now_str}.xlsx"
    else:
        content = _create_csv_export(bills).encode("utf-8")
        media_type = "text/csv; charset=utf-8"
        filename = f"bills_export_{now_str}.csv"

    return StreamingResponse(
        io.BytesIO(content),
        media_type=media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )
