"""
kassa/services/report_service.py

Purpose: Sales reports

- Dashboard summary (total sales and per payment method)
- Plain text report for copy/share
- CSV, Excel (openpyxl) and PDF (reportlab) exports
- Rupiah and compact ("45k") number formatting

All functions are pure: they take transaction records and return
strings or bytes. Routers decide how to send them.
"""

import csv
import io
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Sequence
from xml.sax.saxutils import escape

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from kassa.core.config import settings
from kassa.schemas.transaction import SalesSummary, Transaction
from kassa.utils import constants
from kassa.utils.time_utils import format_timestamp, local_now
from kassa.utils.validation_utils import round_money


# ============================================================================
# Number formatting
# ============================================================================

def _plain_number(amount: float):
    """
    Whole amounts as int, others as float, so 15000.0 prints as 15000.
    """
    amount = float(amount)
    if amount.is_integer():
        return int(amount)
    return amount


def format_number(amount: float) -> str:
    """Shortest text for a number: 15000 -> "15000", 1.5 -> "1.5"."""
    return str(_plain_number(amount))


def format_compact(amount: float) -> str:
    """
    Compact format used in the text report lines.

    Amounts of 1000 or more are shown in thousands with a "k"
    suffix: 45000 -> "45k", 1500 -> "1.5k". Smaller amounts are
    shown as-is.
    """
    if amount >= 1000:
        return f"{format_number(amount / 1000)}k"
    return format_number(amount)


def format_idr(amount: float) -> str:
    """
    Indonesian rupiah: "Rp 45.000", "Rp 1.500,5", "-Rp 5.000".
    Dots group thousands; up to two decimals after a comma,
    trailing zero decimals dropped.
    """
    amount = round_money(amount)
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{abs(amount):.2f}".partition(".")
    whole = f"{int(whole):,}".replace(",", ".")
    fraction = fraction.rstrip("0")
    text = f"Rp {whole}"
    if fraction:
        text += f",{fraction}"
    return sign + text


# ============================================================================
# Aggregation
# ============================================================================

@dataclass
class ProductSales:
    """One line of the grouped report."""
    product_name: str
    price: float
    quantity: int = 0
    total: float = 0


def payment_breakdown(transaction: Transaction) -> Dict[str, float]:
    """
    Amount paid per method for one transaction.
    Methods outside PAYMENT_METHODS are ignored.
    """
    breakdown = {method: 0.0 for method in constants.PAYMENT_METHODS}
    for payment in transaction.payments or []:
        if payment.method in breakdown:
            breakdown[payment.method] += payment.amount
    return {method: round_money(amount) for method, amount in breakdown.items()}


def summarize_sales(transactions: Optional[Sequence[Transaction]]) -> SalesSummary:
    """
    Totals for the dashboard cards.

    total_sales adds up transaction totals; the per-method figures add
    up payment amounts, so they only differ when payments are missing.
    """
    summary = SalesSummary()
    if not transactions:
        return summary

    total_sales = 0.0
    per_method = {method: 0.0 for method in constants.PAYMENT_METHODS}

    for transaction in transactions:
        total_sales += transaction.total
        for method, amount in payment_breakdown(transaction).items():
            per_method[method] += amount

    return SalesSummary(
        total_sales=round_money(total_sales),
        tunai=round_money(per_method["Tunai"]),
        qr=round_money(per_method["QR"]),
        transfer=round_money(per_method["Transfer"]),
        transaction_count=len(transactions),
    )


def group_by_product(transactions: Sequence[Transaction]) -> List[ProductSales]:
    """
    Groups transactions by product, in order of first appearance.

    Quick entries without a product id are grouped by name. The unit
    price shown is the first one seen for the product.
    """
    grouped: "OrderedDict[str, ProductSales]" = OrderedDict()

    for transaction in transactions:
        key = transaction.product_id or f"name:{transaction.product_name}"
        if key not in grouped:
            grouped[key] = ProductSales(
                product_name=transaction.product_name,
                price=transaction.price,
            )
        line = grouped[key]
        line.quantity += transaction.quantity
        line.total = round_money(line.total + transaction.total)

    return list(grouped.values())


# ============================================================================
# Text report
# ============================================================================

def generate_txt_report(
    transactions: Sequence[Transaction],
    now: Optional[datetime] = None,
    store_symbol: Optional[str] = None,
) -> str:
    """
    Builds the shareable plain text report.

    Example:
        Laporan Penjualan - 店
        Tanggal Cetak: 2026-10-16 09:30:00

        1. Kopi = 3x15k=45k

        Total = Rp 45.000

        Tunai = Rp 45.000

    Payment lines are only printed for methods with a positive total.
    """
    now = now or local_now()
    symbol = store_symbol if store_symbol is not None else settings.STORE_SYMBOL

    content = f"{constants.REPORT_TITLE} - {symbol}\n"
    content += f"Tanggal Cetak: {now.strftime('%Y-%m-%d %H:%M:%S')}\n\n"

    for index, line in enumerate(group_by_product(transactions), start=1):
        content += (
            f"{index}. {line.product_name} = "
            f"{line.quantity}x{format_compact(line.price)}={format_compact(line.total)}\n"
        )

    summary = summarize_sales(transactions)

    content += "\n"
    content += f"Total = {format_idr(summary.total_sales)}\n\n"

    if summary.tunai > 0:
        content += f"Tunai = {format_idr(summary.tunai)}\n"
    if summary.qr > 0:
        content += f"QR = {format_idr(summary.qr)}\n"
    if summary.transfer > 0:
        content += f"Transfer = {format_idr(summary.transfer)}\n"

    return content


# ============================================================================
# Tabular exports
# ============================================================================

def _report_rows(transactions: Sequence[Transaction]) -> List[list]:
    """One row per transaction, in REPORT_COLUMNS order."""
    rows = []
    for index, transaction in enumerate(transactions, start=1):
        breakdown = payment_breakdown(transaction)
        rows.append([
            index,
            transaction.id,
            format_timestamp(transaction.timestamp),
            transaction.product_name,
            transaction.quantity,
            _plain_number(transaction.price),
            _plain_number(transaction.total),
            _plain_number(breakdown["Tunai"]),
            _plain_number(breakdown["QR"]),
            _plain_number(breakdown["Transfer"]),
        ])
    return rows


def _total_row(transactions: Sequence[Transaction]) -> list:
    summary = summarize_sales(transactions)
    total_quantity = sum(transaction.quantity for transaction in transactions)
    return [
        "", "", "", "Total",
        total_quantity,
        "",
        _plain_number(summary.total_sales),
        _plain_number(summary.tunai),
        _plain_number(summary.qr),
        _plain_number(summary.transfer),
    ]


def generate_csv_report(transactions: Sequence[Transaction]) -> str:
    """
    CSV export: a header row then one row per transaction.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(constants.REPORT_COLUMNS)
    writer.writerows(_report_rows(transactions))
    return buffer.getvalue()


def export_excel(
    transactions: Sequence[Transaction],
    username: str,
    now: Optional[datetime] = None,
) -> bytes:
    """
    Excel export.

    Layout:
        A1  "Laporan Penjualan - {username}"   (merged A1:J1)
        A2  "Periode: {Month yyyy}"           (merged A2:J2)
        row 4  column headers
        row 5+ one row per transaction
        last   total row
    """
    now = now or local_now()
    last_column = get_column_letter(len(constants.REPORT_COLUMNS))

    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = constants.REPORT_SHEET_TITLE

    # Title section
    worksheet["A1"] = f"{constants.REPORT_TITLE} - {username}"
    worksheet["A1"].font = Font(size=14, bold=True)
    worksheet["A2"] = f"Periode: {constants.MONTH_NAMES[now.month - 1]} {now.year}"
    worksheet.merge_cells(f"A1:{last_column}1")
    worksheet.merge_cells(f"A2:{last_column}2")

    # Headers
    header_row = 4
    for col, header in enumerate(constants.REPORT_COLUMNS, start=1):
        cell = worksheet.cell(row=header_row, column=col, value=header)
        cell.font = Font(bold=True)
        cell.fill = PatternFill(start_color="CCCCCC", end_color="CCCCCC", fill_type="solid")
        cell.alignment = Alignment(horizontal="center")

    # Data
    row_idx = header_row
    for row_idx, row in enumerate(_report_rows(transactions), start=header_row + 1):
        for col, value in enumerate(row, start=1):
            worksheet.cell(row=row_idx, column=col, value=value)

    # Totals
    total_row_idx = row_idx + 1
    for col, value in enumerate(_total_row(transactions), start=1):
        cell = worksheet.cell(row=total_row_idx, column=col, value=value)
        cell.font = Font(bold=True)

    for col, width in enumerate(constants.REPORT_COLUMN_WIDTHS, start=1):
        worksheet.column_dimensions[get_column_letter(col)].width = width

    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


def export_pdf(
    transactions: Sequence[Transaction],
    username: str,
    now: Optional[datetime] = None,
) -> bytes:
    """
    PDF export: per-product table with a total row, then totals per
    payment method.
    """
    now = now or local_now()
    output = io.BytesIO()
    doc = SimpleDocTemplate(output, pagesize=A4, title=constants.REPORT_TITLE)
    styles = getSampleStyleSheet()
    story = []

    story.append(Paragraph(escape(f"{constants.REPORT_TITLE} - {username}"), styles["Title"]))
    story.append(Paragraph(f"Tanggal Cetak: {now.strftime('%Y-%m-%d %H:%M:%S')}", styles["Normal"]))
    story.append(Spacer(1, 12))

    summary = summarize_sales(transactions)

    product_data = [["No", "Produk", "Qty", "Harga", "Total"]]
    for index, line in enumerate(group_by_product(transactions), start=1):
        product_data.append([
            str(index),
            line.product_name,
            str(line.quantity),
            format_idr(line.price),
            format_idr(line.total),
        ])
    product_data.append([
        "", "Total",
        str(sum(line.quantity for line in group_by_product(transactions))),
        "",
        format_idr(summary.total_sales),
    ])

    product_table = Table(product_data, colWidths=[30, 200, 50, 100, 110], repeatRows=1)
    product_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
                ("LINEABOVE", (0, -1), (-1, -1), 1, colors.black),
                ("GRID", (0, 0), (-1, -2), 0.5, colors.lightgrey),
            ]
        )
    )
    story.append(product_table)
    story.append(Spacer(1, 18))

    payment_data = [["Metode Pembayaran", "Jumlah"]]
    payment_data.append(["Tunai", format_idr(summary.tunai)])
    payment_data.append(["QR", format_idr(summary.qr)])
    payment_data.append(["Transfer", format_idr(summary.transfer)])

    payment_table = Table(payment_data, colWidths=[200, 150])
    payment_table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 9),
                ("ALIGN", (1, 0), (1, -1), "RIGHT"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
            ]
        )
    )
    story.append(payment_table)

    doc.build(story)
    return output.getvalue()


# ============================================================================
# File names
# ============================================================================

REPORT_MEDIA_TYPES = {
    "txt": "text/plain; charset=utf-8",
    "csv": "text/csv; charset=utf-8",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}


def report_filename(kind: str, username: str, now: Optional[datetime] = None) -> str:
    """
    Download name for a report.

    Spreadsheets carry the username; the other formats only the date.
    """
    now = now or local_now()
    if kind == "xlsx":
        safe_username = "".join(ch if (ch.isascii() and ch.isalnum()) or ch in "-_" else "_" for ch in username)
        return f"Laporan_Penjualan_{safe_username}_{now.strftime('%Y%m%d')}.xlsx"
    if kind not in REPORT_MEDIA_TYPES:
        raise ValueError(f"Unknown report format: {kind}")
    return f"laporan_penjualan_{now.strftime('%Y-%m-%d')}.{kind}"
