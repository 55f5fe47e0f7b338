import csv
import io
from datetime import datetime

import pytest
from openpyxl import load_workbook

from kassa.schemas.transaction import Transaction
from kassa.services import report_service
from kassa.services.report_service import (
    export_excel,
    export_pdf,
    format_compact,
    format_idr,
    generate_csv_report,
    generate_txt_report,
    group_by_product,
    report_filename,
    summarize_sales,
)
from kassa.utils import constants

PRINTED_AT = datetime(2026, 10, 16, 9, 30)


def make_transaction(tid, product_id, name, quantity, price, payments, timestamp=None):
    return Transaction(
        id=tid,
        user_id="u1",
        product_id=product_id,
        product_name=name,
        quantity=quantity,
        price=price,
        total=quantity * price,
        payments=[{"method": method, "amount": amount} for method, amount in payments],
        # 02:30 UTC is 09:30 in Asia/Jakarta
        timestamp=timestamp or datetime(2026, 10, 16, 2, 30),
    )


@pytest.fixture
def transactions():
    return [
        make_transaction("t1", "p1", "Kopi", 3, 15000, [("Tunai", 45000)]),
        make_transaction("t2", "p2", "Teh", 2, 5000, [("QR", 4000), ("Transfer", 6000)]),
        make_transaction("t3", "p1", "Kopi", 1, 15000, [("Tunai", 15000)]),
        make_transaction("t4", None, "Roti Bakar", 1, 1500, [("QR", 1500)]),
    ]


class TestFormatting:
    @pytest.mark.parametrize("amount, expected", [
        (45000, "45k"),
        (1500, "1.5k"),
        (1250, "1.25k"),
        (1000, "1k"),
        (999, "999"),
        (0, "0"),
    ])
    def test_format_compact(self, amount, expected):
        assert format_compact(amount) == expected

    @pytest.mark.parametrize("amount, expected", [
        (45000, "Rp 45.000"),
        (1500.5, "Rp 1.500,5"),
        (1234567.89, "Rp 1.234.567,89"),
        (0, "Rp 0"),
        (-5000, "-Rp 5.000"),
    ])
    def test_format_idr(self, amount, expected):
        assert format_idr(amount) == expected


class TestAggregation:
    def test_summary_of_nothing_is_zero(self):
        summary = summarize_sales(None)
        assert summary.total_sales == 0
        assert summary.tunai == 0
        assert summary.qr == 0
        assert summary.transfer == 0
        assert summary.transaction_count == 0

    def test_summary_splits_by_method(self, transactions):
        summary = summarize_sales(transactions)
        assert summary.total_sales == 71500
        assert summary.tunai == 60000
        assert summary.qr == 5500
        assert summary.transfer == 6000
        assert summary.transaction_count == 4

    def test_group_by_product_keeps_first_seen_order(self, transactions):
        lines = group_by_product(transactions)
        assert [line.product_name for line in lines] == ["Kopi", "Teh", "Roti Bakar"]
        assert lines[0].quantity == 4
        assert lines[0].total == 60000
        assert lines[0].price == 15000

    def test_quick_entries_grouped_by_name(self):
        lines = group_by_product([
            make_transaction("a", None, "Es Jeruk", 1, 8000, [("Tunai", 8000)]),
            make_transaction("b", None, "Es Jeruk", 2, 8000, [("Tunai", 16000)]),
        ])
        assert len(lines) == 1
        assert lines[0].quantity == 3
        assert lines[0].total == 24000


class TestTextReport:
    def test_full_report(self, transactions):
        text = generate_txt_report(transactions, PRINTED_AT, store_symbol="店")
        assert text == (
            "Laporan Penjualan - 店\n"
            "Tanggal Cetak: 2026-10-16 09:30:00\n"
            "\n"
            "1. Kopi = 4x15k=60k\n"
            "2. Teh = 2x5k=10k\n"
            "3. Roti Bakar = 1x1.5k=1.5k\n"
            "\n"
            "Total = Rp 71.500\n"
            "\n"
            "Tunai = Rp 60.000\n"
            "QR = Rp 5.500\n"
            "Transfer = Rp 6.000\n"
        )

    def test_payment_lines_only_for_used_methods(self):
        text = generate_txt_report(
            [make_transaction("t1", "p1", "Kopi", 1, 15000, [("Tunai", 15000)])],
            PRINTED_AT,
            store_symbol="店",
        )
        assert "Tunai = Rp 15.000\n" in text
        assert "QR =" not in text
        assert "Transfer =" not in text

    def test_empty_report(self):
        text = generate_txt_report([], PRINTED_AT, store_symbol="店")
        assert text == (
            "Laporan Penjualan - 店\n"
            "Tanggal Cetak: 2026-10-16 09:30:00\n"
            "\n"
            "\n"
            "Total = Rp 0\n"
            "\n"
        )


class TestCsvReport:
    def test_header_and_rows(self, transactions):
        rows = list(csv.reader(io.StringIO(generate_csv_report(transactions))))
        assert tuple(rows[0]) == constants.REPORT_COLUMNS
        assert len(rows) == 5
        assert rows[1] == ["1", "t1", "2026-10-16 09:30:00", "Kopi", "3", "15000", "45000", "45000", "0", "0"]
        assert rows[2][7:] == ["0", "4000", "6000"]

    def test_empty(self):
        rows = list(csv.reader(io.StringIO(generate_csv_report([]))))
        assert rows == [list(constants.REPORT_COLUMNS)]


class TestExcelReport:
    def test_layout(self, transactions):
        content = export_excel(transactions, "kasir", PRINTED_AT)
        worksheet = load_workbook(io.BytesIO(content)).active

        assert worksheet.title == "Laporan Penjualan"
        assert worksheet["A1"].value == "Laporan Penjualan - kasir"
        assert worksheet["A2"].value == "Periode: October 2026"

        merged = {str(cell_range) for cell_range in worksheet.merged_cells.ranges}
        assert {"A1:J1", "A2:J2"} <= merged

        headers = [worksheet.cell(row=4, column=col).value for col in range(1, 11)]
        assert tuple(headers) == constants.REPORT_COLUMNS
        assert worksheet["A4"].font.bold

        assert worksheet["A5"].value == 1
        assert worksheet["B5"].value == "t1"
        assert worksheet["D5"].value == "Kopi"
        assert worksheet["G5"].value == 45000

        # Total row follows the four data rows
        assert worksheet["D9"].value == "Total"
        assert worksheet["E9"].value == 7
        assert worksheet["G9"].value == 71500
        assert worksheet["H9"].value == 60000
        assert worksheet["D9"].font.bold

        assert worksheet.column_dimensions["B"].width == 38
        assert worksheet.column_dimensions["D"].width == 25

    def test_no_transactions_still_has_total_row(self):
        worksheet = load_workbook(io.BytesIO(export_excel([], "kasir", PRINTED_AT))).active
        assert worksheet["D5"].value == "Total"
        assert worksheet["G5"].value == 0


class TestPdfReport:
    def test_is_pdf(self, transactions):
        content = export_pdf(transactions, "kasir <toko>", PRINTED_AT)
        assert content.startswith(b"%PDF")

    def test_empty(self):
        assert export_pdf([], "kasir", PRINTED_AT).startswith(b"%PDF")


class TestFilenames:
    def test_excel_name_carries_username(self):
        assert report_filename("xlsx", "kasir toko", PRINTED_AT) == "Laporan_Penjualan_kasir_toko_20261016.xlsx"

    def test_excel_name_is_ascii(self):
        name = report_filename("xlsx", "Toko 店", PRINTED_AT)
        assert name == "Laporan_Penjualan_Toko___20261016.xlsx"
        assert name.isascii()

    @pytest.mark.parametrize("kind", ["txt", "csv", "pdf"])
    def test_other_names_carry_date(self, kind):
        assert report_filename(kind, "kasir", PRINTED_AT) == f"laporan_penjualan_2026-10-16.{kind}"

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            report_filename("docx", "kasir", PRINTED_AT)

    def test_every_kind_has_media_type(self):
        assert set(report_service.REPORT_MEDIA_TYPES) == {"txt", "csv", "xlsx", "pdf"}
