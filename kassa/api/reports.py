"""
kassa/api/reports.py

Purpose: Sales report downloads

- JSON summary and text preview
- TXT, CSV, XLSX and PDF attachments

All endpoints take the same date filters as the transaction list.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from kassa.api.deps import get_current_user, get_transaction_filter, get_transaction_service
from kassa.core.logging import get_logger
from kassa.schemas.report import ReportPreview
from kassa.schemas.transaction import SalesSummary, Transaction, TransactionFilter
from kassa.services import report_service
from kassa.services.transaction_service import TransactionService
from kassa.utils.time_utils import local_now

logger = get_logger(__name__)
router = APIRouter(prefix="/reports", tags=["Reports"])


async def _load(
    user: Dict[str, Any],
    flt: TransactionFilter,
    transactions: TransactionService,
) -> List[Transaction]:
    return await transactions.list_transactions(user["_id"], flt)


def _attachment(content, kind: str, username: str) -> Response:
    filename = report_service.report_filename(kind, username, local_now())
    logger.info(f"Report generated: {filename}", extra={"report": kind})
    return Response(
        content=content,
        media_type=report_service.REPORT_MEDIA_TYPES[kind],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/summary", response_model=SalesSummary)
async def summary(
    flt: TransactionFilter = Depends(get_transaction_filter),
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> SalesSummary:
    return report_service.summarize_sales(await _load(user, flt, transactions))


@router.get("/preview", response_model=ReportPreview)
async def preview(
    flt: TransactionFilter = Depends(get_transaction_filter),
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> ReportPreview:
    """Text report for the copy-to-clipboard dialog."""
    records = await _load(user, flt, transactions)
    now = local_now()
    return ReportPreview(
        filename=report_service.report_filename("txt", user["username"], now),
        content=report_service.generate_txt_report(records, now),
        summary=report_service.summarize_sales(records),
    )


@router.get("/txt")
async def download_txt(
    flt: TransactionFilter = Depends(get_transaction_filter),
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> Response:
    records = await _load(user, flt, transactions)
    return _attachment(report_service.generate_txt_report(records, local_now()), "txt", user["username"])


@router.get("/csv")
async def download_csv(
    flt: TransactionFilter = Depends(get_transaction_filter),
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> Response:
    records = await _load(user, flt, transactions)
    return _attachment(report_service.generate_csv_report(records), "csv", user["username"])


@router.get("/xlsx")
async def download_xlsx(
    flt: TransactionFilter = Depends(get_transaction_filter),
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> Response:
    records = await _load(user, flt, transactions)
    content = report_service.export_excel(records, user["username"], local_now())
    return _attachment(content, "xlsx", user["username"])


@router.get("/pdf")
async def download_pdf(
    flt: TransactionFilter = Depends(get_transaction_filter),
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> Response:
    records = await _load(user, flt, transactions)
    content = report_service.export_pdf(records, user["username"], local_now())
    return _attachment(content, "pdf", user["username"])
