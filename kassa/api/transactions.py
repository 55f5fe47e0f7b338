"""
kassa/api/transactions.py

Purpose: Sales transaction endpoints

- Listing with date filters, newest first
- Dashboard summary cards
- Catalog sales with split payments, and quick entries
- Edit, delete, clear history
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from kassa.api.deps import get_current_user, get_transaction_filter, get_transaction_service
from kassa.schemas.response import MessageResponse
from kassa.schemas.transaction import (
    QuickTransactionCreate,
    SalesSummary,
    Transaction,
    TransactionCreate,
    TransactionFilter,
    TransactionUpdate,
)
from kassa.services.transaction_service import TransactionService
from kassa.utils import constants

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("", response_model=List[Transaction])
async def list_transactions(
    flt: TransactionFilter = Depends(get_transaction_filter),
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> List[Transaction]:
    return await transactions.list_transactions(user["_id"], flt)


@router.get("/summary", response_model=SalesSummary)
async def sales_summary(
    flt: TransactionFilter = Depends(get_transaction_filter),
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> SalesSummary:
    return await transactions.summary(user["_id"], flt)


@router.post("", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    request: TransactionCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> Transaction:
    return await transactions.create_transaction(user["_id"], request)


@router.post("/quick", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def create_quick_transaction(
    request: QuickTransactionCreate,
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> Transaction:
    return await transactions.create_quick_transaction(user["_id"], request)


@router.delete("", response_model=MessageResponse)
async def clear_transactions(
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> MessageResponse:
    count = await transactions.clear_transactions(user["_id"])
    return MessageResponse(message=constants.MSG_TRANSACTIONS_CLEARED, count=count)


@router.get("/{transaction_id}", response_model=Transaction)
async def get_transaction(
    transaction_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> Transaction:
    return await transactions.get_transaction(user["_id"], transaction_id)


@router.put("/{transaction_id}", response_model=Transaction)
async def update_transaction(
    transaction_id: str,
    request: TransactionUpdate,
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> Transaction:
    return await transactions.update_transaction(user["_id"], transaction_id, request)


@router.delete("/{transaction_id}", response_model=MessageResponse)
async def delete_transaction(
    transaction_id: str,
    user: Dict[str, Any] = Depends(get_current_user),
    transactions: TransactionService = Depends(get_transaction_service),
) -> MessageResponse:
    await transactions.delete_transaction(user["_id"], transaction_id)
    return MessageResponse(message=constants.MSG_TRANSACTION_DELETED)
