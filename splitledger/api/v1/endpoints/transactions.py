from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from splitledger.api.deps import get_ledger_repo, get_transaction_service
from splitledger.core.exceptions import LedgerValidationError, TransactionNotFoundError
from splitledger.models.transaction import Transaction
from splitledger.repositories.ledger_repo import LedgerRepository
from splitledger.schemas.transaction import BulkTransactionCreate, TransactionCreate, TransactionResponse
from splitledger.services.transaction_service import TransactionService

router = APIRouter()


def _to_response(transaction: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=transaction.id,
        payer_id=transaction.payer_id,
        beneficiary_id=transaction.beneficiary_id,
        amount=transaction.amount,
        label=transaction.label,
        occurred_at=transaction.occurred_at,
        is_settlement=transaction.is_settlement,
        is_deleted=transaction.is_deleted,
        deleted_at=transaction.deleted_at,
        created_at=transaction.created_at
    )


@router.get("/", response_model=List[TransactionResponse])
async def list_transactions(
    search: Optional[str] = None,
    payer_id: Optional[str] = None,
    beneficiary_id: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    include_deleted: bool = False,
    ledger: LedgerRepository = Depends(get_ledger_repo)
):
    transactions = await ledger.find_transactions(
        search_text=search,
        payer_id=payer_id,
        beneficiary_id=beneficiary_id,
        date_from=date_from,
        date_to=date_to,
        include_deleted=include_deleted
    )
    return [_to_response(t) for t in transactions]


@router.post("/", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    payload: TransactionCreate,
    service: TransactionService = Depends(get_transaction_service)
):
    try:
        transaction = await service.add_transaction(payload)
    except LedgerValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )
    return _to_response(transaction)


@router.post("/bulk", response_model=List[TransactionResponse], status_code=status.HTTP_201_CREATED)
async def create_bulk_transactions(
    payload: BulkTransactionCreate,
    service: TransactionService = Depends(get_transaction_service)
):
    """Split one payment across several beneficiaries"""
    try:
        transactions = await service.add_bulk_transactions(payload)
    except LedgerValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )
    return [_to_response(t) for t in transactions]


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_transaction(
    transaction_id: str,
    service: TransactionService = Depends(get_transaction_service)
):
    try:
        await service.delete_transaction(transaction_id)
    except TransactionNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Transaction not found"
        )
