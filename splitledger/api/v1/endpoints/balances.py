from typing import List

from fastapi import APIRouter, Depends

from splitledger.api.deps import get_settlement_service
from splitledger.schemas.ledger import BalanceResponse, CanDeleteResponse, DebtResponse, UserBalanceResponse
from splitledger.services.settlement_service import SettlementService

router = APIRouter()


@router.get("/balances", response_model=List[BalanceResponse])
async def list_balances(service: SettlementService = Depends(get_settlement_service)):
    """Net balance of every active participant, largest creditor first"""
    balances = await service.calculate_balances()
    return [
        BalanceResponse(
            participant_id=b.participant_id,
            participant_name=b.participant.name if b.participant else None,
            net_balance=b.net_balance
        )
        for b in balances
    ]


@router.get("/balances/{participant_id}", response_model=UserBalanceResponse)
async def get_balance(
    participant_id: str,
    service: SettlementService = Depends(get_settlement_service)
):
    """Balance of one participant (0 for unknown or inactive ids)"""
    balance = await service.get_user_balance(participant_id)
    return UserBalanceResponse(participant_id=participant_id, net_balance=balance)


@router.get("/balances/{participant_id}/can-delete", response_model=CanDeleteResponse)
async def can_delete(
    participant_id: str,
    service: SettlementService = Depends(get_settlement_service)
):
    can = await service.can_delete_user(participant_id)
    return CanDeleteResponse(participant_id=participant_id, can_delete=can)


@router.get("/debts", response_model=List[DebtResponse])
async def list_debts(service: SettlementService = Depends(get_settlement_service)):
    """Direct pairwise debts, largest first"""
    debts = await service.calculate_current_debts()
    return [
        DebtResponse(
            debtor_id=d.debtor_id,
            debtor_name=d.debtor.name if d.debtor else None,
            creditor_id=d.creditor_id,
            creditor_name=d.creditor.name if d.creditor else None,
            amount=d.amount
        )
        for d in debts
    ]
