from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from splitledger.api.deps import get_settlement_service
from splitledger.core.exceptions import PartialSettlementError
from splitledger.models.base import _utcnow
from splitledger.models.settlement import Settlement
from splitledger.schemas.settlement import ApplyAllResponse, SettlementApply, SettlementResponse
from splitledger.services.settlement_service import SettlementService

router = APIRouter()


def _to_response(settlement: Settlement) -> SettlementResponse:
    return SettlementResponse(
        id=settlement.id,
        payer_id=settlement.payer_id,
        recipient_id=settlement.recipient_id,
        payer_name=settlement.payer_name,
        recipient_name=settlement.recipient_name,
        amount=settlement.amount,
        suggested_at=settlement.suggested_at,
        is_active=settlement.is_active
    )


@router.get("/proposals", response_model=List[SettlementResponse])
async def list_proposals(service: SettlementService = Depends(get_settlement_service)):
    """Minimal transfers for the current ledger (not stored)"""
    return [_to_response(s) for s in await service.calculate_minimal_transfers()]


@router.get("", response_model=List[SettlementResponse])
async def list_stored(service: SettlementService = Depends(get_settlement_service)):
    """Pending settlements saved by the last recalculation"""
    return [_to_response(s) for s in await service.get_stored_settlements()]


@router.post("/recalculate", response_model=List[SettlementResponse])
async def recalculate(service: SettlementService = Depends(get_settlement_service)):
    return [_to_response(s) for s in await service.save_calculated_settlements()]


@router.post("/apply", status_code=status.HTTP_204_NO_CONTENT)
async def apply_settlement(
    payload: SettlementApply,
    service: SettlementService = Depends(get_settlement_service)
):
    settlement = Settlement(
        payer_id=payload.payer_id,
        recipient_id=payload.recipient_id,
        amount=payload.amount,
        suggested_at=payload.suggested_at or _utcnow()
    )
    await service.apply_settlement(settlement)


@router.post("/apply-all", response_model=ApplyAllResponse)
async def apply_all(service: SettlementService = Depends(get_settlement_service)):
    try:
        applied = await service.apply_all_settlements()
    except PartialSettlementError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": exc.message,
                "applied": [_to_response(s).model_dump(mode="json", by_alias=True) for s in exc.applied],
                "pending": [_to_response(s).model_dump(mode="json", by_alias=True) for s in exc.pending]
            }
        )
    return ApplyAllResponse(applied=[_to_response(s) for s in applied])
