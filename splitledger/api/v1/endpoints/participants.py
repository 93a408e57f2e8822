from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from splitledger.api.deps import get_participant_repo
from splitledger.models.participant import Participant
from splitledger.repositories.participant_repo import ParticipantRepository
from splitledger.schemas.ledger import ParticipantCreate, ParticipantRemovedResponse, ParticipantResponse

router = APIRouter()

MIN_NAME_LENGTH = 2


def _to_response(participant: Participant) -> ParticipantResponse:
    return ParticipantResponse(
        id=participant.id,
        name=participant.name,
        initial_name=participant.initial_name,
        is_active=participant.is_active,
        created_at=participant.created_at
    )


def _check_name(name: str) -> None:
    if len(name.strip()) < MIN_NAME_LENGTH:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Name must be at least {MIN_NAME_LENGTH} characters"
        )


@router.get("/", response_model=List[ParticipantResponse])
async def list_participants(
    active_only: bool = False,
    repo: ParticipantRepository = Depends(get_participant_repo)
):
    return [_to_response(p) for p in await repo.list_participants(active_only=active_only)]


@router.post("/", response_model=ParticipantResponse, status_code=status.HTTP_201_CREATED)
async def create_participant(
    payload: ParticipantCreate,
    repo: ParticipantRepository = Depends(get_participant_repo)
):
    _check_name(payload.name)
    return _to_response(await repo.add_participant(payload.name))


@router.patch("/{participant_id}", response_model=ParticipantResponse)
async def rename_participant(
    participant_id: str,
    payload: ParticipantCreate,
    repo: ParticipantRepository = Depends(get_participant_repo)
):
    _check_name(payload.name)
    participant = await repo.rename_participant(participant_id, payload.name)
    if participant is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Participant not found"
        )
    return _to_response(participant)


@router.delete("/{participant_id}", response_model=ParticipantRemovedResponse)
async def remove_participant(
    participant_id: str,
    repo: ParticipantRepository = Depends(get_participant_repo)
):
    """Delete a participant, or deactivate one that has transactions"""
    outcome = await repo.remove_participant(participant_id)
    if outcome is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Participant not found"
        )
    return ParticipantRemovedResponse(participant_id=participant_id, outcome=outcome)
