from fastapi import Depends

from splitledger.db.mongo import get_db
from splitledger.repositories.ledger_repo import LedgerRepository
from splitledger.repositories.participant_repo import ParticipantRepository
from splitledger.services.settlement_service import SettlementService
from splitledger.services.transaction_service import TransactionService


def get_ledger_repo(db=Depends(get_db)) -> LedgerRepository:
    return LedgerRepository(db)


def get_participant_repo(db=Depends(get_db)) -> ParticipantRepository:
    return ParticipantRepository(db)


def get_settlement_service(ledger=Depends(get_ledger_repo)) -> SettlementService:
    return SettlementService(ledger)


def get_transaction_service(ledger=Depends(get_ledger_repo)) -> TransactionService:
    return TransactionService(ledger)
