from decimal import Decimal
from typing import List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from splitledger.api.deps import get_ledger_repo, get_participant_repo
from splitledger.main import app
from splitledger.models.participant import Participant
from splitledger.models.settlement import Settlement
from splitledger.models.transaction import Transaction


class InMemoryLedger:
    """LedgerStore (plus roster helpers) kept in plain lists."""

    def __init__(self, participants=None, transactions=None, pending=None):
        self.participants: List[Participant] = list(participants or [])
        self.transactions: List[Transaction] = list(transactions or [])
        self.pending: List[Settlement] = list(pending or [])

    # LedgerStore
    async def list_participants(self, active_only: bool = False) -> List[Participant]:
        roster = [p for p in self.participants if p.is_active or not active_only]
        return sorted(roster, key=lambda p: p.name)

    async def list_transactions(self) -> List[Transaction]:
        return [t for t in self.transactions if not t.is_deleted]

    async def append_transaction(self, transaction: Transaction) -> None:
        self.transactions.append(transaction)

    async def list_active_pending_settlements(self) -> List[Settlement]:
        return sorted((s for s in self.pending if s.is_active), key=lambda s: s.suggested_at)

    async def deactivate_pending_settlement(self, settlement_id: str) -> None:
        for s in self.pending:
            if s.id == settlement_id:
                s.is_active = False

    async def reduce_pending_settlement_amount(self, settlement_id: str, amount: Decimal) -> None:
        for s in self.pending:
            if s.id == settlement_id:
                s.amount = amount
                s.is_active = amount > 0

    async def clear_all_pending_settlements(self) -> None:
        self.pending = []

    async def save_pending_settlements(self, settlements: List[Settlement]) -> None:
        self.pending.extend(settlements)

    # LedgerRepository extras
    async def find_transactions(self, search_text=None, payer_id=None, beneficiary_id=None,
                                date_from=None, date_to=None, include_deleted=False):
        result = []
        for t in self.transactions:
            if t.is_deleted and not include_deleted:
                continue
            if search_text and search_text.lower() not in t.label.lower():
                continue
            if payer_id and t.payer_id != payer_id:
                continue
            if beneficiary_id and t.beneficiary_id != beneficiary_id:
                continue
            result.append(t)
        return result

    async def soft_delete_transaction(self, transaction_id: str) -> bool:
        for t in self.transactions:
            if t.id == transaction_id and not t.is_deleted:
                t.is_deleted = True
                return True
        return False

    # ParticipantRepository
    async def add_participant(self, name: str) -> Participant:
        participant = Participant(name=name.strip())
        self.participants.append(participant)
        return participant

    async def rename_participant(self, participant_id: str, name: str) -> Optional[Participant]:
        for p in self.participants:
            if p.id == participant_id:
                p.name = name.strip()
                return p
        return None

    async def remove_participant(self, participant_id: str) -> Optional[str]:
        participant = next((p for p in self.participants if p.id == participant_id), None)
        if participant is None:
            return None
        if any(participant_id in (t.payer_id, t.beneficiary_id) for t in self.transactions):
            participant.is_active = False
            return "deactivated"
        self.participants.remove(participant)
        return "deleted"


def make_transaction(payer: str, beneficiary: str, amount, label: str = "Test") -> Transaction:
    return Transaction(payer_id=payer, beneficiary_id=beneficiary, amount=amount, label=label)


@pytest.fixture
def alice():
    return Participant(id="alice", name="Alice")


@pytest.fixture
def bob():
    return Participant(id="bob", name="Bob")


@pytest.fixture
def charlie():
    return Participant(id="charlie", name="Charlie")


@pytest.fixture
def trio(alice, bob, charlie):
    return [alice, bob, charlie]


@pytest.fixture
def mock_ledger():
    """AsyncMock ledger store with empty reads."""
    ledger = AsyncMock()
    ledger.list_participants.return_value = []
    ledger.list_transactions.return_value = []
    ledger.list_active_pending_settlements.return_value = []
    return ledger


@pytest.fixture
def ledger(trio):
    return InMemoryLedger(participants=trio)


@pytest.fixture
def mock_db():
    """MagicMock motor database with AsyncMock collection methods."""
    db = MagicMock()
    for name in ("participants", "transactions", "pending_settlements"):
        collection = getattr(db, name)
        collection.insert_one = AsyncMock()
        collection.insert_many = AsyncMock()
        collection.update_one = AsyncMock()
        collection.delete_one = AsyncMock()
        collection.delete_many = AsyncMock(return_value=MagicMock(deleted_count=0))
        collection.find_one = AsyncMock(return_value=None)
        collection.find_one_and_update = AsyncMock(return_value=None)
    return db


def mock_cursor(docs):
    cursor = MagicMock()
    cursor.sort.return_value = cursor
    cursor.to_list = AsyncMock(return_value=docs)
    return cursor


@pytest.fixture
def test_client(ledger):
    """TestClient backed by the in-memory ledger (no MongoDB, no lifespan)."""
    app.dependency_overrides[get_ledger_repo] = lambda: ledger
    app.dependency_overrides[get_participant_repo] = lambda: ledger
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()
