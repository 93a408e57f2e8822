import pytest
from decimal import Decimal
from pydantic import ValidationError

from splitledger.core.exceptions import LedgerValidationError, TransactionNotFoundError
from splitledger.schemas.transaction import BeneficiaryShare, BulkTransactionCreate, TransactionCreate
from splitledger.services.transaction_service import TransactionService


@pytest.mark.asyncio
async def test_add_transaction(ledger):
    service = TransactionService(ledger)

    transaction = await service.add_transaction(TransactionCreate(
        payer_id="alice", beneficiary_id="bob", amount="9.999", label="  Cinema  "
    ))

    assert ledger.transactions == [transaction]
    assert transaction.amount == Decimal("10.00")
    assert transaction.label == "Cinema"
    assert transaction.is_settlement is False


@pytest.mark.asyncio
async def test_add_transaction_unknown_participant(ledger):
    service = TransactionService(ledger)

    with pytest.raises(LedgerValidationError) as exc_info:
        await service.add_transaction(TransactionCreate(
            payer_id="alice", beneficiary_id="ghost", amount=5, label="Taxi"
        ))

    assert exc_info.value.details == {"participant_id": "ghost"}
    assert ledger.transactions == []


@pytest.mark.asyncio
async def test_bulk_checks_every_share_before_writing(ledger):
    ledger.participants[2].is_active = False
    service = TransactionService(ledger)
    bulk = BulkTransactionCreate(
        payer_id="alice",
        label="Groceries",
        shares=[
            BeneficiaryShare(beneficiary_id="bob", amount=10),
            BeneficiaryShare(beneficiary_id="charlie", amount=10),
        ]
    )

    with pytest.raises(LedgerValidationError):
        await service.add_bulk_transactions(bulk)

    assert ledger.transactions == []


@pytest.mark.asyncio
async def test_bulk_skips_payer_and_zero_shares(ledger):
    service = TransactionService(ledger)
    bulk = BulkTransactionCreate(
        payer_id="alice",
        label="Hut",
        shares=[
            BeneficiaryShare(beneficiary_id="alice", amount=20),
            BeneficiaryShare(beneficiary_id="bob", amount=20),
            BeneficiaryShare(beneficiary_id="charlie", amount=0),
        ]
    )

    transactions = await service.add_bulk_transactions(bulk)

    assert [(t.beneficiary_id, t.amount) for t in transactions] == [("bob", Decimal("20.00"))]


@pytest.mark.asyncio
async def test_delete_missing_transaction(ledger):
    service = TransactionService(ledger)

    with pytest.raises(TransactionNotFoundError):
        await service.delete_transaction("missing")


def test_transaction_create_validation():
    with pytest.raises(ValidationError):
        TransactionCreate(payer_id="alice", beneficiary_id="alice", amount=5, label="Self")
    with pytest.raises(ValidationError):
        TransactionCreate(payer_id="alice", beneficiary_id="bob", amount="-1", label="Refund")
    with pytest.raises(ValidationError):
        TransactionCreate(payer_id="alice", beneficiary_id="bob", amount="0.004", label="Dust")
    with pytest.raises(ValidationError):
        TransactionCreate(payer_id="alice", beneficiary_id="bob", amount=5, label="   ")


def test_bulk_create_validation():
    with pytest.raises(ValidationError):
        BulkTransactionCreate(
            payer_id="alice", label="Only me",
            shares=[BeneficiaryShare(beneficiary_id="alice", amount=10)]
        )
    with pytest.raises(ValidationError):
        BulkTransactionCreate(
            payer_id="alice", label="Mismatch", expected_total="25",
            shares=[BeneficiaryShare(beneficiary_id="bob", amount=10)]
        )
    with pytest.raises(ValidationError):
        BeneficiaryShare(beneficiary_id="bob", amount="-5")


def test_transaction_create_accepts_expressions():
    transaction = TransactionCreate(payer_id="alice", beneficiary_id="bob", amount="10+5*2", label="Pizza")
    assert transaction.amount == Decimal("20.00")

    share = BeneficiaryShare(beneficiary_id="bob", amount="33,333")
    assert share.amount == Decimal("33.33")

    with pytest.raises(ValidationError):
        TransactionCreate(payer_id="alice", beneficiary_id="bob", amount="7/0", label="Pizza")
    with pytest.raises(ValidationError):
        TransactionCreate(payer_id="alice", beneficiary_id="bob", amount="12 EUR", label="Pizza")
