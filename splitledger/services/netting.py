"""
Pure balance and netting calculations over plain ledger data.

Nothing here touches storage; ``SettlementService`` feeds these functions
from a fresh ledger read on every call.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from splitledger.core.logger import get_logger
from splitledger.models.balance import Balance, Debt
from splitledger.models.base import _utcnow
from splitledger.models.participant import Participant
from splitledger.models.settlement import Settlement
from splitledger.models.transaction import Transaction

logger = get_logger(__name__)

ZERO = Decimal("0")


def calculate_balances(
    participants: Iterable[Participant],
    transactions: Iterable[Transaction]
) -> List[Balance]:
    """
    Net balance per active participant, largest creditor first.

    A transaction touching an inactive or unknown participant is skipped
    entirely. Ties keep the roster order.
    """
    roster = {p.id: p for p in participants if p.is_active}
    balances: Dict[str, Decimal] = {participant_id: ZERO for participant_id in roster}

    for transaction in transactions:
        if transaction.payer_id not in balances or transaction.beneficiary_id not in balances:
            logger.warning(
                f"Skipping transaction {transaction.id} - inactive participant involved "
                f"(Payer: {transaction.payer_id}, Beneficiary: {transaction.beneficiary_id})"
            )
            continue

        balances[transaction.payer_id] += transaction.amount
        balances[transaction.beneficiary_id] -= transaction.amount

    result = [
        Balance(participant_id=participant_id, net_balance=amount, participant=roster[participant_id])
        for participant_id, amount in balances.items()
    ]
    result.sort(key=lambda b: b.net_balance, reverse=True)
    return result


def calculate_debts(
    participants: Iterable[Participant],
    transactions: Iterable[Transaction]
) -> List[Debt]:
    """
    Direct pairwise debts, largest first.

    Every transaction adds its amount to "beneficiary owes payer". Pairs are
    not netted against each other, so A owes B and B owes A can both show.
    """
    participant_map = {p.id: p for p in participants}
    matrix: Dict[Tuple[str, str], Decimal] = {}

    for transaction in transactions:
        payer = participant_map.get(transaction.payer_id)
        beneficiary = participant_map.get(transaction.beneficiary_id)

        if payer is None or beneficiary is None:
            logger.warning(
                f"Skipping transaction {transaction.id} - participant not found "
                f"(Payer: {transaction.payer_id}, Beneficiary: {transaction.beneficiary_id})"
            )
            continue

        if not payer.is_active or not beneficiary.is_active:
            logger.warning(
                f"Skipping transaction {transaction.id} - inactive participant involved "
                f"(Payer: {transaction.payer_id}, Beneficiary: {transaction.beneficiary_id})"
            )
            continue

        if transaction.is_self_transaction:
            logger.debug(f"Skipping self transaction {transaction.id} for {transaction.payer_id}")
            continue

        key = (transaction.beneficiary_id, transaction.payer_id)
        matrix[key] = matrix.get(key, ZERO) + transaction.amount

    debts = [
        Debt(
            debtor_id=debtor_id,
            creditor_id=creditor_id,
            amount=amount,
            debtor=participant_map[debtor_id],
            creditor=participant_map[creditor_id]
        )
        for (debtor_id, creditor_id), amount in matrix.items()
        if amount > 0
    ]
    debts.sort(key=lambda d: d.amount, reverse=True)
    return debts


def settle_min_transfers(
    balances: Iterable[Balance],
    suggested_at: Optional[datetime] = None
) -> List[Settlement]:
    """
    Greedy minimal transfer plan for the given balances.

    Debtors and creditors are each sorted largest first; the two cursors
    pair the current debtor with the current creditor, move the smaller of
    the two amounts, and advance whichever side reached zero. At most
    ``debtors + creditors - 1`` settlements are produced.
    """
    if suggested_at is None:
        suggested_at = _utcnow()

    creditors = []
    debtors = []
    for balance in balances:
        name = balance.participant.name if balance.participant else None
        if balance.net_balance > 0:
            creditors.append({"id": balance.participant_id, "name": name, "amount": balance.net_balance})
        elif balance.net_balance < 0:
            debtors.append({"id": balance.participant_id, "name": name, "amount": -balance.net_balance})

    creditors.sort(key=lambda x: x["amount"], reverse=True)
    debtors.sort(key=lambda x: x["amount"], reverse=True)

    logger.debug(f"Found {len(creditors)} creditors and {len(debtors)} debtors")

    settlements: List[Settlement] = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(debtor["amount"], creditor["amount"])

        if amount > 0:
            settlements.append(Settlement(
                payer_id=debtor["id"],
                recipient_id=creditor["id"],
                amount=amount,
                suggested_at=suggested_at,
                payer_name=debtor["name"],
                recipient_name=creditor["name"]
            ))

        debtor["amount"] -= amount
        creditor["amount"] -= amount

        if debtor["amount"] == 0:
            i += 1
        if creditor["amount"] == 0:
            j += 1

    return settlements
