"""Balance settlement engine.

Turns a map of member balances into a list of point-to-point transactions
that brings every balance back to zero. Two policies are available:

- ``optimal_settlement``: greedy debt simplification, always matching the
  largest creditor with the largest debtor.
- ``centered_settlement``: every member settles with one chosen member.

Both are pure functions over the balance map they receive. Amounts are
emitted exactly as computed; rounding to the currency precision is left to
whoever turns the transactions into bills.
"""

import logging
import sys

from .models import BalanceMap, MemberId, Transaction

logger = logging.getLogger(__name__)

DEFAULT_PRECISION = 2

# (member id, balance) working entry for the reduction
Entry = tuple[MemberId, float]


def zero_threshold(precision: int = DEFAULT_PRECISION) -> float:
    """
    Magnitude below which a balance counts as settled.

    Only floating point drift is ignored: seven decimal places below the
    currency precision, e.g. 1e-9 for a two-decimal currency. Sub-cent
    balances still take part in the settlement so that several of them can
    offset a real balance on the other side.

    Args:
        precision: Number of decimal places of the currency

    Returns:
        The threshold as a positive float
    """
    return max(10.0 ** -(precision + 7), sys.float_info.min)


def sort_entries(entries: list[Entry], reverse: bool = False) -> list[Entry]:
    """
    Sort working entries by balance with linear insertion.

    Ascending order places an entry after every existing entry with an equal
    balance. Descending order (``reverse=True``) places it before them, so
    each descending pass flips the relative order of ties. Settlement output
    depends on this exact tie handling.

    Args:
        entries: (member id, balance) pairs
        reverse: Sort by descending balance

    Returns:
        A new sorted list
    """
    result: list[Entry] = []
    for entry in entries:
        i = 0
        if reverse:
            while i < len(result) and entry[1] < result[i][1]:
                i += 1
        else:
            while i < len(result) and entry[1] >= result[i][1]:
                i += 1
        result.insert(i, entry)
    return result


def split_balances(
    balances: BalanceMap, precision: int = DEFAULT_PRECISION
) -> tuple[list[Entry], list[Entry]]:
    """
    Partition balances into creditors and debtors.

    Settled members (balance within the zero threshold) are left out.

    Returns:
        Tuple of (creditors, debtors) in balance map order
    """
    threshold = zero_threshold(precision)
    creditors: list[Entry] = []
    debtors: list[Entry] = []
    for member_id, balance in balances.items():
        if balance >= threshold:
            creditors.append((member_id, balance))
        elif balance <= -threshold:
            debtors.append((member_id, balance))
    return creditors, debtors


def optimal_settlement(
    balances: BalanceMap, precision: int = DEFAULT_PRECISION
) -> list[Transaction]:
    """
    Compute a small set of transactions that settles every balance.

    Steps, repeated until no creditor or no debtor is left:
    1. Take the creditor with the largest balance and the debtor with the
       most negative balance
    2. Move the smaller of the two magnitudes from debtor to creditor
    3. Put back whichever side still has an open balance

    Each step closes at least one member, so at most n - 1 transactions
    are emitted for n members with an open balance.

    Args:
        balances: Signed balance per member (should sum to zero)
        precision: Currency decimal places, used only to recognize
                   settled balances

    Returns:
        Transactions in emission order
    """
    threshold = zero_threshold(precision)
    creditors, debtors = split_balances(balances, precision)
    transactions: list[Transaction] = []

    while creditors and debtors:
        creditors = sort_entries(creditors)
        debtors = sort_entries(debtors, reverse=True)

        debtor_id, debtor_balance = debtors.pop()
        creditor_id, creditor_balance = creditors.pop()

        amount = min(abs(debtor_balance), abs(creditor_balance))
        transactions.append(
            Transaction(from_id=debtor_id, to_id=creditor_id, amount=amount)
        )

        debtor_balance += amount
        if debtor_balance <= -threshold:
            debtors.append((debtor_id, debtor_balance))
            debtors = sort_entries(debtors, reverse=True)

        creditor_balance -= amount
        if creditor_balance >= threshold:
            creditors.append((creditor_id, creditor_balance))
            creditors = sort_entries(creditors)

    leftover = creditors + debtors
    if leftover:
        # Balances that do not sum to zero leave one side open
        logger.warning(
            f"Settlement left {len(leftover)} unmatched balance(s): {leftover}"
        )

    logger.debug(
        f"Optimal settlement of {len(balances)} balances: "
        f"{len(transactions)} transactions"
    )
    return transactions


def centered_settlement(
    balances: BalanceMap,
    center_id: MemberId,
    precision: int = DEFAULT_PRECISION,
) -> list[Transaction]:
    """
    Settle every member with a single center member.

    Creditors are paid by the center and debtors pay the center, in balance
    map order. The center's own balance is never read: if the balances sum
    to zero it is settled by the other transactions. A center that is not in
    the balance map gets no special treatment.

    Args:
        balances: Signed balance per member
        center_id: Member every transaction goes through
        precision: Currency decimal places, used only to recognize
                   settled balances

    Returns:
        Transactions in balance map order
    """
    threshold = zero_threshold(precision)
    transactions: list[Transaction] = []

    if center_id not in balances:
        logger.info(f"Center member {center_id} has no balance entry")

    for member_id, balance in balances.items():
        if member_id == center_id:
            continue
        if balance >= threshold:
            transactions.append(
                Transaction(from_id=center_id, to_id=member_id, amount=balance)
            )
        elif balance <= -threshold:
            transactions.append(
                Transaction(from_id=member_id, to_id=center_id, amount=-balance)
            )

    return transactions


def apply_transactions(
    balances: BalanceMap, transactions: list[Transaction]
) -> BalanceMap:
    """
    Apply transactions to a copy of the balances.

    The payer's balance goes up and the receiver's goes down, so a complete
    settlement yields a map of (near) zeros. Members that only appear in
    transactions are added.

    Returns:
        The resulting balances
    """
    result = dict(balances)
    for transaction in transactions:
        result[transaction.from_id] = result.get(transaction.from_id, 0.0) + (
            transaction.amount
        )
        result[transaction.to_id] = result.get(transaction.to_id, 0.0) - (
            transaction.amount
        )
    return result
