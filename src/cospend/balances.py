"""Member balance computation from project bills."""

import logging

from .exceptions import UnknownMemberError
from .models import BalanceMap, Bill, Member, MemberId

logger = logging.getLogger(__name__)


def ower_weight(weight: float) -> float:
    """Share count of an ower; a zero weight counts as one share."""
    return 1.0 if weight == 0.0 else weight


def compute_balances(
    members: list[Member],
    bills: list[Bill],
    max_timestamp: int | None = None,
) -> BalanceMap:
    """
    Compute each member's balance (paid - owed) over a set of bills.

    Every member starts at 0. For each bill the payer is credited the full
    amount and each ower is debited a share proportional to their weight.
    Bills in the trash bin are ignored.

    Args:
        members: Project members, in the order balances should be listed
        bills: Project bills
        max_timestamp: Only include bills dated strictly before this time

    Returns:
        Balance per member id

    Raises:
        UnknownMemberError: If a bill references a member not in ``members``
    """
    weights: dict[MemberId, float] = {}
    balances: BalanceMap = {}
    for member in members:
        weights[member.id] = member.weight
        balances[member.id] = 0.0

    counted = 0
    for bill in bills:
        if bill.deleted:
            continue
        if max_timestamp is not None and bill.timestamp >= max_timestamp:
            continue
        if not bill.owers:
            logger.warning(f"Bill {bill.id} ('{bill.what}') has no owers, skipping")
            continue

        if bill.payer_id not in balances:
            raise UnknownMemberError(bill.payer_id)
        for ower_id in bill.owers:
            if ower_id not in balances:
                raise UnknownMemberError(ower_id)

        balances[bill.payer_id] += bill.amount

        nb_shares = sum(ower_weight(weights[ower_id]) for ower_id in bill.owers)
        for ower_id in bill.owers:
            balances[ower_id] -= bill.amount / nb_shares * ower_weight(weights[ower_id])
        counted += 1

    logger.debug(f"Computed balances of {len(members)} members from {counted} bills")
    return balances
