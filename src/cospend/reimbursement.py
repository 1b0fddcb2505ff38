"""Turning settlement transactions into reimbursement bills."""

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from .exceptions import AutoSettlementError
from .models import Bill, MemberId, Transaction

logger = logging.getLogger(__name__)

REIMBURSEMENT_CATEGORY_ID = -11


def round_amount(amount: float, precision: int = 2) -> float:
    """
    Round a monetary amount to the currency precision.

    Uses ROUND_HALF_UP on the decimal representation, so 0.125 becomes 0.13
    rather than the banker's 0.12.

    Args:
        amount: Exact amount
        precision: Number of decimal places

    Returns:
        Rounded amount
    """
    quantum = Decimal(1).scaleb(-precision)
    return float(Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP))


def reimbursement_timestamp(max_timestamp: int | None = None) -> int:
    """
    Date for reimbursement bills.

    Bills are dated just before ``max_timestamp`` so they fall inside the
    period that was settled, or now when no bound was given.
    """
    if max_timestamp:
        return max_timestamp - 1
    return int(datetime.now().timestamp())


def build_reimbursement_bills(
    transactions: list[Transaction],
    member_names: dict[MemberId, str],
    precision: int = 2,
    timestamp: int | None = None,
    category_id: int = REIMBURSEMENT_CATEGORY_ID,
    payment_mode: str = "n",
) -> list[Bill]:
    """
    Build one reimbursement bill per settlement transaction.

    Each bill is paid by the transaction's payer for the sole benefit of the
    receiver, for the amount rounded to ``precision``, titled
    "<payer> → <receiver>".

    Args:
        transactions: Settlement transactions
        member_names: Display name per member id
        precision: Currency decimal places
        timestamp: Bill date (unix seconds), defaults to now
        category_id: Category of the created bills
        payment_mode: Payment mode of the created bills

    Returns:
        New bills, not yet persisted (``id`` is None)

    Raises:
        AutoSettlementError: If a transaction references an unknown member
    """
    if timestamp is None:
        timestamp = reimbursement_timestamp()

    bills = []
    for transaction in transactions:
        try:
            from_name = member_names[transaction.from_id]
            to_name = member_names[transaction.to_id]
        except KeyError as e:
            raise AutoSettlementError(
                f"Cannot create reimbursement bill: unknown member {e.args[0]}"
            ) from e

        amount = round_amount(transaction.amount, precision)
        if amount == 0.0:
            logger.info(
                f"Skipping reimbursement {from_name} → {to_name}: "
                f"{transaction.amount} rounds to zero"
            )
            continue

        bills.append(
            Bill(
                what=f"{from_name} → {to_name}",
                payer_id=transaction.from_id,
                amount=amount,
                owers=[transaction.to_id],
                timestamp=timestamp,
                category_id=category_id,
                payment_mode=payment_mode,
            )
        )

    logger.info(f"Built {len(bills)} reimbursement bills")
    return bills
