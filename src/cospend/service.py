"""Service layer that composes balance computation and settlement.

This module provides a higher-level API over a project: settlement plans
and automatic settlement, in a functional, immutable way.
"""

import logging

from .balances import compute_balances
from .config import Settings
from .models import Bill, MemberId, Project, Settlement
from .reimbursement import build_reimbursement_bills, reimbursement_timestamp
from .settlement import centered_settlement, optimal_settlement

logger = logging.getLogger(__name__)


class SettlementService:
    """Service for computing and applying project settlement plans."""

    def __init__(self, settings: Settings):
        """Initialize the settlement service."""
        self.settings = settings

    def get_project_settlement(
        self,
        project: Project,
        centered_on: MemberId | None = None,
        max_timestamp: int | None = None,
    ) -> Settlement:
        """
        Compute the settlement plan of a project.

        Args:
            project: The project to settle
            centered_on: Settle everyone with this member instead of
                         minimizing transactions
            max_timestamp: Only account for bills dated before this time

        Returns:
            Settlement with transactions and the balances they settle
        """
        balances = compute_balances(project.members, project.bills, max_timestamp)

        if centered_on is None:
            transactions = optimal_settlement(balances, self.settings.precision)
        else:
            transactions = centered_settlement(
                balances, centered_on, self.settings.precision
            )

        logger.info(
            f"Project {project.id}: {len(transactions)} settlement transactions"
            + (f" centered on member {centered_on}" if centered_on is not None else "")
        )

        return Settlement(
            transactions=transactions, balances=balances, centered_on=centered_on
        )

    def auto_settlement(
        self,
        project: Project,
        centered_on: MemberId | None = None,
        precision: int | None = None,
        max_timestamp: int | None = None,
    ) -> list[Bill]:
        """
        Create the reimbursement bills that settle a project.

        Bills are dated just before ``max_timestamp`` (or now) and their
        amounts are rounded to ``precision`` (or the configured precision).

        Args:
            project: The project to settle
            centered_on: Optional center member
            precision: Decimal places of the bill amounts
            max_timestamp: Only settle bills dated before this time

        Returns:
            Reimbursement bills with ids following the project's bills

        Raises:
            AutoSettlementError: If a transaction references an unknown member
        """
        if precision is None:
            precision = self.settings.precision

        settlement = self.get_project_settlement(project, centered_on, max_timestamp)
        bills = build_reimbursement_bills(
            settlement.transactions,
            project.member_names(),
            precision=precision,
            timestamp=reimbursement_timestamp(max_timestamp),
            category_id=self.settings.reimbursement_category_id,
            payment_mode=self.settings.reimbursement_payment_mode,
        )
        return assign_bill_ids(project, bills)


def assign_bill_ids(project: Project, bills: list[Bill]) -> list[Bill]:
    """
    Give new bills ids following the highest bill id of the project.

    This is a pure function; the input bills are not modified.
    """
    next_id = max((bill.id for bill in project.bills if bill.id is not None), default=0)
    numbered = []
    for bill in bills:
        next_id += 1
        numbered.append(bill.model_copy(update={"id": next_id}))
    return numbered


def with_bills(project: Project, bills: list[Bill]) -> Project:
    """Return a copy of the project with extra bills appended."""
    return project.model_copy(update={"bills": [*project.bills, *bills]})
