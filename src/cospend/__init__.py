"""Cospend - Settle shared expenses between project members."""

__version__ = "0.1.0"

from .balances import compute_balances
from .config import Settings, load_settings
from .models import (
    BalanceMap,
    Bill,
    Member,
    MemberId,
    Project,
    Settlement,
    Transaction,
)
from .reimbursement import build_reimbursement_bills, round_amount
from .service import SettlementService
from .settlement import apply_transactions, centered_settlement, optimal_settlement

__all__ = [
    "Settings",
    "load_settings",
    "BalanceMap",
    "Bill",
    "Member",
    "MemberId",
    "Project",
    "Settlement",
    "Transaction",
    "compute_balances",
    "build_reimbursement_bills",
    "round_amount",
    "SettlementService",
    "apply_transactions",
    "centered_settlement",
    "optimal_settlement",
]
