"""Pydantic domain models for Cospend."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# Opaque member identifier supplied by the caller
MemberId = int | str

# Signed balance per member: positive = is owed money, negative = owes money
BalanceMap = dict[MemberId, float]

# ============================================================================
# Project Models
# ============================================================================


class Member(BaseModel):
    """A project member."""

    id: MemberId
    name: str
    weight: float = Field(default=1.0, ge=0.0)  # share count on split bills
    activated: bool = True


class Bill(BaseModel):
    """A ledger entry: one payer paid an amount for a set of owers."""

    id: int | None = None
    what: str
    payer_id: MemberId
    amount: float
    owers: list[MemberId]
    timestamp: int  # unix seconds
    category_id: int = 0
    payment_mode: str = "n"
    repeat: Literal["n", "d", "w", "b", "s", "m", "y"] = "n"
    deleted: bool = False  # in the trash bin


class Project(BaseModel):
    """A shared expense project: its members and its bills."""

    id: str
    name: str
    members: list[Member]
    bills: list[Bill] = Field(default_factory=list)

    def member_names(self) -> dict[MemberId, str]:
        """Map member ids to display names."""
        return {member.id: member.name for member in self.members}


# ============================================================================
# Settlement Models
# ============================================================================


class Transaction(BaseModel):
    """A settlement transaction: ``from_id`` pays ``to_id`` the given amount."""

    model_config = ConfigDict(frozen=True)

    from_id: MemberId = Field(serialization_alias="from")
    to_id: MemberId = Field(serialization_alias="to")
    amount: float = Field(gt=0.0)  # exact, never rounded by the engine


class Settlement(BaseModel):
    """A settlement plan together with the balances it was computed from."""

    transactions: list[Transaction]
    balances: BalanceMap
    centered_on: MemberId | None = None
