"""Custom exceptions for Cospend."""


class CospendError(Exception):
    """Base exception for all Cospend errors."""

    pass


class ConfigurationError(CospendError):
    """Raised when configuration is invalid or missing."""

    pass


class ProjectFileError(CospendError):
    """Raised when a project document cannot be read or parsed."""

    pass


class UnknownMemberError(CospendError):
    """Raised when a bill or transaction references a member the project lacks."""

    def __init__(self, member_id: int | str, message: str | None = None):
        self.member_id = member_id
        super().__init__(message or f"Member {member_id} is not part of this project")


class AutoSettlementError(CospendError):
    """Raised when settlement transactions cannot be turned into reimbursement bills."""

    pass
