"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Deal input is missing or out of range"""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class ComputationError(DomainException):
    """Arithmetic reached a state validated input cannot produce"""

    pass


class InvalidStatusError(DomainException):
    """Status string is not part of the contract workflow"""

    pass


class InvalidTransitionError(DomainException):
    """Status change is not allowed from the contract's current status"""

    pass


class NotarizationError(DomainException):
    """Notary service is not configured or failed to record the contract"""

    pass


class LedgerAPIError(DomainException):
    """Horizon returned an error or is unavailable"""

    pass


class LedgerNotFoundError(LedgerAPIError):
    """Requested account or transaction does not exist on the ledger"""

    pass
