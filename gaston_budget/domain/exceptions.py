"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidInputError(DomainException):
    """Calculation input is out of range (non-positive principal, negative rate, ...)"""

    pass


class UnknownCategoryError(DomainException):
    """Expense category is not configured for the entity"""

    pass


class EntityNotFoundError(DomainException):
    """Entity does not exist"""

    pass


class DocumentNotFoundError(DomainException):
    """Requested item (debt, goal, ledger entry) is not in the document"""

    pass


class ConcurrentUpdateError(DomainException):
    """Stored document revision changed since it was read"""

    def __init__(self, expected_revision: int, actual_revision: int):
        super().__init__(
            f"Document revision is {actual_revision}, expected {expected_revision}"
        )
        self.expected_revision = expected_revision
        self.actual_revision = actual_revision


class ConfirmationRequiredError(DomainException):
    """Destructive operation was requested without explicit confirmation"""

    pass


class NonConvergenceWarning(UserWarning):
    """Amortization hit its iteration safety bound before paying off the balance"""

    pass
