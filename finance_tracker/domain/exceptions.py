"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UnknownStrategyError(DomainException):
    """Strategy name is not one of the supported values"""

    pass


class InvalidAllocationError(DomainException):
    """Allocation percentages are out of range or exceed 100%"""

    pass


class RecordNotFoundError(DomainException):
    """Requested record does not exist for the user"""

    pass
