"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ChargeValidationError(DomainException):
    """A captured charge field is missing or invalid"""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class ArithmeticInconsistencyError(DomainException):
    """Installment plan does not add up to the charge total"""

    pass


class GatewayError(DomainException):
    """Payment gateway rejected the request or is unreachable"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class WizardTransitionError(DomainException):
    """Requested wizard step change is not allowed from the current state"""

    pass
