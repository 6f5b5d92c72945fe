"""
Return-specific exceptions.

Exception Hierarchy:
    NotFoundError
    └── ReturnNotFoundError (404)
    InvalidStateError
    └── InvalidReturnStateError - Action not allowed from the current status (400)
    ExternalServiceError
    └── RefundProcessingError - Refund could not be made or recorded (502)
"""

from core.exceptions import ExternalServiceError, InvalidStateError, NotFoundError


class ReturnNotFoundError(NotFoundError):
    default_error_code: str = "RETURN_NOT_FOUND"


class InvalidReturnStateError(InvalidStateError):
    default_error_code: str = "INVALID_RETURN_STATE"


class RefundProcessingError(ExternalServiceError):
    """
    Raised when a return's refund fails at the gateway or cannot be saved.

    The return keeps its approved status, so the refund can be retried.
    """

    default_error_code: str = "REFUND_PROCESSING_FAILED"
