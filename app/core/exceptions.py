"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for client handling
- An HTTP status per error kind, used by core.exception_handler

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures (400)
    ├── NotFoundError - Resource not found (404)
    ├── PermissionDeniedError - Authorization failures (403)
    ├── ConflictError - State conflicts (409)
    │   └── InvalidStateError - Operation not allowed in current status (400)
    ├── MissingConfigurationError - Required setup absent (400)
    └── ExternalServiceError - Third-party service failures (502)

Usage:
    from core.exceptions import InvalidStateError, NotFoundError

    # Raise with message only
    raise NotFoundError("Order not found")

    # Raise with error code and details
    raise InvalidStateError(
        "Cannot cancel a completed order",
        error_code="ORDER_NOT_CANCELLABLE",
        details={"order_id": str(order.id), "status": order.status},
    )

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=e.http_status)

Note:
    These exceptions are for domain/business logic errors.
    DRF handles API-layer exceptions (serialization, authentication, etc.).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (ids, statuses, upstream messages)
        http_status: Status code used when rendered by the API

    Example:
        try:
            payout = PayoutProcessingService.process_payout(payout_id)
        except NotFoundError as e:
            logger.warning(f"Payout not found: {e.error_code}")
            return Response(e.to_dict(), status=e.http_status)
    """

    default_error_code: str = "APPLICATION_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Payout not found",
                "error_code": "PAYOUT_NOT_FOUND",
                "details": {"payout_id": "..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Malformed amounts (non-positive, not representable in minor units)
    - Fulfillment statuses outside the allowed set
    - Business rule violations on input

    Note:
        For DRF serializer validation, use DRF's built-in validation.
        Use this for service-layer validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"
    http_status: int = 400


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        order = Order.objects.filter(id=order_id).first()
        if not order:
            raise NotFoundError(
                f"Order {order_id} not found",
                error_code="ORDER_NOT_FOUND",
                details={"order_id": str(order_id)},
            )
    """

    default_error_code: str = "NOT_FOUND"
    http_status: int = 404


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the actor lacks permission for an operation.

    Use for:
    - A merchant touching an item belonging to another merchant
    - A role setting a fulfillment status reserved for another role

    Note:
        For authentication failures (missing/invalid credentials), DRF's
        permission classes respond first. Use this for domain authorization.
    """

    default_error_code: str = "PERMISSION_DENIED"
    http_status: int = 403


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Duplicate entries (unique constraint violations)
    - Concurrent modification conflicts
    """

    default_error_code: str = "CONFLICT"
    http_status: int = 409


class InvalidStateError(ConflictError):
    """
    Raised when an entity's status does not permit the requested operation.

    Example:
        if payout.status != PayoutStatus.PENDING:
            raise InvalidStateError(
                f"Payout is {payout.status}, expected pending",
                details={"payout_id": str(payout.id), "status": payout.status},
            )

    Note:
        Rendered as 400 rather than 409: the request is invalid for the
        resource as it stands, and retrying it unchanged will not succeed.
    """

    default_error_code: str = "INVALID_STATE"
    http_status: int = 400


class MissingConfigurationError(BaseApplicationError):
    """
    Raised when required setup for an operation is absent.

    Use for:
    - Merchant without a registered payout recipient
    - Gateway credentials not configured
    """

    default_error_code: str = "MISSING_CONFIGURATION"
    http_status: int = 400


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Use for:
    - Payment gateway API failures
    - Network timeouts
    - Unexpected external service responses

    Note:
        Log the original error for debugging but don't expose
        internal details to clients in production.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    http_status: int = 502
