"""
Merchant-specific exceptions.

Usage:
    from merchants.exceptions import ApplicationAlreadyProcessedError

    if application.status != ApplicationStatus.PENDING:
        return ServiceResult.from_exception(
            ApplicationAlreadyProcessedError(
                "Application already processed",
                details={"application_id": str(application.id), "status": application.status},
            )
        )
"""

from core.exceptions import InvalidStateError


class ApplicationAlreadyProcessedError(InvalidStateError):
    """Raised when a review action targets an application that is not pending."""

    default_error_code: str = "APPLICATION_ALREADY_PROCESSED"
