"""
Core Application - Infrastructure & Base Classes

Generic building blocks shared by the domain apps (merchants, orders,
payments, returns). No marketplace logic lives here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes and HTTP status
    - ValidationError, NotFoundError, PermissionDeniedError
    - ConflictError, InvalidStateError
    - MissingConfigurationError, ExternalServiceError

API (import from core.exception_handler):
    - api_exception_handler: Renders BaseApplicationError for DRF views

Note:
    Django models and model mixins are NOT imported here to avoid
    AppRegistryNotReady errors. Import them directly from their modules.
"""

from .services import BaseService, ServiceResult

from .exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    InvalidStateError,
    MissingConfigurationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

__all__ = [
    # Services
    "BaseService",
    "ServiceResult",
    # Exceptions
    "BaseApplicationError",
    "ConflictError",
    "ExternalServiceError",
    "InvalidStateError",
    "MissingConfigurationError",
    "NotFoundError",
    "PermissionDeniedError",
    "ValidationError",
]
