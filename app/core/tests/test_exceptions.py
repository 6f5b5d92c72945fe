"""
Tests for the core exception hierarchy and its API rendering.
"""

import pytest
from rest_framework.exceptions import NotAuthenticated

from core.exception_handler import api_exception_handler
from core.exceptions import (
    BaseApplicationError,
    ConflictError,
    ExternalServiceError,
    InvalidStateError,
    MissingConfigurationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


class TestBaseApplicationError:
    """Tests for BaseApplicationError."""

    def test_defaults_error_code_from_class(self):
        """Should fall back to the class default error code."""
        error = NotFoundError("Payout not found")

        assert error.error_code == "NOT_FOUND"
        assert error.details == {}

    def test_to_dict_omits_empty_details(self):
        """Should only include details when provided."""
        assert ValidationError("bad").to_dict() == {
            "error": "bad",
            "error_code": "VALIDATION_ERROR",
        }

    def test_to_dict_includes_details(self):
        """Should include details and a custom error code."""
        error = InvalidStateError(
            "Payout is completed",
            error_code="INVALID_PAYOUT_STATE",
            details={"status": "completed"},
        )

        assert error.to_dict()["details"] == {"status": "completed"}
        assert str(error) == "[INVALID_PAYOUT_STATE] Payout is completed"


class TestHttpStatus:
    """Each error kind maps to a distinct HTTP status."""

    @pytest.mark.parametrize(
        "error_class,expected",
        [
            (ValidationError, 400),
            (NotFoundError, 404),
            (PermissionDeniedError, 403),
            (ConflictError, 409),
            (InvalidStateError, 400),
            (MissingConfigurationError, 400),
            (ExternalServiceError, 502),
        ],
    )
    def test_status(self, error_class, expected):
        assert error_class("x").http_status == expected

    def test_invalid_state_is_a_conflict(self):
        assert issubclass(InvalidStateError, ConflictError)
        assert issubclass(ConflictError, BaseApplicationError)


class TestApiExceptionHandler:
    """Tests for the DRF exception handler."""

    def test_renders_application_error(self):
        """Should render the error body with its own status."""
        response = api_exception_handler(
            ExternalServiceError("Gateway down", details={"service": "paystack"}),
            {"view": None},
        )

        assert response.status_code == 502
        assert response.data["error"] == "Gateway down"
        assert response.data["details"] == {"service": "paystack"}

    def test_defers_to_drf_for_other_errors(self):
        """Should let DRF handle its own API exceptions."""
        response = api_exception_handler(NotAuthenticated(), {"view": None})

        assert response.status_code == 401

    def test_returns_none_for_unhandled_errors(self):
        """Should return None so Django reports a server error."""
        assert api_exception_handler(RuntimeError("boom"), {"view": None}) is None
