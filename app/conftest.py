"""
Project-wide pytest fixtures and test markers.

App-specific fixtures are defined in each app's tests/conftest.py.
"""

import pytest
from rest_framework.test import APIClient


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_integration.py → e2e (full workflows across apps)
    - test_views.py, test_services.py, test_tasks.py, etc. → integration
    - test_models.py, test_status_rules.py, test_paystack_adapter.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_integration.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_tasks.py",
        "test_webhooks.py",
        "test_handlers.py",
        "test_aggregation.py",
        "test_processing.py",
        "test_reconciliation.py",
    ]

    unit_patterns = [
        "test_models.py",
        "test_serializers.py",
        "test_exceptions.py",
        "test_status_rules.py",
        "test_paystack_adapter.py",
        "test_state_transitions.py",
    ]

    for item in items:
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)


# =============================================================================
# Celery
# =============================================================================


@pytest.fixture(autouse=True)
def celery_eager():
    """Run .delay() calls inline."""
    from config.celery import app

    app.conf.task_always_eager = True
    yield


@pytest.fixture(autouse=True)
def clear_cache():
    """Start every test with an empty cache (cached bank lists)."""
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()


# =============================================================================
# API Clients
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated DRF client."""
    return APIClient()


@pytest.fixture
def admin_api_client(admin_user):
    """DRF client authenticated as a staff superuser (pytest-django admin_user)."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def staff_id(admin_user):
    """Actor id services receive for the admin user."""
    return str(admin_user.pk)


# =============================================================================
# Gateway
# =============================================================================


@pytest.fixture
def fake_gateway():
    """
    Replace the Paystack adapter for every service with an in-memory fake.

    Usage:
        def test_refund(fake_gateway):
            fake_gateway.refund_error = PaystackAPIUnavailableError("down")
    """
    from payments.adapters import GatewayAdapterMixin
    from payments.tests.fakes import FakePaystackGateway

    gateway = FakePaystackGateway()
    GatewayAdapterMixin.set_gateway_adapter(gateway)
    yield gateway
    GatewayAdapterMixin.set_gateway_adapter(None)
