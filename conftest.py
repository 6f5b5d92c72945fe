"""
Root pytest configuration for the Django project.

pytest-django loads config.settings (see [tool.pytest.ini_options]), which
reads .env.development: SQLite, eager Celery and local Paystack secrets.
App-specific fixtures are defined in each app's tests/conftest.py.
"""

import os

import django

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")


def pytest_configure():
    """Configure Django settings before tests run."""
    django.setup()

    from django.conf import settings

    # Use fast password hasher for tests (PBKDF2 is too slow with 870K iterations)
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]
