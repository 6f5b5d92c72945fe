"""
Tests for toolkit app.

This package contains test modules for:
- test_services.py: EmailService, AuditService and helper tests

Usage:
    pytest toolkit/tests/
"""
