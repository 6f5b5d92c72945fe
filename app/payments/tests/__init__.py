"""
Tests for payments app.

This package contains test modules for:
- test_models.py: Payout and OrderMerchantSplit model tests
- test_state_transitions.py: Payout and split status transitions
- test_aggregation.py: PayoutAggregationService tests
- test_processing.py: PayoutProcessingService tests
- test_reconciliation.py: Transfer webhook settlement tests
- test_views.py: API endpoint tests

Usage:
    pytest payments/tests/
    pytest payments/tests/test_processing.py
"""
