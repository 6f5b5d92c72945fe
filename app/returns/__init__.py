"""
Returns app.

Customer return requests and the refund they lead to:
- Merchant review, admin escalation and admin approval
- Exactly-once refund through the gateway, with restocking

Usage:
    from returns.services import ReturnService
"""
