"""
Orders app.

Customer orders as the back-office sees them:
- Order, OrderItem and per-item fulfillment status
- Inventory quantities and reservations per merchant
- Payment (the customer's charge, target of refunds)
- Fulfillment cascade and order cancellation (services.py)

Usage:
    from orders.services import FulfillmentService
"""
