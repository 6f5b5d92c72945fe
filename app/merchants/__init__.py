"""
Merchants app.

Merchant onboarding and administration:
- MerchantApplication review (approve, reject, request more info)
- Merchant lifecycle (active, suspended) and commission tiers
- Payout bank details and the gateway transfer recipient

Usage:
    from merchants.services import MerchantService
"""
