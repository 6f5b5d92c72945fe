"""
Helper functions for handling merchant PII in logs and responses.

Usage:
    from toolkit.helpers import mask_account_number, mask_email

    logger.info(f"Recipient created for {mask_account_number(account_number)}")
"""

from __future__ import annotations


def mask_email(email: str) -> str:
    """
    Mask email for display.

    Keeps first character and domain visible.

    Example:
        masked = mask_email("store@example.com")  # "s***@example.com"
    """
    if not email or "@" not in email:
        return "***"

    local, domain = email.rsplit("@", 1)

    if len(local) > 1:
        masked_local = local[0] + "***"
    else:
        masked_local = "***"

    return f"{masked_local}@{domain}"


def mask_account_number(account_number: str) -> str:
    """
    Mask a bank account number, keeping the last four digits.

    Example:
        mask_account_number("0123456789")  # "******6789"
    """
    if not account_number:
        return ""
    if len(account_number) <= 4:
        return "*" * len(account_number)
    return "*" * (len(account_number) - 4) + account_number[-4:]
