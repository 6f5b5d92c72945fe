"""
Post-commit side effects.

Notifications must only go out once the state they describe is committed,
and their failure must never surface to the caller. run_on_commit registers
a callable with transaction.on_commit and wraps it so any exception is
logged and swallowed. Outside a transaction the callable runs immediately.

Usage:
    from toolkit.side_effects import run_on_commit

    with transaction.atomic():
        payout.complete()
        payout.save()
        run_on_commit(notify_payout_completed, payout.id, description="payout email")
"""

from __future__ import annotations

import logging
from functools import partial

from django.db import transaction

logger = logging.getLogger(__name__)


def _run_safely(func, description: str) -> None:
    try:
        func()
    except Exception:
        logger.warning(f"Side effect failed: {description}", exc_info=True)


def run_on_commit(func, *args, description: str = "", **kwargs) -> None:
    """
    Schedule func(*args, **kwargs) to run after the current transaction commits.

    Args:
        func: Callable to run
        description: Label used in the failure log line
    """
    call = partial(func, *args, **kwargs)
    transaction.on_commit(
        partial(_run_safely, call, description or getattr(func, "__name__", "side effect"))
    )
