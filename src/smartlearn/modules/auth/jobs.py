"""
Authentication Background Jobs

Periodically drops expired sign-up codes from the in-memory store so
abandoned sign-ups do not accumulate. ``consume`` still rejects expired
codes on its own; the sweep only reclaims memory.
"""

import logging
from datetime import UTC, datetime
from typing import Any

from apscheduler.triggers.interval import IntervalTrigger

from smartlearn.core.config import settings
from smartlearn.core.scheduler import register_job
from smartlearn.modules.auth.verification import VerificationCodeStore

logger = logging.getLogger(__name__)

JOB_ID_PURGE_PENDING_CODES = "auth_purge_pending_codes"


async def purge_pending_codes(store: VerificationCodeStore) -> dict[str, Any]:
    """
    Remove expired pending verification codes.

    Returns:
        Dict with executed_at, removed and remaining counts
    """
    executed_at = datetime.now(UTC)
    removed = store.purge_expired()
    remaining = len(store)

    if removed:
        logger.info(f"Purged {removed} expired verification code(s), {remaining} pending")

    return {
        "executed_at": executed_at.isoformat(),
        "removed": removed,
        "remaining": remaining,
    }


def register_auth_jobs(store: VerificationCodeStore) -> None:
    """Register the pending-code sweep against ``store``."""

    async def _run() -> None:
        await purge_pending_codes(store)

    interval = settings.verification_cleanup_interval_minutes
    register_job(
        job_id=JOB_ID_PURGE_PENDING_CODES,
        func=_run,
        trigger=IntervalTrigger(minutes=interval),
    )
    logger.info(f"Registered job: {JOB_ID_PURGE_PENDING_CODES} (interval: {interval} min)")
