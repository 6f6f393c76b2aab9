"""
Review rate limiting per (fingerprint, worker)
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple
import threading
from ..config import settings
from ..core.logging import get_logger

logger = get_logger(__name__)

# In-memory storage, local to this process (not shared between instances)
# Format: {(fingerprint, worker_id): reset_at}
_review_attempts: Dict[Tuple[str, int], datetime] = {}
_lock = threading.Lock()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _prune_expired(now: datetime) -> int:
    """Drop records whose window has passed. Caller holds the lock."""
    expired_keys = [key for key, reset_at in _review_attempts.items() if now > reset_at]
    for key in expired_keys:
        del _review_attempts[key]
    return len(expired_keys)


def check_rate_limit(fingerprint: str, worker_id: int, now: Optional[datetime] = None) -> bool:
    """
    Record a review attempt and tell whether it is allowed

    Only one record is kept per key. The first attempt opens a window of
    ``review_rate_limit_hours``; every further attempt inside that window is
    rejected and does not extend it. Expired records are dropped on each call
    so the table only holds open windows.

    Returns:
        True if the review may proceed, False if rate limited
    """
    now = now or _utcnow()
    key = (fingerprint, worker_id)

    with _lock:
        _prune_expired(now)
        reset_at = _review_attempts.get(key)
        if reset_at is None:
            _review_attempts[key] = now + timedelta(hours=settings.review_rate_limit_hours)
            return True

    logger.info(f"Rate limited review for worker {worker_id} until {reset_at.isoformat()}")
    return False


def clear_rate_limits() -> None:
    """Forget every recorded attempt"""
    with _lock:
        _review_attempts.clear()
