"""
Worker rating aggregation
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, List

from sqlalchemy.orm import Session

from ..models.review import Review
from ..models.worker import Worker
from ..core.logging import get_logger

logger = get_logger(__name__)


def recompute_worker_rating(db: Session, worker_id: int) -> Worker:
    """
    Recompute overall_rating and review_count from the worker's non-flagged reviews.

    Safe to re-run at any time. Concurrent submissions may race; the next
    recomputation converges.
    """
    worker = db.query(Worker).filter(Worker.id == worker_id).first()
    if not worker:
        raise ValueError(f"Worker {worker_id} not found")

    ratings = [
        row.rating
        for row in db.query(Review.rating).filter(
            Review.worker_id == worker_id,
            Review.is_flagged == False  # noqa: E712
        ).all()
    ]

    count = len(ratings)
    worker.review_count = count
    worker.overall_rating = round(sum(ratings) / count, 2) if count else 0.0
    db.commit()
    db.refresh(worker)

    logger.debug(f"Worker {worker_id} rating recomputed: {worker.overall_rating} over {count} reviews")
    return worker


def rating_breakdown(ratings: List[int]) -> Dict[int, int]:
    """Count reviews per star value, 5 down to 1"""
    breakdown = {star: 0 for star in (5, 4, 3, 2, 1)}
    for rating in ratings:
        if rating in breakdown:
            breakdown[rating] += 1
    return breakdown


def rating_trend(reviews: List[Review], days: int = 30, now: datetime = None) -> List[dict]:
    """Per-day average rating and count for reviews created in the last ``days`` days"""
    now = now or datetime.now(timezone.utc)
    since = (now - timedelta(days=days)).date()

    buckets: Dict[str, List[int]] = {}
    for review in reviews:
        day = review.created_at.date()
        if day < since:
            continue
        buckets.setdefault(day.isoformat(), []).append(review.rating)

    return [
        {"date": day, "rating": round(sum(values) / len(values), 2), "count": len(values)}
        for day, values in sorted(buckets.items())
    ]
