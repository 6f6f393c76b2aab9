"""
Badge eligibility rules
"""

from typing import Iterable, List, Sequence

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..enums.badge import BadgeRule, AwardedBy
from ..models.badge import Badge, WorkerBadge
from ..models.review import Review
from ..schemas.badge import BadgeCriteria
from ..core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_STREAK_LENGTH = 10


def _streak_eligible(reviews: Sequence, criteria: BadgeCriteria) -> bool:
    length = int(criteria.threshold) if criteria.threshold is not None else DEFAULT_STREAK_LENGTH
    recent = sorted(reviews, key=lambda r: (r.created_at, r.id), reverse=True)[:length]
    if len(recent) < length:
        return False
    if criteria.consecutive:
        return all(review.rating == 5 for review in recent)
    return all(review.rating >= 4 for review in recent)


def is_eligible(worker, reviews: Sequence, criteria: BadgeCriteria) -> bool:
    """Check a single rule against the worker's current stats and reviews"""
    if criteria.type == BadgeRule.REVIEW_COUNT:
        return worker.review_count >= (criteria.threshold or 0)

    if criteria.type == BadgeRule.RATING_THRESHOLD:
        min_reviews = criteria.min_reviews if criteria.min_reviews is not None else 1
        return (
            worker.overall_rating >= (criteria.threshold or 0)
            and worker.review_count >= min_reviews
        )

    if criteria.type == BadgeRule.STREAK:
        return _streak_eligible(reviews, criteria)

    # Manual and course badges are awarded by people, never by rule
    return False


def evaluate_badges(worker, reviews: Sequence, badges: Iterable, earned_badge_ids: Iterable[int]) -> List[int]:
    """
    Return ids of badges the worker has just become eligible for.

    Args:
        worker: object with ``review_count`` and ``overall_rating``
        reviews: the worker's non-flagged reviews (``rating``, ``created_at``, ``id``)
        badges: catalog, in the order results should come back
        earned_badge_ids: badges already held; these are never re-evaluated

    Returns:
        Newly earned badge ids in catalog order
    """
    earned = set(earned_badge_ids)
    new_badge_ids = []

    for badge in badges:
        if badge.id in earned:
            continue

        try:
            criteria = BadgeCriteria.model_validate(badge.criteria_json or {})
        except ValidationError as e:
            logger.warning(f"Skipping badge {badge.id} with invalid criteria: {e}")
            continue

        if is_eligible(worker, reviews, criteria):
            new_badge_ids.append(badge.id)

    return new_badge_ids


def award_badges(db: Session, worker) -> List[int]:
    """
    Evaluate the catalog for a worker and store any newly earned badges.

    Runs after the worker's rating has been recomputed. Badges are only ever
    added here, never revoked.
    """
    badges = db.query(Badge).order_by(Badge.id).all()
    earned_ids = [
        row.badge_id
        for row in db.query(WorkerBadge.badge_id).filter(WorkerBadge.worker_id == worker.id).all()
    ]
    reviews = db.query(Review).filter(
        Review.worker_id == worker.id,
        Review.is_flagged == False  # noqa: E712
    ).all()

    new_badge_ids = evaluate_badges(worker, reviews, badges, earned_ids)
    if not new_badge_ids:
        return []

    # One commit per badge so a lost race only drops that badge
    awarded = []
    for badge_id in new_badge_ids:
        db.add(WorkerBadge(
            worker_id=worker.id,
            badge_id=badge_id,
            awarded_by=AwardedBy.SYSTEM,
            created_by="system"
        ))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.warning(f"Badge {badge_id} already held by worker {worker.id}, skipping")
            continue
        awarded.append(badge_id)

    if awarded:
        logger.info(
            f"Awarded {len(awarded)} badge(s) to worker {worker.id}",
            extra={"event": "badges_awarded", "worker_id": worker.id, "badge_ids": awarded},
        )
    return awarded
