"""
Badge catalog, progress and manual awards
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.badge import Badge, WorkerBadge
from ..models.worker import Worker
from ..auth.dependencies import AuthUser, get_current_worker, require_badge_issuer
from ..core.logging import get_logger
from ..enums.badge import AwardedBy, BadgeTier, TIER_ORDER
from ..schemas.badge import (
    BadgeResponse,
    BadgeAwardRequest,
    BadgeProgressResponse,
    TierProgress,
    WorkerBadgeResponse,
)

router = APIRouter()

logger = get_logger(__name__)


def sorted_catalog(db: Session) -> List[Badge]:
    badges = db.query(Badge).order_by(Badge.id).all()
    return sorted(badges, key=lambda badge: TIER_ORDER[badge.tier])


@router.get("", response_model=List[BadgeResponse])
def list_badges(db: Session = Depends(get_db)):
    """Full badge catalog, bronze first (public endpoint)"""
    return sorted_catalog(db)


@router.get("/progress", response_model=BadgeProgressResponse)
def get_my_badge_progress(
    worker: Worker = Depends(get_current_worker),
    db: Session = Depends(get_db)
):
    """How much of the catalog the caller has collected, overall and per tier"""
    catalog = sorted_catalog(db)
    earned = worker.worker_badges
    earned_ids = {wb.badge_id for wb in earned}

    tiers = {}
    for tier in BadgeTier:
        tier_badges = [badge for badge in catalog if badge.tier == tier]
        tiers[tier] = TierProgress(
            earned=sum(1 for badge in tier_badges if badge.id in earned_ids),
            total=len(tier_badges),
        )

    return BadgeProgressResponse(
        earned_count=len(earned),
        total_count=len(catalog),
        tiers=tiers,
        earned=sorted(earned, key=lambda wb: wb.awarded_at, reverse=True),
    )


@router.post("/{badge_id}/award", status_code=status.HTTP_201_CREATED, response_model=WorkerBadgeResponse)
def award_badge(
    badge_id: int,
    award: BadgeAwardRequest,
    current_user: AuthUser = Depends(require_badge_issuer),
    db: Session = Depends(get_db)
):
    """Award a badge by hand (employers and admins); each badge is held at most once"""
    badge = db.query(Badge).filter(Badge.id == badge_id).first()
    if not badge:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Badge not found"
        )

    worker = db.query(Worker).filter(Worker.id == award.worker_id).first()
    if not worker:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Worker not found"
        )

    existing = db.query(WorkerBadge).filter(
        WorkerBadge.worker_id == worker.id,
        WorkerBadge.badge_id == badge.id
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Worker already holds this badge"
        )

    worker_badge = WorkerBadge(
        worker_id=worker.id,
        badge_id=badge.id,
        awarded_by=AwardedBy(current_user.role.value),
        created_by=current_user.id
    )
    db.add(worker_badge)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Worker already holds this badge"
        )
    db.refresh(worker_badge)

    logger.info(
        f"Badge {badge.id} awarded to worker {worker.id} by {current_user.role.value} {current_user.id}",
        extra={"event": "badge_awarded", "worker_id": worker.id, "badge_id": badge.id},
    )
    return worker_badge
