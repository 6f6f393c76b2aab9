"""
Review routes: public submission through a QR token, listing, moderation
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.qr_token import QRToken
from ..models.review import Review
from ..auth.dependencies import AuthUser, require_admin
from ..core.logging import get_logger
from ..schemas.review import (
    ReviewCreate,
    ReviewCreatedResponse,
    ReviewListResponse,
    ReviewModerationUpdate,
    ReviewModerationResponse,
)
from ..utils.badges import award_badges
from ..utils.email import send_new_review_email
from ..utils.rate_limit import check_rate_limit
from ..utils.ratings import recompute_worker_rating

router = APIRouter()

logger = get_logger(__name__)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ReviewCreatedResponse)
def submit_review(
    review_data: ReviewCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db)
):
    """
    Submit a customer review through a QR token (public endpoint)

    - 404 if the token does not exist, 410 if it has been deactivated
    - 429 with ``already_reviewed`` if this device reviewed the worker in the last day
    """
    token = db.query(QRToken).filter(QRToken.id == review_data.qr_token_id).first()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid QR code"
        )

    if not token.is_active:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="This QR code is no longer active"
        )

    if not check_rate_limit(review_data.fingerprint, token.worker_id):
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={
                "detail": "You have already reviewed this person recently",
                "already_reviewed": True,
            },
        )

    try:
        review = Review(
            worker_id=token.worker_id,
            qr_token_id=token.id,
            rating=review_data.rating,
            comment=review_data.comment,
            reviewer_name=review_data.reviewer_name,
            reviewer_fingerprint=review_data.fingerprint,
            is_verified=True,
            is_flagged=False,
            created_by="reviewer"
        )
        db.add(review)
        token.scan_count = token.scan_count + 1
        db.commit()
        db.refresh(review)
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Failed to save review for token {token.id}", exc_info=True)
        raise

    logger.info(
        f"Review {review.id} ({review.rating}★) recorded for worker {review.worker_id}",
        extra={"event": "review_submitted", "review_id": review.id, "worker_id": review.worker_id},
    )

    # Not atomic with the insert; a concurrent submission may briefly leave stale totals
    worker = recompute_worker_rating(db, token.worker_id)
    award_badges(db, worker)

    if worker.email:
        background_tasks.add_task(
            send_new_review_email,
            worker_email=worker.email,
            worker_name=worker.display_name,
            rating=review.rating,
            worker_slug=worker.slug,
            reviewer_name=review.reviewer_name,
            comment=review.comment,
        )

    return ReviewCreatedResponse(success=True, review_id=review.id)


@router.get("", response_model=ReviewListResponse)
def list_reviews(
    worker_id: int = Query(...),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db)
):
    """Get a worker's visible reviews, newest first (public endpoint)"""
    query = db.query(Review).filter(
        Review.worker_id == worker_id,
        Review.is_flagged == False  # noqa: E712
    )
    total = query.count()
    reviews = query.order_by(desc(Review.created_at), desc(Review.id)).offset(offset).limit(limit).all()

    return ReviewListResponse(reviews=reviews, total=total)


@router.patch("/{review_id}/moderation", response_model=ReviewModerationResponse)
def moderate_review(
    review_id: int,
    update: ReviewModerationUpdate,
    current_user: AuthUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Flag or unflag a review (admin only); the worker's rating is recomputed"""
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found"
        )

    review.is_flagged = update.is_flagged
    review.updated_by = current_user.id
    db.commit()
    db.refresh(review)

    logger.info(
        f"Review {review.id} {'flagged' if review.is_flagged else 'unflagged'} by {current_user.id}",
        extra={"event": "review_moderated", "review_id": review.id, "is_flagged": review.is_flagged},
    )

    worker = recompute_worker_rating(db, review.worker_id)
    award_badges(db, worker)

    return review
