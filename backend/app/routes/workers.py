"""
Worker profile routes
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.qr_token import QRToken
from ..models.review import Review
from ..models.worker import Worker
from ..auth.dependencies import AuthUser, get_current_user, get_current_worker
from ..core.logging import get_logger
from ..schemas.worker import (
    WorkerCreate,
    WorkerUpdate,
    WorkerEnvelope,
    WorkerStatsResponse,
    PublicProfileResponse,
)
from ..utils.email import send_welcome_email
from ..utils.profile import slugify
from ..utils.ratings import rating_breakdown, rating_trend

router = APIRouter()

logger = get_logger(__name__)

DEFAULT_QR_LABEL = "My QR Code"
PUBLIC_REVIEW_LIMIT = 20
DASHBOARD_REVIEW_LIMIT = 5


def _visible_reviews(db: Session, worker_id: int):
    return db.query(Review).filter(
        Review.worker_id == worker_id,
        Review.is_flagged == False  # noqa: E712
    ).order_by(desc(Review.created_at), desc(Review.id))


@router.post("", status_code=status.HTTP_201_CREATED, response_model=WorkerEnvelope)
def create_worker(
    worker_data: WorkerCreate,
    background_tasks: BackgroundTasks,
    current_user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Create the caller's worker profile

    A first QR token is created alongside so the worker can start collecting
    reviews right away.
    """
    slug = slugify(worker_data.slug)
    if not slug:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Slug must contain letters or numbers"
        )

    if db.query(Worker).filter(Worker.auth_user_id == current_user.id).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Worker profile already exists"
        )

    if db.query(Worker).filter(Worker.slug == slug).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Slug already taken"
        )

    try:
        worker = Worker(
            auth_user_id=current_user.id,
            email=current_user.email,
            display_name=worker_data.display_name,
            slug=slug,
            trade_category=worker_data.trade_category,
            bio=worker_data.bio or None,
            overall_rating=0.0,
            review_count=0,
            is_public=True,
            created_by=current_user.id
        )
        db.add(worker)
        db.commit()
        db.refresh(worker)
    except IntegrityError:
        # Lost a race with a concurrent signup for the same slug or user
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Worker profile or slug already exists"
        )
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Failed to create worker profile for {current_user.id}", exc_info=True)
        raise

    # The profile stands on its own; a missing first token is logged, not fatal
    try:
        db.add(QRToken(
            worker_id=worker.id,
            label=DEFAULT_QR_LABEL,
            scan_count=0,
            is_active=True,
            created_by=current_user.id
        ))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Failed to create first QR token for worker {worker.id}", exc_info=True)

    logger.info(f"Worker {worker.id} created with slug '{worker.slug}'")

    if current_user.email:
        background_tasks.add_task(
            send_welcome_email,
            email=current_user.email,
            display_name=worker.display_name,
            worker_slug=worker.slug,
        )

    db.refresh(worker)
    return WorkerEnvelope(worker=worker)


@router.get("", response_model=WorkerEnvelope)
def get_my_profile(worker: Worker = Depends(get_current_worker)):
    """Get the caller's own profile with earned badges"""
    return WorkerEnvelope(worker=worker)


@router.patch("", response_model=WorkerEnvelope)
def update_my_profile(
    worker_data: WorkerUpdate,
    worker: Worker = Depends(get_current_worker),
    db: Session = Depends(get_db)
):
    """Update the caller's own profile; only provided fields change"""
    update_data = worker_data.model_dump(exclude_unset=True)

    for field, value in update_data.items():
        if value is None and field in ("display_name", "trade_category", "is_public"):
            continue
        setattr(worker, field, value)

    worker.updated_by = worker.auth_user_id
    try:
        db.commit()
        db.refresh(worker)
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"Failed to update worker {worker.id}", exc_info=True)
        raise

    return WorkerEnvelope(worker=worker)


@router.get("/stats", response_model=WorkerStatsResponse)
def get_my_stats(
    worker: Worker = Depends(get_current_worker),
    db: Session = Depends(get_db)
):
    """Dashboard numbers for the caller: breakdown, 30-day trend, recent reviews"""
    reviews = _visible_reviews(db, worker.id).all()

    return WorkerStatsResponse(
        total_reviews=worker.review_count,
        overall_rating=worker.overall_rating,
        rating_breakdown=rating_breakdown([r.rating for r in reviews]),
        rating_trend=rating_trend(reviews),
        badges_earned=len(worker.worker_badges),
        recent_reviews=reviews[:DASHBOARD_REVIEW_LIMIT],
    )


@router.get("/{slug}/profile", response_model=PublicProfileResponse)
def get_public_profile(slug: str, db: Session = Depends(get_db)):
    """Public profile page data (public endpoint, hidden profiles are 404)"""
    worker = db.query(Worker).filter(
        Worker.slug == slug,
        Worker.is_public == True  # noqa: E712
    ).first()
    if not worker:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Worker not found"
        )

    reviews = _visible_reviews(db, worker.id).limit(PUBLIC_REVIEW_LIMIT).all()

    return PublicProfileResponse(
        worker=worker,
        rating_breakdown=rating_breakdown([r.rating for r in reviews]),
        reviews=reviews,
    )
