"""
QR token routes
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import desc
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..models.qr_token import QRToken
from ..models.worker import Worker
from ..auth.dependencies import get_current_worker
from ..core.logging import get_logger
from ..schemas.qr_token import QRTokenCreate, QRTokenUpdate, QRTokenResponse, TokenWorkerResponse

router = APIRouter()

logger = get_logger(__name__)


def count_active_tokens(db: Session, worker_id: int) -> int:
    return db.query(QRToken).filter(
        QRToken.worker_id == worker_id,
        QRToken.is_active == True  # noqa: E712
    ).count()


def _token_limit_exception() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        detail=f"Maximum {settings.max_active_qr_tokens} active QR codes per account"
    )


@router.get("")
def list_my_tokens(
    worker: Worker = Depends(get_current_worker),
    db: Session = Depends(get_db)
):
    """Get the caller's QR tokens, newest first"""
    tokens = db.query(QRToken).filter(
        QRToken.worker_id == worker.id
    ).order_by(desc(QRToken.created_at)).all()

    return {"tokens": [QRTokenResponse.model_validate(token) for token in tokens]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_token(
    token_data: QRTokenCreate,
    worker: Worker = Depends(get_current_worker),
    db: Session = Depends(get_db)
):
    """Create a new QR token for the caller"""
    label = token_data.label.strip()
    if not label:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Label is required"
        )

    if count_active_tokens(db, worker.id) >= settings.max_active_qr_tokens:
        raise _token_limit_exception()

    token = QRToken(worker_id=worker.id, label=label, scan_count=0, is_active=True, created_by=worker.auth_user_id)
    db.add(token)
    db.commit()
    db.refresh(token)

    logger.info(f"QR token {token.id} created for worker {worker.id}")
    return {"token": QRTokenResponse.model_validate(token)}


@router.patch("")
def update_token(
    token_data: QRTokenUpdate,
    worker: Worker = Depends(get_current_worker),
    db: Session = Depends(get_db)
):
    """Relabel or (de)activate one of the caller's tokens"""
    token = db.query(QRToken).filter(
        QRToken.id == token_data.id,
        QRToken.worker_id == worker.id
    ).first()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="QR token not found"
        )

    if token_data.label is not None:
        label = token_data.label.strip()
        if not label:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Label is required"
            )
        token.label = label

    if token_data.is_active is not None and token_data.is_active != token.is_active:
        if token_data.is_active and count_active_tokens(db, worker.id) >= settings.max_active_qr_tokens:
            raise _token_limit_exception()
        token.is_active = token_data.is_active
        logger.info(f"QR token {token.id} {'activated' if token.is_active else 'deactivated'}")

    db.commit()
    db.refresh(token)
    return {"token": QRTokenResponse.model_validate(token)}


@router.get("/{token_id}/worker")
def get_token_worker(token_id: str, db: Session = Depends(get_db)):
    """Public lookup of the worker behind an active token, for the review form"""
    token = db.query(QRToken).filter(QRToken.id == token_id).first()
    if not token:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Token not found"
        )

    if not token.is_active:
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail="Token inactive"
        )

    return {"worker": TokenWorkerResponse.model_validate(token.worker)}
