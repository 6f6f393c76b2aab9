"""
Authentication dependencies

Sign-up and sign-in happen at the external auth provider; this service only
verifies the bearer tokens it issues.
"""

from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..enums.user import UserRole
from ..models.worker import Worker
from ..core.logging import get_logger

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthUser:
    id: str
    email: Optional[str]
    role: UserRole


def decode_access_token(token: str) -> dict:
    """Verify signature and expiry of a provider-issued token"""
    return jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.algorithm],
        options={"verify_aud": False},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthUser:
    """Resolve the caller from the Authorization header, 401 if absent or invalid"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected bearer token: {e}")
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception

    app_metadata = payload.get("app_metadata") or {}
    try:
        role = UserRole(app_metadata.get("role", UserRole.WORKER.value))
    except ValueError:
        role = UserRole.WORKER

    return AuthUser(id=str(user_id), email=payload.get("email"), role=role)


def get_current_worker(
    current_user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Worker:
    """Worker profile owned by the caller, 404 if they have not created one"""
    worker = db.query(Worker).filter(Worker.auth_user_id == current_user.id).first()
    if not worker:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Worker not found"
        )
    return worker


def require_admin(current_user: AuthUser = Depends(get_current_user)) -> AuthUser:
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return current_user


def require_badge_issuer(current_user: AuthUser = Depends(get_current_user)) -> AuthUser:
    """Employers and admins may hand out manual badges"""
    if current_user.role not in (UserRole.EMPLOYER, UserRole.ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Employer or admin access required"
        )
    return current_user
