import os
from datetime import datetime, timedelta, timezone

# Settings are read at import time, so the environment must be ready first
os.environ["DB_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-with-at-least-32-bytes"
os.environ["ALGORITHM"] = "HS256"
os.environ["APP_URL"] = "https://tiptop.test"
os.environ["LOG_TO_CONSOLE"] = "false"
os.environ["LOG_TO_FILE"] = "false"
os.environ["SMTP_USER"] = ""
os.environ["SMTP_PASSWORD"] = ""

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event, insert
from sqlalchemy.orm import Session

from app.main import app
from app.database import engine, SessionLocal
from app.models.base import Base
from app.models.badge import Badge
from app.models.qr_token import QRToken
from app.models.review import Review
from app.models.worker import Worker
from app.enums.badge import BadgeTier, BadgeCategory
from app.enums.worker import TradeCategory
from app.utils.rate_limit import clear_rate_limits


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.create_all(bind=engine)
    clear_rate_limits()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def make_access_token(user_id, email=None, role=None, expires_in=timedelta(hours=1)):
    payload = {
        "sub": user_id,
        "email": email if email is not None else f"{user_id}@example.com",
        "aud": "authenticated",
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    if role:
        payload["app_metadata"] = {"role": role}
    return jwt.encode(payload, os.environ["SECRET_KEY"], algorithm="HS256")


@pytest.fixture
def auth_headers():
    def _headers(user_id="auth-user-1", email=None, role=None):
        return {"Authorization": f"Bearer {make_access_token(user_id, email=email, role=role)}"}
    return _headers


@pytest.fixture
def make_worker(db):
    """Worker with one active QR token, inserted directly"""
    def _make(auth_user_id="auth-user-1", slug="jane-doe", **fields):
        worker = Worker(
            auth_user_id=auth_user_id,
            email=fields.pop("email", f"{auth_user_id}@example.com"),
            display_name=fields.pop("display_name", "Jane Doe"),
            slug=slug,
            trade_category=fields.pop("trade_category", TradeCategory.HOSPITALITY),
            **fields
        )
        db.add(worker)
        db.commit()
        db.refresh(worker)

        token = QRToken(worker_id=worker.id, label="Front desk")
        db.add(token)
        db.commit()
        db.refresh(token)
        return worker, token
    return _make


@pytest.fixture
def make_badge(db):
    def _make(name, criteria, tier=BadgeTier.BRONZE, category=BadgeCategory.VOLUME):
        badge = Badge(name=name, description=name, tier=tier, category=category, criteria_json=criteria)
        db.add(badge)
        db.commit()
        db.refresh(badge)
        return badge
    return _make


@pytest.fixture
def submit_review(client):
    def _submit(token_id, rating=5, fingerprint="device-1", **fields):
        body = {"qr_token_id": token_id, "rating": rating, "fingerprint": fingerprint, **fields}
        return client.post("/api/reviews", json=body)
    return _submit


@pytest.fixture
def add_review(db):
    """Insert a review directly, bypassing intake (no aggregation)"""
    def _add(worker, token, rating, is_flagged=False, created_at=None):
        review = Review(
            worker_id=worker.id,
            qr_token_id=token.id,
            rating=rating,
            reviewer_fingerprint=f"fp-{rating}",
            is_flagged=is_flagged,
        )
        if created_at is not None:
            review.created_at = created_at
        db.add(review)
        db.commit()
        db.refresh(review)
        return review
    return _add


@pytest.fixture
def concurrent_insert():
    """
    Insert a row just before the next flush that adds an instance of ``model``,
    as a competing request committing first would
    """
    listeners = []

    def _register(model, **values):
        fired = []

        def listener(session, flush_context, instances):
            if not fired and any(isinstance(obj, model) for obj in session.new):
                fired.append(True)
                session.connection().execute(insert(model.__table__).values(**values))

        event.listen(Session, "before_flush", listener)
        listeners.append(listener)

    yield _register

    for listener in listeners:
        event.remove(Session, "before_flush", listener)
