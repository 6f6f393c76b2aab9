from datetime import timedelta

from app.enums.worker import TradeCategory
from app.models.qr_token import QRToken
from app.models.worker import Worker
from app.utils import email as email_utils
from conftest import make_access_token


def signup(client, auth_headers, user_id="auth-user-1", **overrides):
    body = {"display_name": "Maria Lopez", "slug": "maria-lopez", "trade_category": "food_service", **overrides}
    return client.post("/api/workers", json=body, headers=auth_headers(user_id))


def test_create_worker_with_first_qr_token(client, db, auth_headers):
    response = signup(client, auth_headers, bio="Barista for 8 years")

    assert response.status_code == 201
    worker = response.json()["worker"]
    assert worker["slug"] == "maria-lopez"
    assert worker["overall_rating"] == 0.0
    assert worker["review_count"] == 0
    assert worker["is_public"] is True
    assert worker["badges"] == []

    tokens = db.query(QRToken).filter(QRToken.worker_id == worker["id"]).all()
    assert len(tokens) == 1
    assert tokens[0].label == "My QR Code"
    assert tokens[0].is_active is True


def test_create_worker_schedules_welcome_email(client, auth_headers, monkeypatch):
    sent = []
    monkeypatch.setattr(
        "app.routes.workers.send_welcome_email",
        lambda **kwargs: sent.append(kwargs) or True,
    )

    signup(client, auth_headers)

    assert sent == [{"email": "auth-user-1@example.com", "display_name": "Maria Lopez", "worker_slug": "maria-lopez"}]


def test_email_failure_does_not_fail_signup(client, auth_headers, monkeypatch):
    def broken_smtp(*args, **kwargs):
        raise OSError("connection refused")

    monkeypatch.setattr(email_utils.settings, "smtp_user", "mailer")
    monkeypatch.setattr(email_utils.settings, "smtp_password", "secret")
    monkeypatch.setattr(email_utils.smtplib, "SMTP", broken_smtp)

    assert signup(client, auth_headers).status_code == 201


def test_slug_is_normalised(client, auth_headers):
    response = signup(client, auth_headers, slug="  Maria_Lopez!! ")

    assert response.json()["worker"]["slug"] == "maria-lopez"


def test_unusable_slug_rejected(client, auth_headers):
    assert signup(client, auth_headers, slug="!!!").status_code == 400


def test_duplicate_slug_conflicts(client, auth_headers):
    assert signup(client, auth_headers, user_id="auth-user-1").status_code == 201

    response = signup(client, auth_headers, user_id="auth-user-2")

    assert response.status_code == 409


def test_slug_taken_by_concurrent_signup_conflicts(client, auth_headers, concurrent_insert):
    concurrent_insert(
        Worker,
        auth_user_id="auth-user-2",
        display_name="Other Maria",
        slug="maria-lopez",
        trade_category=TradeCategory.RETAIL,
        is_public=True,
        overall_rating=0.0,
        review_count=0,
    )

    response = signup(client, auth_headers)

    assert response.status_code == 409

def test_second_profile_for_same_user_conflicts(client, auth_headers):
    signup(client, auth_headers)

    response = signup(client, auth_headers, slug="another-slug")

    assert response.status_code == 409


def test_create_requires_authentication(client):
    body = {"display_name": "Maria", "slug": "maria", "trade_category": "retail"}

    assert client.post("/api/workers", json=body).status_code == 401
    assert client.post("/api/workers", json=body, headers={"Authorization": "Bearer not-a-jwt"}).status_code == 401


def test_expired_token_rejected(client):
    token = make_access_token("auth-user-1", expires_in=timedelta(hours=-1))

    response = client.get("/api/workers", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_missing_fields_and_bad_category_rejected(client, auth_headers):
    assert client.post("/api/workers", json={"slug": "x"}, headers=auth_headers()).status_code == 400
    assert signup(client, auth_headers, trade_category="astronaut").status_code == 400


def test_get_and_update_own_profile(client, db, auth_headers):
    signup(client, auth_headers)

    response = client.patch(
        "/api/workers",
        json={"bio": "Now at the downtown cafe", "is_public": False, "trade_category": "hospitality"},
        headers=auth_headers(),
    )
    assert response.status_code == 200

    worker = client.get("/api/workers", headers=auth_headers()).json()["worker"]
    assert worker["bio"] == "Now at the downtown cafe"
    assert worker["is_public"] is False
    assert worker["trade_category"] == "hospitality"
    assert worker["display_name"] == "Maria Lopez"


def test_blank_display_name_update_rejected(client, auth_headers):
    signup(client, auth_headers)

    response = client.patch("/api/workers", json={"display_name": "   "}, headers=auth_headers())

    assert response.status_code == 400
    assert client.get("/api/workers", headers=auth_headers()).json()["worker"]["display_name"] == "Maria Lopez"

def test_profile_without_worker_is_404(client, auth_headers):
    assert client.get("/api/workers", headers=auth_headers("nobody")).status_code == 404


def test_public_profile(client, make_worker, submit_review):
    worker, token = make_worker(slug="sam-cleaner")
    submit_review(token.id, rating=5, fingerprint="a")
    submit_review(token.id, rating=3, fingerprint="b")

    response = client.get("/api/workers/sam-cleaner/profile")

    assert response.status_code == 200
    data = response.json()
    assert data["worker"]["review_count"] == 2
    assert data["worker"]["overall_rating"] == 4.0
    assert data["rating_breakdown"] == {"5": 1, "4": 0, "3": 1, "2": 0, "1": 0}
    assert len(data["reviews"]) == 2


def test_hidden_or_unknown_profile_is_404(client, make_worker):
    make_worker(slug="private-pat", is_public=False)

    assert client.get("/api/workers/private-pat/profile").status_code == 404
    assert client.get("/api/workers/nobody/profile").status_code == 404


def test_dashboard_stats(client, make_worker, make_badge, submit_review, auth_headers):
    worker, token = make_worker()
    make_badge("First Review", {"type": "review_count", "threshold": 1})
    for i, rating in enumerate([5, 4, 4]):
        submit_review(token.id, rating=rating, fingerprint=f"device-{i}")

    response = client.get("/api/workers/stats", headers=auth_headers(worker.auth_user_id))

    assert response.status_code == 200
    stats = response.json()
    assert stats["total_reviews"] == 3
    assert stats["overall_rating"] == 4.33
    assert stats["rating_breakdown"]["4"] == 2
    assert stats["badges_earned"] == 1
    assert len(stats["recent_reviews"]) == 3
    assert sum(point["count"] for point in stats["rating_trend"]) == 3


def test_worker_row_stores_caller_email(client, db, auth_headers):
    client.post(
        "/api/workers",
        json={"display_name": "Ana", "slug": "ana", "trade_category": "delivery"},
        headers=auth_headers("auth-user-9", email="ana@example.com"),
    )

    assert db.query(Worker).filter(Worker.slug == "ana").one().email == "ana@example.com"
