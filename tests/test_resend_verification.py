"""Tests for resending the verification email."""

from __future__ import annotations

from conftest import create_user
from models import db
from models.user import User


def test_resend_sends_link_to_unverified_user(app, client, notifier):
    user_id = create_user(app, "new@example.com", verified=False)
    with app.app_context():
        token = User.query.get(user_id).verification_token

    response = client.post("/auth/resend-verification", json={"email": "new@example.com"})

    assert response.status_code == 200
    assert response.get_json() == {"success": True, "message": "Verification email resent"}
    assert len(notifier.deliveries) == 1
    assert token in notifier.deliveries[0]["body"]


def test_resend_issues_token_when_none_is_pending(app, client, notifier):
    user_id = create_user(app, "new@example.com", verified=False)
    with app.app_context():
        user = User.query.get(user_id)
        user.verification_token = None
        db.session.commit()

    response = client.post("/auth/resend-verification", json={"email": "new@example.com"})

    assert response.status_code == 200
    with app.app_context():
        token = User.query.get(user_id).verification_token
    assert token
    assert token in notifier.deliveries[0]["body"]


def test_resend_requires_email(client, notifier):
    response = client.post("/auth/resend-verification", json={})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Email is required"
    assert notifier.deliveries == []


def test_resend_for_unknown_user(client, notifier):
    response = client.post("/auth/resend-verification", json={"email": "ghost@example.com"})

    assert response.status_code == 404
    assert response.get_json()["message"] == "User not found"
    assert notifier.deliveries == []


def test_resend_for_verified_user_does_not_notify(app, client, notifier):
    create_user(app, "ada@example.com", verified=True)

    response = client.post("/auth/resend-verification", json={"email": "ada@example.com"})

    assert response.status_code == 400
    assert response.get_json()["message"] == "Email already verified"
    assert notifier.deliveries == []


def test_resend_reports_delivery_failure(app, client, notifier):
    create_user(app, "new@example.com", verified=False)
    notifier.fail = True

    response = client.post("/auth/resend-verification", json={"email": "new@example.com"})

    assert response.status_code == 500
    body = response.get_json()
    assert body["success"] is False
    assert body["message"] == "Could not send verification email"
