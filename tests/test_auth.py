"""
Signup, OTP verification, signin, refresh rotation and logout over HTTP.
"""
from datetime import timedelta

import jwt
import pytest

from app.config import settings
from app.core.clock import utcnow
from app.core.exceptions import InvalidRefreshTokenException
from app.core.rate_limiter import limiter, OTP_VERIFY_LIMIT
from app.core.security import hash_token
from app.models.enums import AccountStatus, OTPPurpose
from app.models.otp import OTPRecord
from app.models.refresh_session import RefreshSession
from app.models.user import User
from app.services import auth_service
from tests.conftest import API, PASSWORD, bearer, latest_otp, signin_tokens, signup


def _user(db, email):
    db.expire_all()
    return db.query(User).filter(User.email == email).first()


def _unused_otps(db, user, purpose):
    return (
        db.query(OTPRecord)
        .filter(OTPRecord.user_id == user.id, OTPRecord.purpose == purpose, OTPRecord.is_used == False)  # noqa: E712
        .all()
    )


def _live_sessions(db, user):
    db.expire_all()
    return (
        db.query(RefreshSession)
        .filter(RefreshSession.user_id == user.id, RefreshSession.revoked == False)  # noqa: E712
        .all()
    )


# ── Signup ────────────────────────────────────────────────────────────────────

def test_customer_signup_is_active_with_one_signup_otp(client, db):
    response = signup(client, "a@x.com")
    assert response.status_code == 201
    assert "message" in response.json()

    user = _user(db, "a@x.com")
    assert user.account_status == AccountStatus.ACTIVE
    assert len(_unused_otps(db, user, OTPPurpose.SIGNUP)) == 1


def test_provider_signup_is_pending(client, db):
    for email, account_type in [
        ("solo@x.com", "service-provider-independent"),
        ("biz@x.com", "service-provider-business"),
    ]:
        assert signup(client, email, account_type).status_code == 201
        user = _user(db, email)
        assert user.account_status == AccountStatus.PENDING
        assert len(_unused_otps(db, user, OTPPurpose.SIGNUP)) == 1


def test_signup_hashes_password(client, db):
    signup(client, "a@x.com")
    user = _user(db, "a@x.com")
    assert user.hashed_password != PASSWORD
    assert user.hashed_password.startswith("$argon2")


def test_duplicate_signup_conflicts_without_second_record(client, db):
    assert signup(client, "a@x.com").status_code == 201
    response = signup(client, "a@x.com", "service-provider-business")
    assert response.status_code == 409
    assert db.query(User).filter(User.email == "a@x.com").count() == 1


def test_signup_validation_errors_are_400(client):
    short = client.post(f"{API}/auth/signup", json={"email": "a@x.com", "password": "short", "accountType": "customer"})
    assert short.status_code == 400

    bad_type = client.post(f"{API}/auth/signup", json={"email": "a@x.com", "password": PASSWORD, "accountType": "wizard"})
    assert bad_type.status_code == 400

    missing = client.post(f"{API}/auth/signup", json={"email": "not-an-email", "password": PASSWORD})
    assert missing.status_code == 400


def test_signup_succeeds_when_email_delivery_fails(client, db, monkeypatch):
    from app.services import email_service

    async def broken_send(message):
        raise ConnectionError("SMTP down")

    monkeypatch.setattr(email_service.fast_mail, "send_message", broken_send)
    response = signup(client, "a@x.com")
    assert response.status_code == 201
    assert _user(db, "a@x.com") is not None


# ── Signup OTP ────────────────────────────────────────────────────────────────

def test_signup_otp_verifies_exactly_once(client, db):
    signup(client, "a@x.com")
    code = latest_otp(db, "a@x.com", OTPPurpose.SIGNUP)

    first = client.post(f"{API}/auth/signup/verify-otp", json={"email": "a@x.com", "otp": code})
    assert first.status_code == 200
    assert _user(db, "a@x.com").email_verified_at is not None

    second = client.post(f"{API}/auth/signup/verify-otp", json={"email": "a@x.com", "otp": code})
    assert second.status_code == 401


def test_expired_otp_is_rejected(client, db):
    signup(client, "a@x.com")
    code = latest_otp(db, "a@x.com", OTPPurpose.SIGNUP)

    record = db.query(OTPRecord).filter(OTPRecord.code == code).first()
    record.expires_at = utcnow() - timedelta(seconds=1)
    db.commit()

    response = client.post(f"{API}/auth/signup/verify-otp", json={"email": "a@x.com", "otp": code})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired OTP"


def test_signup_otp_for_unknown_email_is_401(client):
    response = client.post(f"{API}/auth/signup/verify-otp", json={"email": "ghost@x.com", "otp": "123456"})
    assert response.status_code == 401


def test_otp_purposes_do_not_mix(client, db):
    signup(client, "a@x.com")
    code = latest_otp(db, "a@x.com", OTPPurpose.SIGNUP)
    response = client.post(f"{API}/auth/signin/verify-otp", json={"email": "a@x.com", "otp": code})
    assert response.status_code == 401


# ── Signin ────────────────────────────────────────────────────────────────────

def test_signin_issues_otp_and_no_tokens(client, db):
    signup(client, "a@x.com")
    response = client.post(f"{API}/auth/signin", json={"email": "a@x.com", "password": PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert "accessToken" not in body and "refreshToken" not in body
    assert len(_unused_otps(db, _user(db, "a@x.com"), OTPPurpose.SIGNIN)) == 1


def test_signin_failures_share_one_message(client):
    signup(client, "a@x.com")
    wrong_password = client.post(f"{API}/auth/signin", json={"email": "a@x.com", "password": "wrongpass1"})
    unknown_email = client.post(f"{API}/auth/signin", json={"email": "nobody@x.com", "password": PASSWORD})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json()["detail"] == unknown_email.json()["detail"]


def test_newest_signin_otp_supersedes_older(client, db):
    signup(client, "a@x.com")
    client.post(f"{API}/auth/signin", json={"email": "a@x.com", "password": PASSWORD})
    old_code = latest_otp(db, "a@x.com", OTPPurpose.SIGNIN)
    client.post(f"{API}/auth/signin", json={"email": "a@x.com", "password": PASSWORD})
    new_code = latest_otp(db, "a@x.com", OTPPurpose.SIGNIN)

    assert len(_unused_otps(db, _user(db, "a@x.com"), OTPPurpose.SIGNIN)) == 1
    if old_code != new_code:
        stale = client.post(f"{API}/auth/signin/verify-otp", json={"email": "a@x.com", "otp": old_code})
        assert stale.status_code == 401
    fresh = client.post(f"{API}/auth/signin/verify-otp", json={"email": "a@x.com", "otp": new_code})
    assert fresh.status_code == 200


# ── Session issuance ──────────────────────────────────────────────────────────

def test_verify_signin_otp_mints_pair_and_one_session(client, db):
    signup(client, "a@x.com")
    tokens = signin_tokens(client, db, "a@x.com")

    assert tokens["accessToken"] and tokens["refreshToken"]
    assert tokens["tokenType"] == "bearer"

    user = _user(db, "a@x.com")
    sessions = _live_sessions(db, user)
    assert len(sessions) == 1
    # only the hash is stored
    assert sessions[0].token_hash != tokens["refreshToken"]


def test_token_claims(client, db):
    signup(client, "a@x.com")
    tokens = signin_tokens(client, db, "a@x.com")
    user = _user(db, "a@x.com")

    access = jwt.decode(tokens["accessToken"], settings.secret_key, algorithms=[settings.algorithm])
    assert access["sub"] == str(user.id)
    assert access["email"] == "a@x.com"
    assert access["accountType"] == "customer"
    assert access["accountStatus"] == "ACTIVE"
    assert access["type"] == "access"

    refresh = jwt.decode(tokens["refreshToken"], settings.secret_key, algorithms=[settings.algorithm])
    assert refresh["type"] == "refresh"
    assert refresh["jti"] == str(_live_sessions(db, user)[0].id)


def test_refresh_token_is_not_an_access_token(client, db):
    signup(client, "a@x.com")
    tokens = signin_tokens(client, db, "a@x.com")
    response = client.get(f"{API}/auth/profile", headers=bearer(tokens["refreshToken"]))
    assert response.status_code == 401


# ── Refresh rotation ──────────────────────────────────────────────────────────

def test_refresh_rotates_and_old_token_is_single_use(client, db):
    signup(client, "a@x.com")
    tokens = signin_tokens(client, db, "a@x.com")

    rotated = client.post(f"{API}/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert rotated.status_code == 200
    new_pair = rotated.json()
    assert new_pair["refreshToken"] != tokens["refreshToken"]

    reused = client.post(f"{API}/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert reused.status_code == 401

    again = client.post(f"{API}/auth/refresh", json={"refreshToken": new_pair["refreshToken"]})
    assert again.status_code == 200


def test_refresh_reflects_current_account_status(client, db):
    signup(client, "a@x.com")
    tokens = signin_tokens(client, db, "a@x.com")

    user = _user(db, "a@x.com")
    user.account_status = AccountStatus.SUSPENDED
    db.commit()

    rotated = client.post(f"{API}/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    claims = jwt.decode(rotated.json()["accessToken"], settings.secret_key, algorithms=[settings.algorithm])
    assert claims["accountStatus"] == "SUSPENDED"


def test_refresh_rejects_garbage_expired_and_missing(client, db):
    assert client.post(f"{API}/auth/refresh", json={"refreshToken": "not-a-jwt"}).status_code == 401
    assert client.post(f"{API}/auth/refresh", json={}).status_code == 400

    signup(client, "a@x.com")
    tokens = signin_tokens(client, db, "a@x.com")
    session = _live_sessions(db, _user(db, "a@x.com"))[0]
    session.expires_at = utcnow() - timedelta(seconds=1)
    db.commit()
    assert client.post(f"{API}/auth/refresh", json={"refreshToken": tokens["refreshToken"]}).status_code == 401


def test_refresh_rejects_token_whose_hash_does_not_match(client, db):
    signup(client, "a@x.com")
    tokens = signin_tokens(client, db, "a@x.com")
    session = _live_sessions(db, _user(db, "a@x.com"))[0]

    session.token_hash = hash_token("some-other-token")
    db.commit()
    assert client.post(f"{API}/auth/refresh", json={"refreshToken": tokens["refreshToken"]}).status_code == 401


def test_concurrent_rotation_has_one_winner(client, db, monkeypatch):
    signup(client, "a@x.com")
    tokens = signin_tokens(client, db, "a@x.com")
    user = _user(db, "a@x.com")

    stale = auth_service._find_refresh_session(db, tokens["refreshToken"])
    assert stale is not None
    # the other request wins the conditional revoke
    assert auth_service._revoke_session(db, stale.id) is True
    db.commit()
    assert auth_service._revoke_session(db, stale.id) is False
    db.rollback()

    # this request resolved the row before it was revoked
    monkeypatch.setattr(auth_service, "_find_refresh_session", lambda db, raw_token: stale)
    with pytest.raises(InvalidRefreshTokenException):
        auth_service.refresh_session(db, tokens["refreshToken"])
    assert _live_sessions(db, user) == []


def test_signin_otp_guessing_is_rate_limited(client, db):
    signup(client, "a@x.com")
    client.post(f"{API}/auth/signin", json={"email": "a@x.com", "password": PASSWORD})

    limiter.reset()
    limiter.enabled = True
    try:
        statuses = [
            client.post(
                f"{API}/auth/signin/verify-otp",
                json={"email": "a@x.com", "otp": "000000"},
                headers={"X-Forwarded-For": f"198.51.100.{attempt}"},
            ).status_code
            for attempt in range(12)
        ]
    finally:
        limiter.enabled = False
        limiter.reset()

    allowed = int(OTP_VERIFY_LIMIT.split("/")[0])
    assert statuses[:allowed] == [401] * allowed
    assert set(statuses[allowed:]) == {429}


# ── Logout ────────────────────────────────────────────────────────────────────

def test_logout_everywhere_revokes_all_sessions(client, db):
    signup(client, "a@x.com")
    first = signin_tokens(client, db, "a@x.com")
    second = signin_tokens(client, db, "a@x.com")
    user = _user(db, "a@x.com")
    assert len(_live_sessions(db, user)) == 2

    response = client.post(f"{API}/auth/logout", headers=bearer(second["accessToken"]))
    assert response.status_code == 200
    assert _live_sessions(db, user) == []

    for tokens in (first, second):
        assert client.post(f"{API}/auth/refresh", json={"refreshToken": tokens["refreshToken"]}).status_code == 401


def test_logout_with_token_revokes_only_that_session(client, db):
    signup(client, "a@x.com")
    first = signin_tokens(client, db, "a@x.com")
    second = signin_tokens(client, db, "a@x.com")

    response = client.post(
        f"{API}/auth/logout",
        json={"refreshToken": first["refreshToken"]},
        headers=bearer(first["accessToken"]),
    )
    assert response.status_code == 200

    assert client.post(f"{API}/auth/refresh", json={"refreshToken": first["refreshToken"]}).status_code == 401
    assert client.post(f"{API}/auth/refresh", json={"refreshToken": second["refreshToken"]}).status_code == 200


def test_logout_with_someone_elses_token_is_a_noop(client, db):
    signup(client, "a@x.com")
    signup(client, "b@x.com")
    alice = signin_tokens(client, db, "a@x.com")
    bob = signin_tokens(client, db, "b@x.com")

    response = client.post(
        f"{API}/auth/logout",
        json={"refreshToken": bob["refreshToken"]},
        headers=bearer(alice["accessToken"]),
    )
    assert response.status_code == 200
    assert len(_live_sessions(db, _user(db, "a@x.com"))) == 1
    assert len(_live_sessions(db, _user(db, "b@x.com"))) == 1


def test_logout_requires_bearer(client):
    assert client.post(f"{API}/auth/logout").status_code == 401


# ── Profile ───────────────────────────────────────────────────────────────────

def test_profile_returns_identity(client, db):
    signup(client, "a@x.com")
    tokens = signin_tokens(client, db, "a@x.com")
    response = client.get(f"{API}/auth/profile", headers=bearer(tokens["accessToken"]))
    assert response.status_code == 200
    body = response.json()
    assert body["email"] == "a@x.com"
    assert body["accountType"] == "customer"
    assert body["accountStatus"] == "ACTIVE"
    assert body["permissions"] == []
    assert body["role"] is None


def test_profile_without_token_is_401(client):
    response = client.get(f"{API}/auth/profile")
    assert response.status_code == 401


# ── End to end ────────────────────────────────────────────────────────────────

def test_signup_signin_refresh_scenario(client, db):
    response = signup(client, "a@x.com", "customer")
    assert response.status_code == 201
    assert "message" in response.json()

    code = latest_otp(db, "a@x.com", OTPPurpose.SIGNUP)
    wrong = "000000" if code != "000000" else "111111"
    response = client.post(f"{API}/auth/signup/verify-otp", json={"email": "a@x.com", "otp": wrong})
    assert response.status_code == 401

    response = client.post(f"{API}/auth/signin", json={"email": "a@x.com", "password": "password123"})
    assert response.status_code == 200
    assert "message" in response.json()

    code = latest_otp(db, "a@x.com", OTPPurpose.SIGNIN)
    response = client.post(f"{API}/auth/signin/verify-otp", json={"email": "a@x.com", "otp": code})
    assert response.status_code == 200
    tokens = response.json()
    assert tokens["accessToken"] and tokens["refreshToken"]

    response = client.post(f"{API}/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert response.status_code == 200
    assert response.json()["accessToken"] and response.json()["refreshToken"]

    response = client.post(f"{API}/auth/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert response.status_code == 401
