"""
Global request filters: IP blacklist, blocked emails and tenant resolution.
"""
from app.models.blocklist import BlacklistedIP, BlockedEmail
from app.models.tenant import Tenant
from app.models.user import User
from tests.conftest import API, signup


def test_blacklisted_forwarded_ip_is_denied(client, db):
    db.add(BlacklistedIP(ip_address="203.0.113.9"))
    db.commit()

    denied = client.get("/health", headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"})
    assert denied.status_code == 403
    assert denied.json()["detail"] == "Access denied from this IP address"

    allowed = client.get("/health", headers={"X-Forwarded-For": "198.51.100.7"})
    assert allowed.status_code == 200


def test_blocked_email_cannot_sign_up_or_in(client, db):
    db.add(BlockedEmail(email="spam@x.com"))
    db.commit()

    response = signup(client, "Spam@x.com")
    assert response.status_code == 403
    assert response.json()["detail"] == "This email address is blocked"
    assert db.query(User).count() == 0

    response = client.post(f"{API}/auth/signin", json={"email": "spam@x.com", "password": "password123"})
    assert response.status_code == 403


def test_non_json_body_is_left_to_validation(client):
    response = client.post(
        f"{API}/auth/signin", content=b"not json", headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_tenant_header_attaches_tenant_on_signup(client, db):
    tenant = Tenant(name="Acme", subdomain="acme")
    db.add(tenant)
    db.commit()

    response = client.post(
        f"{API}/auth/signup",
        json={"email": "a@x.com", "password": "password123", "accountType": "customer"},
        headers={"X-Tenant-ID": str(tenant.id)},
    )
    assert response.status_code == 201
    db.expire_all()
    assert db.query(User).one().tenant_id == tenant.id


def test_tenant_resolved_from_subdomain(client, db):
    tenant = Tenant(name="Acme", subdomain="acme")
    db.add(tenant)
    db.commit()

    response = client.post(
        f"{API}/auth/signup",
        json={"email": "a@x.com", "password": "password123", "accountType": "customer"},
        headers={"Host": "acme.servease.com"},
    )
    assert response.status_code == 201
    db.expire_all()
    assert db.query(User).one().tenant_id == tenant.id


def test_unknown_tenant_header_is_404(client):
    response = client.get("/health", headers={"X-Tenant-ID": "00000000-0000-0000-0000-000000000000"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Tenant not found"

    response = client.get("/health", headers={"X-Tenant-ID": "not-a-uuid"})
    assert response.status_code == 404


def test_unknown_subdomain_means_no_tenant(client, db):
    response = signup(client, "a@x.com")
    assert response.status_code == 201
    assert db.query(User).one().tenant_id is None
