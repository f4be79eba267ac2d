from app.models.enums import AccountStatus
from tests.conftest import API

KYC_BODY = {"documentType": "national-id", "documentUrl": "https://docs.example.com/id.png"}


def test_pending_provider_can_submit_and_read_status(client, register):
    _, headers = register("pro@x.com", "service-provider-independent")

    first = client.post(f"{API}/kyc/submit", json=KYC_BODY, headers=headers)
    assert first.status_code == 201
    assert first.json()["status"] == "PENDING"
    assert first.json()["documentUrl"] == "https://docs.example.com/id.png"

    second = client.post(f"{API}/kyc/submit", json={**KYC_BODY, "documentType": "passport"}, headers=headers)
    assert second.status_code == 201

    status = client.get(f"{API}/kyc/status", headers=headers)
    assert status.status_code == 200
    assert [s["documentType"] for s in status.json()] == ["passport", "national-id"]


def test_customers_cannot_submit_kyc(client, register):
    _, headers = register("a@x.com")
    response = client.post(f"{API}/kyc/submit", json=KYC_BODY, headers=headers)
    assert response.status_code == 403


def test_kyc_rejects_invalid_url(client, register):
    _, headers = register("pro@x.com", "service-provider-business")
    response = client.post(f"{API}/kyc/submit", json={**KYC_BODY, "documentUrl": "not a url"}, headers=headers)
    assert response.status_code == 400


def test_suspended_provider_is_locked_out(client, db, register):
    provider, headers = register("pro@x.com", "service-provider-business")
    provider.account_status = AccountStatus.SUSPENDED
    db.commit()
    assert client.get(f"{API}/kyc/status", headers=headers).status_code == 403
