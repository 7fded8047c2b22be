from widgetdesk.core.security import create_access_token, decode_access_token


def test_register_returns_tenant_and_token(client):
    r = client.post(
        "/auth/register",
        json={"email": "Owner@Acme-Clinic.com", "password": "s3cret-pass", "name": "  Acme Clinic "},
    )
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["message"] == "Account registered successfully"
    assert body["tenant"]["email"] == "owner@acme-clinic.com"
    assert body["tenant"]["name"] == "Acme Clinic"
    assert body["tenant"]["subscriptionPlan"] == "TRIAL"
    assert body["tenant"]["subscriptionStatus"] == "TRIAL"
    assert "passwordHash" not in body["tenant"]
    assert decode_access_token(body["token"]) == body["tenant"]["id"]


def test_duplicate_registration_is_rejected(client, register):
    register(email="dup@acme-clinic.com")

    r = client.post(
        "/auth/register",
        json={"email": "DUP@acme-clinic.com", "password": "another-pass", "name": "Other"},
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Account already exists with this email"


def test_register_validation_errors_are_itemized(client):
    r = client.post("/auth/register", json={"email": "not-an-email", "password": "short", "name": "A"})
    assert r.status_code == 400
    body = r.json()
    assert body["error"] == "Validation failed"
    fields = {e["field"] for e in body["errors"]}
    assert {"email", "password", "name"} <= fields


def test_register_rejects_password_over_72_bytes(client):
    r = client.post(
        "/auth/register",
        json={"email": "long@acme-clinic.com", "password": "é" * 40, "name": "Long Pass"},
    )
    assert r.status_code == 400


def test_login_token_resolves_to_same_tenant(client, register):
    tenant, _ = register(email="login@acme-clinic.com", password="s3cret-pass")

    r = client.post("/auth/login", json={"email": "login@acme-clinic.com", "password": "s3cret-pass"})
    assert r.status_code == 200, r.text
    token = r.json()["token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["id"] == tenant["id"]
    assert me.json()["botConfig"] is None
    assert me.json()["integrations"] == []


def test_login_with_wrong_password(client, register):
    register(email="wrong@acme-clinic.com")

    r = client.post("/auth/login", json={"email": "wrong@acme-clinic.com", "password": "nope-nope"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid email or password"

    r = client.post("/auth/login", json={"email": "ghost@acme-clinic.com", "password": "nope-nope"})
    assert r.status_code == 401


def test_me_requires_token(client):
    r = client.get("/auth/me")
    assert r.status_code == 401
    assert r.json()["error"] == "Access denied. No token provided."

    r = client.get("/auth/me", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid token."


def test_token_for_deleted_tenant_is_invalid(client):
    token = create_access_token("00000000-0000-0000-0000-000000000000")
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401
    assert r.json()["error"] == "Invalid token."


def test_me_never_exposes_token_refs(client, register, connect_google):
    tenant, headers = register()
    connect_google(tenant["id"], token_ref="ref-secret-123")

    r = client.get("/auth/me", headers=headers)
    assert r.status_code == 200
    integrations = r.json()["integrations"]
    assert integrations == [
        {"provider": "google", "externalId": "owner@acme-clinic.com", "metadata": {"calendarId": "primary"}}
    ]
    assert "ref-secret-123" not in r.text


def test_update_profile(client, register):
    _, headers = register()

    r = client.put("/auth/profile", json={"name": "Acme Chiropractic"}, headers=headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Acme Chiropractic"

    # null não apaga o nome
    r = client.put("/auth/profile", json={"name": None}, headers=headers)
    assert r.status_code == 200
    assert r.json()["name"] == "Acme Chiropractic"


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "OK"
    assert "timestamp" in r.json()
