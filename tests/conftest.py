import os

# Settings() é instanciado no import: variáveis precisam existir antes
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["N8N_API_KEY"] = "n8n-test-key"
os.environ["OAUTH_BROKER_TOKEN"] = "broker-client-token"
os.environ["FRONTEND_BASE_URL"] = "https://app.widgetdesk.test"
os.environ["BASE_URL"] = "https://api.widgetdesk.test"
os.environ["WIDGET_CDN_URL"] = "https://cdn.widgetdesk.test"
os.environ.pop("N8N_WEBHOOK_URL", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from widgetdesk.api.services.automation_webhook import get_automation_webhook
from widgetdesk.api.services.oauth_broker import ensure_provider, get_oauth_broker
from widgetdesk.core.exceptions import UpstreamError
from widgetdesk.core.rate_limit import reset_rate_limit
from widgetdesk.db.base import Base
from widgetdesk.db.session import get_db
from widgetdesk.main import app

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeBroker:
    """Broker OAuth em memória: code -> resposta do /oauth/token."""

    base_url = "https://broker.test/v1"

    def __init__(self):
        self.exchanges = {}
        self.minted = []
        self.fail_exchange = False

    def authorize_url(self, provider, state, redirect_uri):
        ensure_provider(provider)
        return f"{self.base_url}/oauth/authorize?provider={provider}&state={state}&redirect_uri={redirect_uri}"

    def exchange_code(self, provider, code):
        if self.fail_exchange:
            raise UpstreamError("OAuth broker returned 500")
        return self.exchanges.get(code) or {
            "token_ref": f"ref-{provider}-{code}",
            "external_id": f"ext-{code}",
            "scopes": [],
            "metadata": {},
        }

    def mint_access_token(self, token_ref):
        self.minted.append(token_ref)
        return {"access_token": f"ya29.{token_ref}", "expires_at": "2030-01-01T00:00:00Z"}


class FakeWebhook:
    def __init__(self, delivered=True):
        self.delivered = delivered
        self.calls = []

    def deliver(self, tenant_id, payload):
        self.calls.append((tenant_id, payload))
        return self.delivered


@pytest.fixture()
def db_engine():
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db(db_engine):
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def broker():
    return FakeBroker()


@pytest.fixture()
def webhook():
    return FakeWebhook()


@pytest.fixture()
def client(db_engine, broker, webhook):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_oauth_broker] = lambda: broker
    app.dependency_overrides[get_automation_webhook] = lambda: webhook
    reset_rate_limit()

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture()
def register(client):
    """Cadastra um tenant e devolve (tenant_json, headers com bearer)."""

    def _register(email="owner@acme-clinic.com", password="s3cret-pass", name="Acme Clinic"):
        r = client.post("/auth/register", json={"email": email, "password": password, "name": name})
        assert r.status_code == 201, r.text
        body = r.json()
        return body["tenant"], {"Authorization": f"Bearer {body['token']}"}

    return _register


@pytest.fixture()
def connect_google(client, broker):
    """Conecta o google pelo callback do broker, com calendarId opcional."""

    def _connect(tenant_id, code="code-1", token_ref="ref-google-1", calendar_id="primary"):
        metadata = {"calendarId": calendar_id} if calendar_id else {}
        broker.exchanges[code] = {
            "token_ref": token_ref,
            "external_id": "owner@acme-clinic.com",
            "scopes": ["openid"],
            "metadata": metadata,
        }
        r = client.get(
            "/integrations/google/callback",
            params={"code": code, "state": tenant_id},
            follow_redirects=False,
        )
        assert r.status_code == 302
        assert "status=success" in r.headers["location"]

    return _connect
