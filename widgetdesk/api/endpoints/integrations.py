import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Header, Query
from sqlalchemy.orm import Session
from starlette.responses import RedirectResponse

from widgetdesk.api.models.tenant import Tenant
from widgetdesk.api.services.integration_service import IntegrationService
from widgetdesk.api.services.oauth_broker import OAuthBrokerClient, ensure_provider, get_oauth_broker
from widgetdesk.core.config import settings
from widgetdesk.core.exceptions import AppError, ValidationError
from widgetdesk.core.security import check_service_key, get_current_tenant
from widgetdesk.db.session import get_db
from widgetdesk.schemas.integration import IntegrationStatusOut, ResolvedTokenOut

router = APIRouter(prefix="/integrations", tags=["Integrations"])
logger = logging.getLogger(__name__)


def _callback_uri(provider: str) -> str:
    return f"{settings.BASE_URL.rstrip('/')}/integrations/{provider}/callback"


def _frontend_redirect(provider: str, ok: bool) -> RedirectResponse:
    qs = urlencode({"integration": provider, "status": "success" if ok else "error"})
    return RedirectResponse(
        url=f"{settings.FRONTEND_BASE_URL.rstrip('/')}/onboarding?{qs}", status_code=302
    )


@router.get("/status", response_model=IntegrationStatusOut)
def integration_status(tenant: Tenant = Depends(get_current_tenant), db: Session = Depends(get_db)):
    return IntegrationService.status(db, tenant.id)


@router.get("/token", response_model=ResolvedTokenOut)
def resolve_token(
    ref: Optional[str] = Query(default=None),
    x_api_key: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
    broker: OAuthBrokerClient = Depends(get_oauth_broker),
):
    """
    Endpoint para o n8n trocar um tokenRef por um access_token válido via X-API-Key.
    """
    if ref is None or not ref.strip():
        # chave errada continua sendo 401, mesmo sem ref
        check_service_key(x_api_key)
        raise ValidationError("Token reference required")

    return IntegrationService.resolve_access_token(db, ref.strip(), x_api_key, broker)


@router.get("/{provider}/start")
def oauth_start(
    provider: str,
    tenant: Tenant = Depends(get_current_tenant),
    broker: OAuthBrokerClient = Depends(get_oauth_broker),
):
    ensure_provider(provider)
    # tenant id vai como state opaco
    url = broker.authorize_url(provider, state=tenant.id, redirect_uri=_callback_uri(provider))
    return RedirectResponse(url=url, status_code=302)


@router.get("/{provider}/callback")
def oauth_callback(
    provider: str,
    code: Optional[str] = Query(default=None),
    state: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    broker: OAuthBrokerClient = Depends(get_oauth_broker),
):
    ensure_provider(provider)
    if not code or not state:
        raise ValidationError("Missing code or state")

    tenant = db.get(Tenant, state)
    if not tenant:
        logger.warning("OAUTH_CALLBACK_UNKNOWN_TENANT: provider=%s", provider)
        return _frontend_redirect(provider, ok=False)

    try:
        exchanged = broker.exchange_code(provider, code)
        IntegrationService.upsert_integration(
            db,
            tenant_id=tenant.id,
            provider=provider,
            external_id=exchanged["external_id"],
            token_ref=exchanged["token_ref"],
            scopes=exchanged["scopes"],
            metadata=exchanged["metadata"],
        )
    except AppError as e:
        logger.error(
            "OAUTH_CALLBACK_FAILED: tenant_id=%s provider=%s error=%s", tenant.id, provider, e.message
        )
        return _frontend_redirect(provider, ok=False)

    return _frontend_redirect(provider, ok=True)


@router.delete("/{provider}")
def disconnect(
    provider: str,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    ensure_provider(provider)
    IntegrationService.disconnect(db, tenant.id, provider)
    return {"message": f"{provider} disconnected successfully"}
