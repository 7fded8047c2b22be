## Rotas de autenticação do tenant (/register, /login, /me)
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from widgetdesk.api.models.tenant import Tenant
from widgetdesk.api.services.auth_service import AuthService
from widgetdesk.api.services.bot_config_service import BotConfigService
from widgetdesk.api.services.integration_service import IntegrationService
from widgetdesk.core.security import create_access_token, get_current_tenant
from widgetdesk.db.session import get_db
from widgetdesk.schemas.bot_config import BotConfigOut
from widgetdesk.schemas.tenant import (
    AuthResponse,
    IntegrationSummary,
    TenantLogin,
    TenantMe,
    TenantOut,
    TenantProfileUpdate,
    TenantRegister,
)

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: TenantRegister, db: Session = Depends(get_db)):
    tenant = AuthService.register(db, payload.email, payload.password, payload.name)
    return AuthResponse(
        message="Account registered successfully",
        tenant=TenantOut.model_validate(tenant),
        token=create_access_token(tenant.id),
    )


@router.post("/login", response_model=AuthResponse)
def login(payload: TenantLogin, db: Session = Depends(get_db)):
    tenant, token = AuthService.login(db, payload.email, payload.password)
    return AuthResponse(
        message="Login successful",
        tenant=TenantOut.model_validate(tenant),
        token=token,
    )


@router.get("/me", response_model=TenantMe)
def me(tenant: Tenant = Depends(get_current_tenant), db: Session = Depends(get_db)):
    bot_config = BotConfigService.get(db, tenant.id)
    integrations = IntegrationService.list_for_tenant(db, tenant.id)

    base = TenantOut.model_validate(tenant).model_dump()
    return TenantMe(
        **base,
        bot_config=BotConfigOut.model_validate(bot_config) if bot_config else None,
        integrations=[IntegrationSummary.model_validate(i) for i in integrations],
    )


@router.put("/profile", response_model=TenantOut)
def update_profile(
    payload: TenantProfileUpdate,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    return AuthService.update_profile(db, tenant.id, payload.model_dump(exclude_unset=True, exclude_none=True))
