## Onboarding do bot: salvar configuração, ativar (n8n) e ler estado atual
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from widgetdesk.api.models.tenant import Tenant
from widgetdesk.api.services.activation_service import ActivationService
from widgetdesk.api.services.automation_webhook import AutomationWebhook, get_automation_webhook
from widgetdesk.api.services.bot_config_service import BotConfigService
from widgetdesk.api.services.integration_service import IntegrationService
from widgetdesk.core.security import get_current_tenant
from widgetdesk.db.session import get_db
from widgetdesk.schemas.bot_config import BotConfigIn, BotConfigOut, BotConfigSaved
from widgetdesk.schemas.onboarding import ActivationOut, OnboardingConfigOut
from widgetdesk.schemas.tenant import IntegrationSummary

router = APIRouter(prefix="/onboarding", tags=["Onboarding"])


@router.post("/save", response_model=BotConfigSaved)
def save_config(
    payload: BotConfigIn,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    # documento inteiro: o que não veio no body é gravado como None
    bot_config = BotConfigService.save(db, tenant.id, payload.model_dump())
    return {"message": "Configuration saved successfully", "bot_config": bot_config}


@router.post("/activate", response_model=ActivationOut)
def activate(
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
    webhook: AutomationWebhook = Depends(get_automation_webhook),
):
    return ActivationService.activate(db, tenant.id, webhook)


@router.get("/config", response_model=OnboardingConfigOut)
def get_config(tenant: Tenant = Depends(get_current_tenant), db: Session = Depends(get_db)):
    bot_config = BotConfigService.get(db, tenant.id)
    integrations = IntegrationService.list_for_tenant(db, tenant.id)
    return OnboardingConfigOut(
        bot_config=BotConfigOut.model_validate(bot_config) if bot_config else None,
        integrations=[IntegrationSummary.model_validate(i) for i in integrations],
    )
