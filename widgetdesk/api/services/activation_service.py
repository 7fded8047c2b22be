# widgetdesk/api/services/activation_service.py
from __future__ import annotations

import logging
import uuid
from typing import Any, Dict

from sqlalchemy.orm import Session

from widgetdesk.api.models.integration import Provider
from widgetdesk.api.services.automation_webhook import AutomationWebhook
from widgetdesk.api.services.bot_config_service import BotConfigService
from widgetdesk.api.services.integration_service import IntegrationService
from widgetdesk.core.config import settings
from widgetdesk.core.exceptions import ValidationError
from widgetdesk.db.base_class import utcnow

logger = logging.getLogger(__name__)

# valores usados quando o campo nunca foi salvo
DEFAULT_BOT: Dict[str, Any] = {
    "phone": "+1-256-935-1911",
    "timezone": "America/Chicago",
    "address": "510 E Meighan Blvd a10, Gadsden, AL 35903",
    "services": [
        {"name": "First Visit", "durationMin": 30, "price": 29},
        {"name": "Adjustment", "durationMin": 15, "price": 45},
    ],
    "faqs": [
        {"q": "Do you take walk-ins?", "a": "Yes, subject to availability."},
        {"q": "Is the $29 special available?", "a": "Yes, consult, exam and adjustment."},
    ],
    "hours": {
        "mon": [["10:00", "14:00"], ["14:45", "19:00"]],
        "tue": [["10:00", "14:00"], ["14:45", "19:00"]],
        "wed": [],
        "thu": [["10:00", "14:00"], ["14:45", "19:00"]],
        "fri": [["10:00", "14:00"], ["14:45", "19:00"]],
        "sat": [["10:00", "16:00"]],
        "sun": [],
    },
    "brand": {
        "primaryColor": "#0EA5E9",
        "logoUrl": "https://cdn/brand/logo.png",
    },
}

ROUTING = {
    "srcTags": ["Website", "Facebook", "Instagram", "SMS", "Email"],
    "bookingPolicy": "first_available",
}


def _frontend() -> str:
    return settings.FRONTEND_BASE_URL.rstrip("/")


def chat_link(tenant_id: str) -> str:
    return f"{_frontend()}/chat/{tenant_id}?src=direct"


def embed_snippet(tenant_id: str) -> str:
    return (
        f'<script async src="{settings.BASE_URL.rstrip("/")}/widget.js"></script>\n'
        f'<div id="tt-chat" data-tenant="{tenant_id}"></div>'
    )


class ActivationService:

    @staticmethod
    def build_activation_payload(db: Session, tenant_id: str) -> Dict[str, Any]:
        bot_config = BotConfigService.get(db, tenant_id)
        if not bot_config:
            raise ValidationError("Please save configuration first")

        integrations = IntegrationService.list_for_tenant(db, tenant_id)
        google = next((i for i in integrations if i.provider == Provider.GOOGLE.value), None)
        if not google or not (google.meta or {}).get("calendarId"):
            raise ValidationError("Google Calendar not configured")

        bot = {}
        for field, default in DEFAULT_BOT.items():
            value = getattr(bot_config, field)
            bot[field] = default if value is None else value
        bot["chatLinkBase"] = f"{_frontend()}/chat/{tenant_id}"

        # só token_refs: tokens reais nunca saem do broker
        refs: Dict[str, Any] = {}
        for integration in integrations:
            if integration.provider == Provider.GOOGLE.value:
                refs["google"] = {
                    "calendarId": (integration.meta or {}).get("calendarId") or "primary",
                    "tokenRef": integration.token_ref,
                }
                refs["gmail"] = {"tokenRef": integration.token_ref}
            elif integration.provider == Provider.FACEBOOK.value:
                refs["facebook"] = {"pageId": integration.external_id, "tokenRef": integration.token_ref}
            elif integration.provider == Provider.INSTAGRAM.value:
                refs["instagram"] = {
                    "igBusinessId": integration.external_id,
                    "tokenRef": integration.token_ref,
                }

        return {
            "tenant_id": tenant_id,
            "bot": bot,
            "integrations": refs,
            "routing": dict(ROUTING),
        }

    @staticmethod
    def activate(db: Session, tenant_id: str, webhook: AutomationWebhook) -> Dict[str, Any]:
        payload = ActivationService.build_activation_payload(db, tenant_id)

        # estado da ativação fica no nosso banco; o n8n só é notificado
        bot_config = BotConfigService.get(db, tenant_id)
        bot_config.activated_at = utcnow()
        db.commit()

        delivered = webhook.deliver(tenant_id, payload)
        logger.info("BOT_ACTIVATED: tenant_id=%s webhook_delivered=%s", tenant_id, delivered)

        return {
            "status": "activated",
            "request_id": uuid.uuid4().hex,
            "webhook_delivered": delivered,
            "chat_link": chat_link(tenant_id),
            "embed_snippet": embed_snippet(tenant_id),
            "payload": payload,
        }
