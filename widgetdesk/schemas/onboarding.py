from __future__ import annotations

from typing import Any, Dict, List, Optional

from widgetdesk.schemas.base import CamelModel
from widgetdesk.schemas.bot_config import BotConfigOut
from widgetdesk.schemas.tenant import IntegrationSummary


class ActivationOut(CamelModel):
    status: str
    request_id: str
    webhook_delivered: bool
    chat_link: str
    embed_snippet: str
    # payload vai exatamente como foi enviado ao n8n
    payload: Dict[str, Any]


class OnboardingConfigOut(CamelModel):
    bot_config: Optional[BotConfigOut] = None
    integrations: List[IntegrationSummary]
