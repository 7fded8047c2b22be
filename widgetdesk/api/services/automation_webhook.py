from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from widgetdesk.core.config import settings

logger = logging.getLogger(__name__)


class AutomationWebhook:
    """
    Envio único (at-most-once) do payload de ativação para o n8n.

    Sem fila nem retry: falha é logada e devolvida como False.
    """

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        self.url = url if url is not None else settings.N8N_WEBHOOK_URL
        self.timeout = timeout or settings.N8N_WEBHOOK_TIMEOUT

    @property
    def enabled(self) -> bool:
        return bool(self.url)

    def deliver(self, tenant_id: str, payload: Dict[str, Any]) -> bool:
        if not self.enabled:
            logger.warning("N8N_WEBHOOK_SKIPPED: tenant_id=%s reason=no_url", tenant_id)
            return False

        try:
            r = requests.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json", "X-Tenant-ID": tenant_id},
                timeout=self.timeout,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            logger.error("N8N_WEBHOOK_FAILED: tenant_id=%s error=%s", tenant_id, e)
            return False

        logger.info("N8N_WEBHOOK_OK: tenant_id=%s status=%s", tenant_id, r.status_code)
        return True


def get_automation_webhook() -> AutomationWebhook:
    return AutomationWebhook()
