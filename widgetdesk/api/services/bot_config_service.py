from __future__ import annotations

import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from widgetdesk.api.models.bot_config import BotConfig
from widgetdesk.api.services.integration_service import IntegrationService

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "America/Chicago"

DOCUMENT_FIELDS = ("phone", "timezone", "address", "services", "hours", "faqs", "brand", "flags")


class BotConfigService:

    @staticmethod
    def get(db: Session, tenant_id: str) -> BotConfig | None:
        return db.query(BotConfig).filter(BotConfig.tenant_id == tenant_id).first()

    @staticmethod
    def save(db: Session, tenant_id: str, data: Dict[str, Any]) -> BotConfig:
        """
        Upsert do documento inteiro: campos ausentes voltam a None
        (e a ativação usa os defaults para eles).
        """
        document = {field: data.get(field) for field in DOCUMENT_FIELDS}
        document["timezone"] = document["timezone"] or DEFAULT_TIMEZONE

        config = BotConfigService.get(db, tenant_id)
        if config:
            for field, value in document.items():
                setattr(config, field, value)
            db.commit()
        else:
            config = BotConfig(tenant_id=tenant_id, **document)
            db.add(config)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                config = BotConfigService.get(db, tenant_id)
                for field, value in document.items():
                    setattr(config, field, value)
                db.commit()

        calendar_id = data.get("selected_calendar_id")
        if calendar_id:
            IntegrationService.set_calendar(db, tenant_id, calendar_id)

        db.refresh(config)
        logger.info("BOT_CONFIG_SAVED: tenant_id=%s", tenant_id)
        return config
