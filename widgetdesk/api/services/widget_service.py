from __future__ import annotations

import copy
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from widgetdesk.api.models.tenant import PLAN_WIDGET_LIMITS, SubscriptionStatus, Tenant
from widgetdesk.api.models.widget import Widget
from widgetdesk.core.config import settings
from widgetdesk.core.exceptions import NotFoundError, PlanLimitExceeded
from widgetdesk.db.base_class import new_id

logger = logging.getLogger(__name__)

DEFAULT_WIDGET_CONFIG: Dict[str, Any] = {
    "theme": {
        "primaryColor": "#007bff",
        "secondaryColor": "#6c757d",
        "fontFamily": "Inter, sans-serif",
        "borderRadius": "8px",
    },
    "behavior": {
        "greeting": "Hello! How can I help you today?",
        "placeholder": "Type your message...",
        "position": "bottom-right",
        "minimized": False,
    },
    "ai": {
        "model": "gpt-3.5-turbo",
        "maxTokens": 500,
        "temperature": 0.7,
    },
}

EMBED_INSTRUCTIONS = [
    "Copy the embed code above",
    "Paste it into your website's HTML, preferably before the closing </body> tag",
    "The widget will automatically load and display on your site",
]


def merge_config(base: Dict[str, Any], override: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Merge recursivo: campos aninhados não informados mantêm o valor de base."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def cdn_url() -> str:
    return settings.WIDGET_CDN_URL.rstrip("/")


class WidgetService:

    @staticmethod
    def list_for_tenant(db: Session, tenant_id: str) -> List[Widget]:
        return (
            db.query(Widget)
            .filter(Widget.tenant_id == tenant_id)
            .order_by(Widget.created_at.desc())
            .all()
        )

    @staticmethod
    def get_owned(db: Session, tenant_id: str, widget_id: str) -> Widget:
        widget = (
            db.query(Widget)
            .filter(Widget.id == widget_id, Widget.tenant_id == tenant_id)
            .first()
        )
        if not widget:
            raise NotFoundError("Widget not found")
        return widget

    @staticmethod
    def create(db: Session, tenant: Tenant, data: Dict[str, Any]) -> Widget:
        count = db.query(Widget).filter(Widget.tenant_id == tenant.id).count()
        limit = PLAN_WIDGET_LIMITS.get(tenant.subscription_plan, 0)
        if count >= limit:
            raise PlanLimitExceeded(tenant.subscription_plan)

        widget = Widget(
            tenant_id=tenant.id,
            name=data["name"],
            description=data.get("description"),
            config=merge_config(DEFAULT_WIDGET_CONFIG, data.get("config")),
            webhook_url=data.get("webhook_url"),
            api_key=new_id(),
        )
        db.add(widget)
        db.commit()
        db.refresh(widget)

        logger.info("WIDGET_CREATED: tenant_id=%s widget_id=%s", tenant.id, widget.id)
        return widget

    @staticmethod
    def update(db: Session, tenant_id: str, widget_id: str, data: Dict[str, Any]) -> Widget:
        widget = WidgetService.get_owned(db, tenant_id, widget_id)

        for field, value in data.items():
            if field == "config":
                value = merge_config(widget.config or {}, value)
            setattr(widget, field, value)

        db.commit()
        db.refresh(widget)
        return widget

    @staticmethod
    def delete(db: Session, tenant_id: str, widget_id: str) -> None:
        widget = WidgetService.get_owned(db, tenant_id, widget_id)
        # conversas e mensagens vão junto (cascade)
        db.delete(widget)
        db.commit()
        logger.info("WIDGET_DELETED: tenant_id=%s widget_id=%s", tenant_id, widget_id)

    @staticmethod
    def regenerate_key(db: Session, tenant_id: str, widget_id: str) -> str:
        widget = WidgetService.get_owned(db, tenant_id, widget_id)
        widget.api_key = new_id()
        db.commit()
        return widget.api_key

    @staticmethod
    def embed_code(widget: Widget) -> Dict[str, Any]:
        code = (
            "<script>\n"
            "  (function() {\n"
            "    var script = document.createElement('script');\n"
            f"    script.src = '{cdn_url()}/widget.js';\n"
            f"    script.setAttribute('data-widget-id', '{widget.id}');\n"
            "    script.async = true;\n"
            "    document.head.appendChild(script);\n"
            "  })();\n"
            "</script>"
        )
        return {
            "embed_code": code,
            "widget_id": widget.id,
            "instructions": EMBED_INSTRUCTIONS,
        }

    @staticmethod
    def public_config(db: Session, widget_id: str) -> Dict[str, Any]:
        widget = db.get(Widget, widget_id)
        if (
            not widget
            or not widget.is_active
            or widget.tenant.subscription_status == SubscriptionStatus.CANCELED.value
        ):
            raise NotFoundError("Widget not found")

        return {
            "id": widget.id,
            "name": widget.name,
            "config": widget.config,
            "api_endpoint": f"{cdn_url()}/widgets/{widget.id}/chat",
            "webhook_url": widget.webhook_url,
        }
