from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AnyHttpUrl, Field, field_validator

from widgetdesk.schemas.base import CamelModel


class WidgetCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    config: Optional[Dict[str, Any]] = None
    webhook_url: Optional[AnyHttpUrl] = None

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class WidgetUpdate(WidgetCreate):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    is_active: Optional[bool] = None


class WidgetOut(CamelModel):
    id: str
    tenant_id: str
    name: str
    description: Optional[str] = None
    config: Dict[str, Any]
    webhook_url: Optional[str] = None
    api_key: str
    is_active: bool
    total_messages: int
    total_conversations: int
    created_at: datetime
    updated_at: datetime


class WidgetSaved(CamelModel):
    message: str
    widget: WidgetOut


class ApiKeyOut(CamelModel):
    message: str
    api_key: str


class EmbedOut(CamelModel):
    embed_code: str
    widget_id: str
    instructions: List[str]


class PublicWidgetConfig(CamelModel):
    id: str
    name: str
    config: Dict[str, Any]
    api_endpoint: str
    webhook_url: Optional[str] = None
