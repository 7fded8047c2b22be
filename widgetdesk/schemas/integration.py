from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from widgetdesk.schemas.base import CamelModel


class IntegrationStatusEntry(CamelModel):
    connected: bool = True
    external_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    connected_at: Optional[datetime] = None


class IntegrationStatusOut(CamelModel):
    google: Optional[IntegrationStatusEntry] = None
    facebook: Optional[IntegrationStatusEntry] = None
    instagram: Optional[IntegrationStatusEntry] = None
    gmail: Optional[IntegrationStatusEntry] = None


class ResolvedTokenOut(BaseModel):
    # formato consumido pelo n8n (snake_case)
    access_token: str
    expires_at: Optional[Any] = None
    provider: str
