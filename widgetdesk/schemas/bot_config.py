from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from widgetdesk.schemas.base import CamelModel

WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


class BotConfigIn(CamelModel):
    phone: Optional[str] = Field(default=None, pattern=r"^\+?[0-9][0-9 ()\-]{6,19}$")
    timezone: Optional[str] = None
    address: Optional[str] = None
    services: Optional[List[Dict[str, Any]]] = None
    hours: Optional[Dict[str, List[List[str]]]] = None
    faqs: Optional[List[Dict[str, Any]]] = None
    brand: Optional[Dict[str, Any]] = None
    flags: Optional[Dict[str, Any]] = None

    # vai para o metadata da integração google
    selected_calendar_id: Optional[str] = None

    @field_validator("hours")
    @classmethod
    def validate_hours(cls, v):
        if v is None:
            return v
        for day, ranges in v.items():
            if day not in WEEKDAYS:
                raise ValueError(f"Invalid weekday: {day}")
            for pair in ranges:
                if len(pair) != 2:
                    raise ValueError(f"Hours for {day} must be [start, end] pairs")
        return v


class BotConfigOut(CamelModel):
    tenant_id: str
    phone: Optional[str] = None
    timezone: str
    address: Optional[str] = None
    services: Optional[List[Dict[str, Any]]] = None
    hours: Optional[Dict[str, List[List[str]]]] = None
    faqs: Optional[List[Dict[str, Any]]] = None
    brand: Optional[Dict[str, Any]] = None
    flags: Optional[Dict[str, Any]] = None
    activated_at: Optional[datetime] = None
    updated_at: datetime


class BotConfigSaved(CamelModel):
    message: str
    bot_config: BotConfigOut
