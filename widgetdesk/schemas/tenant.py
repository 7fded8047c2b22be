from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field, field_validator

from widgetdesk.schemas.base import CamelModel
from widgetdesk.schemas.bot_config import BotConfigOut


# =========================
# Cadastro / login
# =========================
class TenantRegister(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=2, max_length=120)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("password")
    @classmethod
    def password_bytes(cls, v: str) -> str:
        # bcrypt: limite de 72 BYTES
        if len(v.encode("utf-8")) > 72:
            raise ValueError("Password too long (max 72 bytes)")
        return v


class TenantLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class TenantProfileUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=120)


# =========================
# Retorno
# =========================
class TenantOut(CamelModel):
    id: str
    email: EmailStr
    name: str
    role: str
    subscription_plan: str
    subscription_status: str
    created_at: datetime


class AuthResponse(CamelModel):
    message: str
    tenant: TenantOut
    token: str
    token_type: str = "bearer"


class IntegrationSummary(CamelModel):
    provider: str
    external_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="meta")


class TenantMe(TenantOut):
    bot_config: Optional[BotConfigOut] = None
    integrations: List[IntegrationSummary] = Field(default_factory=list)
