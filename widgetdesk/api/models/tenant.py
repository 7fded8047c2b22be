from __future__ import annotations

import enum

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from widgetdesk.db.base_class import Base, new_id, utcnow


class TenantRole(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class SubscriptionPlan(str, enum.Enum):
    TRIAL = "TRIAL"
    STARTER = "STARTER"
    PROFESSIONAL = "PROFESSIONAL"
    ENTERPRISE = "ENTERPRISE"


class SubscriptionStatus(str, enum.Enum):
    TRIAL = "TRIAL"
    ACTIVE = "ACTIVE"
    PAST_DUE = "PAST_DUE"
    CANCELED = "CANCELED"


# limite de widgets por plano
PLAN_WIDGET_LIMITS = {
    SubscriptionPlan.TRIAL.value: 1,
    SubscriptionPlan.STARTER.value: 3,
    SubscriptionPlan.PROFESSIONAL.value: 10,
    SubscriptionPlan.ENTERPRISE.value: 50,
}


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False)

    role = Column(String(16), nullable=False, default=TenantRole.USER.value)
    subscription_plan = Column(String(16), nullable=False, default=SubscriptionPlan.TRIAL.value)
    subscription_status = Column(String(16), nullable=False, default=SubscriptionStatus.TRIAL.value)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    widgets = relationship("Widget", back_populates="tenant", cascade="all, delete")
    integrations = relationship("Integration", back_populates="tenant", cascade="all, delete")
    conversations = relationship("Conversation", back_populates="tenant", cascade="all, delete")
    bot_config = relationship(
        "BotConfig", back_populates="tenant", uselist=False, cascade="all, delete"
    )
