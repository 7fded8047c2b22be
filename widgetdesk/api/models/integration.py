from __future__ import annotations

import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship

from widgetdesk.db.base_class import Base, new_id, utcnow


class Provider(str, enum.Enum):
    GOOGLE = "google"
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"


class Integration(Base):
    """
    Conexão de um tenant com um provedor OAuth.

    O token real fica no broker; aqui só guardamos o token_ref opaco.
    """

    __tablename__ = "integrations"
    __table_args__ = (
        UniqueConstraint("tenant_id", "provider", name="uq_integrations_tenant_provider"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    tenant_id = Column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), index=True, nullable=False
    )
    provider = Column(String(16), nullable=False)

    external_id = Column(String, nullable=True)
    token_ref = Column(String, unique=True, index=True, nullable=False)
    scopes = Column(JSON, nullable=False, default=list)
    # "metadata" é reservado no declarative
    meta = Column("metadata", JSON, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="integrations")
