from __future__ import annotations

from sqlalchemy import Column, String, Text, Boolean, Integer, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from widgetdesk.db.base_class import Base, new_id, utcnow


class Widget(Base):
    __tablename__ = "widgets"

    id = Column(String(36), primary_key=True, default=new_id)
    tenant_id = Column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), index=True, nullable=False
    )

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    # theme / behavior / ai
    config = Column(JSON, nullable=False, default=dict)

    webhook_url = Column(String, nullable=True)
    api_key = Column(String(36), unique=True, nullable=False, default=new_id)
    is_active = Column(Boolean, nullable=False, default=True)

    total_messages = Column(Integer, nullable=False, default=0)
    total_conversations = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="widgets")
    conversations = relationship(
        "Conversation", back_populates="widget", cascade="all, delete"
    )
