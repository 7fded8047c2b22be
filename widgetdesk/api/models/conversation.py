from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from widgetdesk.db.base_class import Base, new_id, utcnow


class Conversation(Base):
    __tablename__ = "conversations"

    id = Column(String(36), primary_key=True, default=new_id)
    widget_id = Column(
        String(36), ForeignKey("widgets.id", ondelete="CASCADE"), index=True, nullable=False
    )
    tenant_id = Column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), index=True, nullable=False
    )

    # identidade da conversa: unique garante uma conversa por sessão
    session_id = Column(String, unique=True, index=True, nullable=False)
    visitor_info = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)

    started_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    ended_at = Column(DateTime(timezone=True), nullable=True)

    widget = relationship("Widget", back_populates="conversations")
    tenant = relationship("Tenant", back_populates="conversations")
    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete",
        order_by="Message.id",
    )
