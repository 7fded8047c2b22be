from sqlalchemy import Column, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from widgetdesk.db.base_class import Base, new_id, utcnow


class BotConfig(Base):
    __tablename__ = "bot_configs"

    id = Column(String(36), primary_key=True, default=new_id)
    tenant_id = Column(
        String(36), ForeignKey("tenants.id", ondelete="CASCADE"), unique=True, nullable=False
    )

    phone = Column(String, nullable=True)
    timezone = Column(String, nullable=False, default="America/Chicago")
    address = Column(String, nullable=True)

    # None = nunca definido (a ativação usa o default)
    services = Column(JSON, nullable=True)
    hours = Column(JSON, nullable=True)
    faqs = Column(JSON, nullable=True)
    brand = Column(JSON, nullable=True)
    flags = Column(JSON, nullable=True)

    activated_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="bot_config")
