## dados de demonstração (tenant PROFESSIONAL + widget de exemplo)
import logging

from sqlalchemy.orm import Session

from widgetdesk.api.models.conversation import Conversation
from widgetdesk.api.models.message import Message, MessageRole
from widgetdesk.api.models.tenant import SubscriptionPlan, SubscriptionStatus, Tenant
from widgetdesk.api.models.widget import Widget
from widgetdesk.api.services.widget_service import DEFAULT_WIDGET_CONFIG, merge_config
from widgetdesk.core.security import get_password_hash

logger = logging.getLogger("seed")

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo123456"
DEMO_WIDGET_ID = "demo-widget-001"
DEMO_SESSION_ID = "demo-session-001"

DEMO_WIDGET_CONFIG = merge_config(DEFAULT_WIDGET_CONFIG, {
    "theme": {"borderRadius": "12px"},
    "behavior": {
        "greeting": "Hello! I'm here to help. How can I assist you today?",
        "minimized": True,
    },
    "ai": {
        "systemPrompt": "You are a helpful customer support assistant. Be friendly, professional, and concise.",
    },
})


def seed(db: Session) -> Tenant:
    """Idempotente: rodar de novo não duplica nada."""
    tenant = db.query(Tenant).filter(Tenant.email == DEMO_EMAIL).first()
    if not tenant:
        tenant = Tenant(
            email=DEMO_EMAIL,
            password_hash=get_password_hash(DEMO_PASSWORD),
            name="Demo User",
            subscription_plan=SubscriptionPlan.PROFESSIONAL.value,
            subscription_status=SubscriptionStatus.ACTIVE.value,
        )
        db.add(tenant)
        db.flush()
        logger.info("Tenant demo criado: %s", tenant.email)

    widget = db.get(Widget, DEMO_WIDGET_ID)
    if not widget:
        widget = Widget(
            id=DEMO_WIDGET_ID,
            tenant_id=tenant.id,
            name="Customer Support Bot",
            description="AI-powered customer support assistant",
            config=DEMO_WIDGET_CONFIG,
        )
        db.add(widget)
        db.flush()
        logger.info("Widget demo criado: %s", widget.name)

    conversation = db.query(Conversation).filter(Conversation.session_id == DEMO_SESSION_ID).first()
    if not conversation:
        conversation = Conversation(
            widget_id=widget.id,
            tenant_id=tenant.id,
            session_id=DEMO_SESSION_ID,
            visitor_info={"browser": "Chrome", "os": "Windows", "country": "United States"},
        )
        db.add(conversation)
        db.flush()
        db.add_all([
            Message(
                conversation_id=conversation.id,
                content="Hello, I need help with my order",
                role=MessageRole.USER.value,
            ),
            Message(
                conversation_id=conversation.id,
                content="I'd be happy to help you with your order! Could you please provide your order number?",
                role=MessageRole.ASSISTANT.value,
                ai_model="gpt-3.5-turbo",
            ),
        ])
        # contadores batem com o que foi semeado
        widget.total_messages = (widget.total_messages or 0) + 2
        widget.total_conversations = (widget.total_conversations or 0) + 1

    db.commit()
    db.refresh(tenant)
    return tenant


if __name__ == "__main__":
    from widgetdesk.create_table import create_all
    from widgetdesk.db.session import SessionLocal

    logging.basicConfig(level="INFO")
    create_all()
    session = SessionLocal()
    try:
        seed(session)
    finally:
        session.close()
