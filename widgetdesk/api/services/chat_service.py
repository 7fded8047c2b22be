# widgetdesk/api/services/chat_service.py
from __future__ import annotations

import logging
from typing import Dict, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from widgetdesk.api.models.conversation import Conversation
from widgetdesk.api.models.message import Message, MessageRole
from widgetdesk.api.models.tenant import SubscriptionStatus
from widgetdesk.api.models.widget import Widget
from widgetdesk.api.services.responder import ResponseGenerator, model_name
from widgetdesk.core.exceptions import ConflictError, NotFoundError
from widgetdesk.db.base_class import utcnow

logger = logging.getLogger(__name__)


class ChatService:

    @staticmethod
    def get_active_widget(db: Session, widget_id: str) -> Widget:
        widget = db.get(Widget, widget_id)
        if not widget or not widget.is_active:
            raise NotFoundError("Widget not found or inactive")
        if widget.tenant.subscription_status == SubscriptionStatus.CANCELED.value:
            raise NotFoundError("Widget not found or inactive")
        return widget

    @staticmethod
    def get_by_session(db: Session, session_id: str) -> Conversation | None:
        return db.query(Conversation).filter(Conversation.session_id == session_id).first()

    @staticmethod
    def find_or_create_conversation(
        db: Session, widget: Widget, session_id: str
    ) -> Tuple[Conversation, bool]:
        """
        Retorna (conversa, criada_agora).

        A conversa nova só é enviada com flush: o commit fica com a transação
        das mensagens, então uma falha depois daqui desfaz a conversa também.
        O índice único em session_id é a única proteção contra duas primeiras
        mensagens simultâneas: se o insert violar, relê e segue como "find".
        """
        conversation = ChatService.get_by_session(db, session_id)
        created = False

        if not conversation:
            conversation = Conversation(
                widget_id=widget.id,
                tenant_id=widget.tenant_id,
                session_id=session_id,
                visitor_info={},
            )
            db.add(conversation)
            try:
                db.flush()
                created = True
            except IntegrityError:
                # nada mais foi escrito nesta transação ainda
                db.rollback()
                conversation = ChatService.get_by_session(db, session_id)
                if not conversation:
                    raise
                logger.info("CONVERSATION_RACE_RESOLVED: session_id=%s", session_id)

        if conversation.widget_id != widget.id:
            raise ConflictError("Session belongs to another widget")

        return conversation, created

    @staticmethod
    def handle_inbound_message(
        db: Session,
        widget_id: str,
        message: str,
        session_id: str,
        responder: ResponseGenerator,
    ) -> Dict[str, str]:
        widget = ChatService.get_active_widget(db, widget_id)
        conversation, created = ChatService.find_or_create_conversation(db, widget, session_id)

        ai_config = (widget.config or {}).get("ai") or {}

        # conversa nova + mensagens + contadores: uma transação só
        try:
            db.add(Message(
                conversation_id=conversation.id,
                content=message,
                role=MessageRole.USER.value,
                message_type="TEXT",
            ))
            db.flush()

            response = responder.generate_response(message, ai_config)

            db.add(Message(
                conversation_id=conversation.id,
                content=response,
                role=MessageRole.ASSISTANT.value,
                message_type="TEXT",
                ai_model=model_name(ai_config),
            ))

            counters = {Widget.total_messages: Widget.total_messages + 2}
            if created:
                counters[Widget.total_conversations] = Widget.total_conversations + 1
            db.query(Widget).filter(Widget.id == widget.id).update(
                counters, synchronize_session=False
            )

            conversation.updated_at = utcnow()
            db.commit()
        except Exception:
            db.rollback()
            logger.exception(
                "CHAT_PROCESS_FAILED: widget_id=%s session_id=%s", widget_id, session_id
            )
            raise

        logger.info(
            "CHAT_OK: widget_id=%s conversation_id=%s new_conversation=%s",
            widget.id, conversation.id, created,
        )
        return {"response": response}
