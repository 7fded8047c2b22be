## Chat público do widget (sem autenticação)
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from widgetdesk.api.services.chat_service import ChatService
from widgetdesk.api.services.responder import ResponseGenerator, get_response_generator
from widgetdesk.core.exceptions import AppError
from widgetdesk.core.rate_limit import chat_rate_limit
from widgetdesk.db.session import get_db
from widgetdesk.schemas.chat import ChatMessageIn, ChatMessageOut

router = APIRouter(prefix="/widgets", tags=["Chat"])
logger = logging.getLogger(__name__)

APOLOGY = "Sorry, I encountered an error. Please try again later."


@router.post(
    "/{widget_id}/chat",
    response_model=ChatMessageOut,
    dependencies=[Depends(chat_rate_limit)],
)
def chat(
    widget_id: str,
    payload: ChatMessageIn,
    db: Session = Depends(get_db),
    responder: ResponseGenerator = Depends(get_response_generator),
):
    try:
        return ChatService.handle_inbound_message(
            db, widget_id, payload.message, payload.session_id, responder
        )
    except AppError as e:
        if e.status_code >= 500:
            return JSONResponse(
                status_code=500,
                content={"error": "Failed to process message", "response": APOLOGY},
            )
        return JSONResponse(
            status_code=e.status_code,
            content={"error": e.message, "response": APOLOGY},
        )
    except Exception:
        logger.exception("CHAT_ERROR: widget_id=%s", widget_id)
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to process message", "response": APOLOGY},
        )
