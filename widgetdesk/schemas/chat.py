from pydantic import ConfigDict, Field

from widgetdesk.schemas.base import CamelModel


class ChatMessageIn(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    message: str = Field(..., min_length=1, max_length=4000)
    session_id: str = Field(..., min_length=1, max_length=128)


class ChatMessageOut(CamelModel):
    response: str
