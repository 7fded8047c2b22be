import pytest

from widgetdesk.api.models.conversation import Conversation
from widgetdesk.api.models.message import Message
from widgetdesk.api.models.widget import Widget
from widgetdesk.api.services.chat_service import ChatService
from widgetdesk.api.services.responder import (
    CANNED_RESPONSES,
    DEMO_NOTICE,
    CannedResponseGenerator,
    get_response_generator,
)
from widgetdesk.core.config import settings
from widgetdesk.main import app

APOLOGY = "Sorry, I encountered an error. Please try again later."


class EchoResponder:
    def __init__(self):
        self.seen = []

    def generate_response(self, text, ai_config):
        self.seen.append((text, ai_config.get("model")))
        return f"echo: {text}"


class BrokenResponder:
    def generate_response(self, text, ai_config):
        raise RuntimeError("model backend down")


@pytest.fixture()
def widget_id(client, register):
    _, headers = register()
    r = client.post(
        "/widgets",
        json={"name": "Front desk", "config": {"ai": {"model": "gpt-4o-mini"}}},
        headers=headers,
    )
    assert r.status_code == 201, r.text
    return r.json()["widget"]["id"]


@pytest.fixture()
def echo():
    responder = EchoResponder()
    app.dependency_overrides[get_response_generator] = lambda: responder
    return responder


def _send(client, widget_id, message="hello", session_id="sess-1"):
    return client.post(f"/widgets/{widget_id}/chat", json={"message": message, "sessionId": session_id})


def test_default_responder_returns_canned_demo_answer(client, widget_id):
    r = _send(client, widget_id)
    assert r.status_code == 200, r.text
    answer = r.json()["response"]
    assert answer.endswith(DEMO_NOTICE)
    assert answer[: -len(DEMO_NOTICE)] in CANNED_RESPONSES


def test_canned_generator_ignores_input():
    import random

    a = CannedResponseGenerator(rng=random.Random(7)).generate_response("one", {})
    b = CannedResponseGenerator(rng=random.Random(7)).generate_response("two", {})
    assert a == b


def test_same_session_reuses_one_conversation(client, widget_id, echo, db):
    assert _send(client, widget_id, "hello").json() == {"response": "echo: hello"}
    assert _send(client, widget_id, "hello").json() == {"response": "echo: hello"}

    conversations = db.query(Conversation).filter(Conversation.session_id == "sess-1").all()
    assert len(conversations) == 1

    messages = (
        db.query(Message)
        .filter(Message.conversation_id == conversations[0].id)
        .order_by(Message.id)
        .all()
    )
    assert [m.role for m in messages] == ["USER", "ASSISTANT", "USER", "ASSISTANT"]
    assert messages[1].ai_model == "gpt-4o-mini"
    assert messages[0].ai_model is None

    widget = db.get(Widget, widget_id)
    assert widget.total_messages == 4
    assert widget.total_conversations == 1
    assert echo.seen == [("hello", "gpt-4o-mini"), ("hello", "gpt-4o-mini")]


def test_new_sessions_count_new_conversations(client, widget_id, echo, db):
    _send(client, widget_id, session_id="sess-a")
    _send(client, widget_id, session_id="sess-b")
    _send(client, widget_id, session_id="sess-a")

    widget = db.get(Widget, widget_id)
    assert widget.total_conversations == 2
    assert widget.total_messages == 6


def test_unknown_or_inactive_widget(client, register, echo):
    r = _send(client, "no-such-widget")
    assert r.status_code == 404
    assert r.json() == {"error": "Widget not found or inactive", "response": APOLOGY}

    _, headers = register(email="inactive@acme-clinic.com")
    widget_id = client.post("/widgets", json={"name": "Off"}, headers=headers).json()["widget"]["id"]
    client.put(f"/widgets/{widget_id}", json={"isActive": False}, headers=headers)
    assert _send(client, widget_id).status_code == 404


def test_session_bound_to_another_widget(client, register, widget_id, echo):
    _, other = register(email="other@acme-clinic.com")
    other_widget = client.post("/widgets", json={"name": "Other"}, headers=other).json()["widget"]["id"]

    assert _send(client, widget_id, session_id="shared").status_code == 200
    r = _send(client, other_widget, session_id="shared")
    assert r.status_code == 409
    assert r.json()["error"] == "Session belongs to another widget"
    assert r.json()["response"] == APOLOGY


def test_responder_failure_rolls_back_messages_and_counters(client, widget_id, db):
    app.dependency_overrides[get_response_generator] = lambda: BrokenResponder()

    r = _send(client, widget_id)
    assert r.status_code == 500
    assert r.json() == {"error": "Failed to process message", "response": APOLOGY}

    assert db.query(Message).count() == 0
    assert db.query(Conversation).count() == 0
    widget = db.get(Widget, widget_id)
    assert widget.total_messages == 0
    assert widget.total_conversations == 0


def test_session_retried_after_failure_counts_one_conversation(client, widget_id, db):
    app.dependency_overrides[get_response_generator] = lambda: BrokenResponder()
    assert _send(client, widget_id, session_id="s1").status_code == 500

    app.dependency_overrides[get_response_generator] = lambda: EchoResponder()
    r = _send(client, widget_id, session_id="s1")
    assert r.status_code == 200
    assert r.json() == {"response": "echo: hello"}

    assert db.query(Conversation).filter(Conversation.session_id == "s1").count() == 1
    widget = db.get(Widget, widget_id)
    assert widget.total_conversations == 1
    assert widget.total_messages == 2


def test_invalid_chat_body(client, widget_id):
    r = client.post(f"/widgets/{widget_id}/chat", json={"message": "   ", "sessionId": "s"})
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "message"

    r = client.post(f"/widgets/{widget_id}/chat", json={"message": "hi"})
    assert r.status_code == 400


def test_concurrent_first_message_resolves_to_existing_conversation(client, widget_id, db, monkeypatch):
    widget = db.get(Widget, widget_id)
    db.add(Conversation(widget_id=widget.id, tenant_id=widget.tenant_id, session_id="race", visitor_info={}))
    db.commit()

    # primeira leitura "não vê" a conversa criada pela outra requisição
    original = ChatService.get_by_session
    calls = {"n": 0}

    def stale_first_read(session, session_id):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return original(session, session_id)

    monkeypatch.setattr(ChatService, "get_by_session", staticmethod(stale_first_read))

    conversation, created = ChatService.find_or_create_conversation(db, widget, "race")
    assert created is False
    assert conversation.session_id == "race"
    assert db.query(Conversation).filter(Conversation.session_id == "race").count() == 1


def test_chat_rate_limit(client, widget_id, echo, monkeypatch):
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(settings, "RATE_LIMIT_PER_MIN", 2)

    assert _send(client, widget_id).status_code == 200
    assert _send(client, widget_id).status_code == 200
    r = _send(client, widget_id)
    assert r.status_code == 429
    assert r.json()["error"] == "Too many requests, please try again later."
