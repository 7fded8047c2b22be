from widgetdesk.api.models.conversation import Conversation
from widgetdesk.api.models.message import Message
from widgetdesk.api.models.tenant import Tenant
from widgetdesk.api.models.widget import Widget
from widgetdesk.seed import DEMO_EMAIL, DEMO_PASSWORD, DEMO_WIDGET_ID, seed


def test_seed_creates_demo_data_once(db):
    tenant = seed(db)
    seed(db)

    assert db.query(Tenant).count() == 1
    assert tenant.subscription_plan == "PROFESSIONAL"
    assert tenant.subscription_status == "ACTIVE"

    widget = db.get(Widget, DEMO_WIDGET_ID)
    assert widget.tenant_id == tenant.id
    assert widget.config["theme"]["borderRadius"] == "12px"
    assert widget.config["theme"]["primaryColor"] == "#007bff"
    assert widget.total_conversations == 1
    assert widget.total_messages == 2

    assert db.query(Conversation).count() == 1
    assert [m.role for m in db.query(Message).order_by(Message.id)] == ["USER", "ASSISTANT"]


def test_demo_tenant_can_log_in_and_widget_is_public(client, db):
    seed(db)

    r = client.post("/auth/login", json={"email": DEMO_EMAIL, "password": DEMO_PASSWORD})
    assert r.status_code == 200, r.text
    assert r.json()["tenant"]["subscriptionPlan"] == "PROFESSIONAL"

    r = client.get(f"/widget/{DEMO_WIDGET_ID}/config")
    assert r.status_code == 200
    assert r.json()["name"] == "Customer Support Bot"
