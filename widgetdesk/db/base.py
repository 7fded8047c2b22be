# IMPORTAR TODOS OS MODELOS para que o SQLAlchemy registre no metadata
from widgetdesk.db.base_class import Base  # noqa: F401
from widgetdesk.api.models.tenant import Tenant  # noqa: F401
from widgetdesk.api.models.widget import Widget  # noqa: F401
from widgetdesk.api.models.integration import Integration  # noqa: F401
from widgetdesk.api.models.conversation import Conversation  # noqa: F401
from widgetdesk.api.models.message import Message  # noqa: F401
from widgetdesk.api.models.bot_config import BotConfig  # noqa: F401
