import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from widgetdesk.core.config import settings
from widgetdesk.core.logging_config import mask_database_url

logger = logging.getLogger("db")


def build_engine(url: str):
    kwargs = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # sessões do FastAPI rodam no threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
    return create_engine(url, **kwargs)


engine = build_engine(settings.DATABASE_URL)
logger.info("USING DATABASE_URL = %s", mask_database_url(settings.DATABASE_URL))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# Dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
