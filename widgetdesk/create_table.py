import logging

# IMPORTAR TODOS OS MODELOS para que o SQLAlchemy registre no metadata
from widgetdesk.db.base import Base
from widgetdesk.db.session import engine

logger = logging.getLogger("startup")


def create_all():
    logger.info("Criando tabelas no banco...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tabelas criadas com sucesso")


if __name__ == "__main__":
    logging.basicConfig(level="INFO")
    create_all()
