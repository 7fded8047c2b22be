import logging
import re

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def mask_database_url(url: str) -> str:
    return re.sub(r":([^:@/]+)@", ":***@", url)


def token_tail(value: str | None) -> str:
    # só os últimos caracteres vão para o log
    if not value:
        return "-"
    return f"...{value[-6:]}"
