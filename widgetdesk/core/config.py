## config do ambiente (variaveis de ambiente)
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # O model_config especifica onde Pydantic deve buscar as variáveis (do .env)
    model_config = SettingsConfigDict(
        env_file='.env',
        case_sensitive=True,
        extra='ignore',
    )

    # ----------------------------------------------------
    # 1. CONFIGURAÇÕES GERAIS DO PROJETO E DO SERVIDOR
    # ----------------------------------------------------
    ENV: str = "development"
    SECRET_KEY: str
    BASE_URL: str = "http://localhost:5000"
    FRONTEND_BASE_URL: str = "http://localhost:3000"
    WIDGET_CDN_URL: str = "http://localhost:5000"
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    LOG_LEVEL: str = "INFO"

    # JWT do painel (7 dias)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # ----------------------------------------------------
    # 2. CONFIGURAÇÕES DO BANCO DE DADOS
    # ----------------------------------------------------
    DATABASE_URL: str
    AUTO_CREATE_TABLES: bool = False

    # ----------------------------------------------------
    # 3. INTEGRAÇÃO N8N (automação)
    # ----------------------------------------------------
    N8N_API_KEY: str
    # sem URL a ativação não encaminha nada
    N8N_WEBHOOK_URL: Optional[str] = None
    N8N_WEBHOOK_TIMEOUT: float = 10.0

    # ----------------------------------------------------
    # 4. BROKER OAUTH (Google / Facebook / Instagram)
    # ----------------------------------------------------
    OAUTH_BROKER_BASE_URL: str = "https://api.uppile.com/v1"
    OAUTH_BROKER_TOKEN: str
    OAUTH_BROKER_TIMEOUT: float = 15.0

    # ----------------------------------------------------
    # 5. RATE LIMIT DO CHAT PÚBLICO
    # ----------------------------------------------------
    RATE_LIMIT_ENABLED: bool = False
    RATE_LIMIT_PER_MIN: int = 60


# Cria uma instância única da classe Settings para ser importada em toda a aplicação
settings = Settings()
