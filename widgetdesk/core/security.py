## Logica de segurança (jwt, hashing de senha, api key do n8n)
import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from widgetdesk.api.models.tenant import SubscriptionStatus, Tenant
from widgetdesk.core.config import settings
from widgetdesk.core.exceptions import AuthenticationError, AuthorizationError
from widgetdesk.db.session import get_db

ALGORITHM = "HS256"

# auto_error=False: sem token quem responde é o handler de AuthenticationError
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def create_access_token(tenant_id: str, expires_minutes: Optional[int] = None) -> str:
    minutes = expires_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode = {"sub": str(tenant_id), "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> str:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise AuthenticationError("Invalid token.")
    tenant_id = payload.get("sub")
    if not tenant_id:
        raise AuthenticationError("Invalid token.")
    return tenant_id


def get_current_tenant(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Tenant:
    if not token:
        raise AuthenticationError("Access denied. No token provided.")

    tenant_id = decode_access_token(token)
    tenant = db.get(Tenant, tenant_id)
    if not tenant:
        raise AuthenticationError("Invalid token.")
    return tenant


def require_active_subscription(tenant: Tenant = Depends(get_current_tenant)) -> Tenant:
    allowed = (SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIAL.value)
    if tenant.subscription_status not in allowed:
        raise AuthorizationError("Active subscription required.")
    return tenant


def check_service_key(provided: Optional[str]) -> None:
    """Valida a chave estática usada nas chamadas servidor-a-servidor (n8n)."""
    if not provided or not hmac.compare_digest(provided.encode(), settings.N8N_API_KEY.encode()):
        raise AuthenticationError("Invalid API Key")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)
