import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from widgetdesk.api.models.tenant import Tenant
from widgetdesk.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from widgetdesk.core.security import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


class AuthService:

    @staticmethod
    def get_by_email(db: Session, email: str) -> Tenant | None:
        return db.query(Tenant).filter(Tenant.email == email).first()

    @staticmethod
    def register(db: Session, email: str, password: str, name: str) -> Tenant:
        if AuthService.get_by_email(db, email):
            raise ValidationError("Account already exists with this email")

        tenant = Tenant(
            email=email,
            password_hash=get_password_hash(password),
            name=name,
        )
        db.add(tenant)
        try:
            db.commit()
        except IntegrityError:
            # cadastro concorrente com o mesmo email
            db.rollback()
            raise ValidationError("Account already exists with this email")

        db.refresh(tenant)
        logger.info("TENANT_REGISTERED: tenant_id=%s", tenant.id)
        return tenant

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> Tenant | None:
        tenant = AuthService.get_by_email(db, email)
        if not tenant:
            return None

        if not verify_password(password, tenant.password_hash):
            return None

        return tenant

    @staticmethod
    def login(db: Session, email: str, password: str) -> tuple[Tenant, str]:
        tenant = AuthService.authenticate(db, email, password)
        if not tenant:
            raise AuthenticationError("Invalid email or password")

        return tenant, create_access_token(tenant.id)

    @staticmethod
    def update_profile(db: Session, tenant_id: str, data: dict) -> Tenant:
        tenant = db.get(Tenant, tenant_id)
        if not tenant:
            raise NotFoundError("Tenant not found")

        for field, value in data.items():
            setattr(tenant, field, value)

        db.commit()
        db.refresh(tenant)
        return tenant
