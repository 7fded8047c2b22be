from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from widgetdesk.api.models.integration import Integration, Provider
from widgetdesk.api.services.oauth_broker import OAuthBrokerClient
from widgetdesk.core.exceptions import ConflictError, NotFoundError
from widgetdesk.core.logging_config import token_tail
from widgetdesk.core.security import check_service_key

logger = logging.getLogger(__name__)


class IntegrationService:

    @staticmethod
    def get_by_provider(db: Session, tenant_id: str, provider: str) -> Integration | None:
        return (
            db.query(Integration)
            .filter(Integration.tenant_id == tenant_id, Integration.provider == provider)
            .first()
        )

    @staticmethod
    def list_for_tenant(db: Session, tenant_id: str) -> List[Integration]:
        return (
            db.query(Integration)
            .filter(Integration.tenant_id == tenant_id)
            .order_by(Integration.created_at)
            .all()
        )

    @staticmethod
    def upsert_integration(
        db: Session,
        tenant_id: str,
        provider: str,
        external_id: Optional[str],
        token_ref: str,
        scopes: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Integration:
        """
        Cria/atualiza a integração do tenant com o provedor.

        Regras:
        - um registro por (tenant_id, provider): segunda chamada substitui no lugar.
        - token_ref é único globalmente; não pode estar em outra integração.
        """
        hijack = (
            db.query(Integration)
            .filter(
                Integration.token_ref == token_ref,
                (Integration.tenant_id != tenant_id) | (Integration.provider != provider),
            )
            .first()
        )
        if hijack:
            raise ConflictError("tokenRef already bound to another integration")

        values = {
            "external_id": external_id,
            "token_ref": token_ref,
            "scopes": list(scopes or []),
            "meta": dict(metadata or {}),
        }

        integration = IntegrationService.get_by_provider(db, tenant_id, provider)
        if integration:
            for field, value in values.items():
                setattr(integration, field, value)
            db.commit()
        else:
            integration = Integration(tenant_id=tenant_id, provider=provider, **values)
            db.add(integration)
            try:
                db.commit()
            except IntegrityError:
                # outro callback criou o par (tenant, provider) antes: vira update
                db.rollback()
                integration = IntegrationService.get_by_provider(db, tenant_id, provider)
                if not integration:
                    raise ConflictError("tokenRef already bound to another integration")
                for field, value in values.items():
                    setattr(integration, field, value)
                db.commit()

        db.refresh(integration)
        logger.info(
            "INTEGRATION_UPSERT_OK: tenant_id=%s provider=%s token_ref=%s",
            tenant_id, provider, token_tail(token_ref),
        )
        return integration

    @staticmethod
    def set_calendar(db: Session, tenant_id: str, calendar_id: str) -> Integration | None:
        integration = IntegrationService.get_by_provider(db, tenant_id, Provider.GOOGLE.value)
        if not integration:
            return None

        # reatribui o dict inteiro para o SQLAlchemy detectar a mudança no JSON
        integration.meta = {**(integration.meta or {}), "calendarId": calendar_id}
        db.commit()
        db.refresh(integration)
        return integration

    @staticmethod
    def disconnect(db: Session, tenant_id: str, provider: str) -> None:
        integration = IntegrationService.get_by_provider(db, tenant_id, provider)
        if not integration:
            raise NotFoundError(f"{provider} integration not found")

        db.delete(integration)
        db.commit()
        logger.info("INTEGRATION_DISCONNECTED: tenant_id=%s provider=%s", tenant_id, provider)

    @staticmethod
    def resolve_access_token(
        db: Session,
        token_ref: str,
        caller_key: Optional[str],
        broker: OAuthBrokerClient,
    ) -> Dict[str, Any]:
        """
        Troca um token_ref por um access token novo, direto do broker.
        O token retornado não é gravado nem cacheado aqui.
        """
        check_service_key(caller_key)

        integration = db.query(Integration).filter(Integration.token_ref == token_ref).first()
        if not integration:
            raise NotFoundError("Integration not found")

        minted = broker.mint_access_token(token_ref)
        logger.info(
            "TOKEN_RESOLVED: provider=%s token_ref=%s", integration.provider, token_tail(token_ref)
        )
        return {
            "access_token": minted["access_token"],
            "expires_at": minted.get("expires_at"),
            "provider": integration.provider,
        }

    @staticmethod
    def status(db: Session, tenant_id: str) -> Dict[str, Optional[Dict[str, Any]]]:
        result: Dict[str, Optional[Dict[str, Any]]] = {
            "google": None,
            "facebook": None,
            "instagram": None,
            "gmail": None,
        }
        for integration in IntegrationService.list_for_tenant(db, tenant_id):
            entry = {
                "connected": True,
                "external_id": integration.external_id,
                "metadata": integration.meta or {},
                "connected_at": integration.created_at,
            }
            result[integration.provider] = entry
            if integration.provider == Provider.GOOGLE.value:
                # gmail usa o mesmo token do google
                result["gmail"] = dict(entry)
        return result
