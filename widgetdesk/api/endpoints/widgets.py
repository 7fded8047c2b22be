## Rotas de widgets do tenant (CRUD, chave de API, embed)
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from widgetdesk.api.models.tenant import Tenant
from widgetdesk.api.services.widget_service import WidgetService
from widgetdesk.core.security import get_current_tenant, require_active_subscription
from widgetdesk.db.session import get_db
from widgetdesk.schemas.widget import (
    ApiKeyOut,
    EmbedOut,
    WidgetCreate,
    WidgetOut,
    WidgetSaved,
    WidgetUpdate,
)

router = APIRouter(prefix="/widgets", tags=["Widgets"])


def _payload_data(payload: WidgetCreate) -> dict:
    data = payload.model_dump(exclude_unset=True)
    if data.get("webhook_url") is not None:
        data["webhook_url"] = str(data["webhook_url"])
    return data


@router.get("", response_model=List[WidgetOut])
def list_widgets(tenant: Tenant = Depends(get_current_tenant), db: Session = Depends(get_db)):
    return WidgetService.list_for_tenant(db, tenant.id)


@router.post("", response_model=WidgetSaved, status_code=status.HTTP_201_CREATED)
def create_widget(
    payload: WidgetCreate,
    tenant: Tenant = Depends(require_active_subscription),
    db: Session = Depends(get_db),
):
    widget = WidgetService.create(db, tenant, _payload_data(payload))
    return {"message": "Widget created successfully", "widget": widget}


@router.get("/{widget_id}", response_model=WidgetOut)
def get_widget(
    widget_id: str,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    return WidgetService.get_owned(db, tenant.id, widget_id)


@router.put("/{widget_id}", response_model=WidgetSaved)
def update_widget(
    widget_id: str,
    payload: WidgetUpdate,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    data = {k: v for k, v in _payload_data(payload).items() if v is not None or k == "description"}
    widget = WidgetService.update(db, tenant.id, widget_id, data)
    return {"message": "Widget updated successfully", "widget": widget}


@router.delete("/{widget_id}")
def delete_widget(
    widget_id: str,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    WidgetService.delete(db, tenant.id, widget_id)
    return {"message": "Widget deleted successfully"}


@router.post("/{widget_id}/regenerate-key", response_model=ApiKeyOut)
def regenerate_key(
    widget_id: str,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    api_key = WidgetService.regenerate_key(db, tenant.id, widget_id)
    return {"message": "API key regenerated successfully", "api_key": api_key}


@router.get("/{widget_id}/embed", response_model=EmbedOut)
def embed_code(
    widget_id: str,
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
):
    widget = WidgetService.get_owned(db, tenant.id, widget_id)
    return WidgetService.embed_code(widget)
