## Superfície pública do widget: config de bootstrap e script embutível
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from widgetdesk.api.services.widget_script import render_widget_script
from widgetdesk.api.services.widget_service import WidgetService
from widgetdesk.core.config import settings
from widgetdesk.db.session import get_db
from widgetdesk.schemas.widget import PublicWidgetConfig

router = APIRouter(tags=["Public Widget"])

CONFIG_HEADERS = {
    "Cache-Control": "public, max-age=300",
    "Access-Control-Allow-Origin": "*",
}


@router.get("/widget/{widget_id}/config", response_model=PublicWidgetConfig)
def widget_config(widget_id: str, db: Session = Depends(get_db)):
    data = PublicWidgetConfig(**WidgetService.public_config(db, widget_id))
    return JSONResponse(
        content=data.model_dump(mode="json", by_alias=True),
        headers=CONFIG_HEADERS,
    )


@router.get("/widget.js")
def widget_script():
    return Response(
        content=render_widget_script(settings.WIDGET_CDN_URL),
        media_type="application/javascript",
        headers={"Cache-Control": "public, max-age=86400"},
    )
