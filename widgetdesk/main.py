## ponto de entrada do FastAPI (app instantiation, middlewares, handlers, inclusão de rotas)

# widgetdesk/main.py
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from widgetdesk.api.endpoints import auth, chat, integrations, onboarding, public_widget, widgets
from widgetdesk.core.config import settings
from widgetdesk.core.exceptions import AppError
from widgetdesk.core.logging_config import configure_logging, mask_database_url
from widgetdesk.db.base_class import utcnow

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("widgetdesk")

app = FastAPI(
    title="WidgetDesk",
    description="Backend multi-tenant para widgets de chat com IA, integrações OAuth e ativação de bots.",
    version="0.1.0",
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s -> %s (%.1fms)",
        request.method, request.url.path, response.status_code, elapsed_ms,
    )
    return response


# =========================
# Handlers de erro
# =========================
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("APP_ERROR: %s %s -> %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        # ("body", "email") -> "email"
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path", "header")]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return JSONResponse(status_code=400, content={"error": "Validation failed", "errors": errors})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("UNHANDLED_ERROR: %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(auth.router)
app.include_router(widgets.router)
app.include_router(chat.router)
app.include_router(integrations.router)
app.include_router(onboarding.router)
app.include_router(public_widget.router)


@app.get("/")
def read_root():
    return {"app_name": app.title, "environment": settings.ENV}


@app.get("/health")
def health():
    return {
        "status": "OK",
        "timestamp": utcnow().isoformat(),
        "environment": settings.ENV,
    }


@app.on_event("startup")
def startup():
    logger.warning("STARTUP DATABASE_URL = %s", mask_database_url(settings.DATABASE_URL))
    if settings.AUTO_CREATE_TABLES:
        from widgetdesk.create_table import create_all

        create_all()

# Para rodar com uvicorn:
# uvicorn widgetdesk.main:app --reload
