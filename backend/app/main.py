import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DataError, OperationalError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.metrics import router as metrics_router
from app.api.routes import router as api_router
from app.config import get_settings
from app.core.errors import SocialError, TransportError, ValidationError, error_body
from app.database import engine
from app.models import Base


LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        }
    },
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        }
    },
    "root": {
        "handlers": ["default"],
        "level": "INFO",
    },
    "loggers": {
        "app.services.conversations": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        }
    },
}


logging.config.dictConfig(LOGGING_CONFIG)
logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(title=settings.app_name, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin) for origin in settings.cors_origins],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_origin_regex=settings.cors_allow_origin_regex,
)


@app.exception_handler(SocialError)
async def handle_social_error(request: Request, exc: SocialError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_body(exc.message, exc.details)),
    )


@app.exception_handler(OperationalError)
async def handle_storage_unavailable(request: Request, exc: OperationalError) -> JSONResponse:
    logger.exception("Storage unavailable during %s %s", request.method, request.url.path)
    error = TransportError("Storage is temporarily unavailable")
    return JSONResponse(status_code=error.status_code, content=error_body(error.message))


@app.exception_handler(DataError)
async def handle_rejected_value(request: Request, exc: DataError) -> JSONResponse:
    logger.warning(
        "Storage rejected a value during %s %s: %s", request.method, request.url.path, exc.orig
    )
    error = ValidationError("A value does not fit its field")
    return JSONResponse(status_code=error.status_code, content=error_body(error.message))


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content=error_body("Invalid request", jsonable_encoder(exc.errors())),
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.get("/health", tags=["system"])
def health_check() -> dict[str, str]:
    """Simple health check endpoint."""
    return {"status": "ok", "environment": settings.environment}


@app.on_event("startup")
def _startup() -> None:
    if settings.auto_create_tables:
        Base.metadata.create_all(bind=engine)
        logger.info("Ensured database tables exist")


app.include_router(api_router, prefix="/api")
app.include_router(metrics_router)
