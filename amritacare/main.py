from contextlib import asynccontextmanager
from typing import Optional
import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables as early as possible
load_dotenv()

from .core.config import Settings, get_settings
from .dependencies import Services, build_services
from .exceptions import AmritaCareError, amritacare_exception_handler, create_error_response
from .middleware import ErrorHandlingMiddleware, LoggingMiddleware, SecurityMiddleware, RequestSizeLimitMiddleware
from .routers import MISSING_FIELD_CODES, contact_router, health_router, otp_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=settings.LOG_FORMAT
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Absent or non-object bodies map to the endpoint's missing-field error"""
    code = MISSING_FIELD_CODES.get(request.url.path, "invalid_request")
    logger.info(f"Rejected request body for {request.url.path}: {code}")
    return JSONResponse(status_code=400, content=create_error_response(code))


def create_app(settings: Optional[Settings] = None, services: Optional[Services] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME}...")
        if settings.otp_secret is None:
            # Keep unrelated endpoints available; OTP routes answer 500 per request
            logger.error("OTP secret is not configured; OTP endpoints will fail")
        if not (settings.sendgrid_configured or settings.smtp_configured):
            logger.warning("No email delivery provider is configured")
        yield
        logger.info(f"Shutting down {settings.APP_NAME}...")

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if settings.DOCS_ENABLED else None),
        redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None)
    )

    # Providers and guard backend are chosen once here, never per request
    app.state.services = services or build_services(settings)

    app.add_exception_handler(AmritaCareError, amritacare_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_middleware(ErrorHandlingMiddleware, debug=settings.DEBUG)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityMiddleware)
    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_REQUEST_SIZE)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(otp_router.router)
    app.include_router(otp_router.legacy_router)
    app.include_router(contact_router.router)
    app.include_router(health_router.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    _settings = get_settings()
    uvicorn.run(
        "amritacare.main:app",
        host=_settings.HOST,
        port=_settings.PORT,
        log_level=_settings.LOG_LEVEL.lower()
    )
