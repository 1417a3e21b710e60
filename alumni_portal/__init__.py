#alumni_portal/__init__.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.errors import BaseAPIError, get_error_message
from .middleware.request_id import RequestIDMiddleware
from .routes import sessions

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Session board for the alumni portal: classification, eligibility, attendance and feedback",
        version=settings.VERSION,
        docs_url="/api/docs" if settings.DEBUG else None,
        redoc_url="/api/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    # Include routers
    app.include_router(sessions.router, prefix="/api/v1")

    @app.exception_handler(BaseAPIError)
    async def api_error_handler(request: Request, exc: BaseAPIError):
        request_id = getattr(request.state, "request_id", None)
        log = logger.error if exc.status_code >= 500 else logger.info
        log(
            f"{exc.error_code} on {request.method} {request.url.path}: {exc.message}",
            extra={"request_id": request_id}
        )
        body = get_error_message(exc, include_details=settings.DEBUG)
        return JSONResponse(status_code=exc.status_code, content=body)

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "version": settings.VERSION}

    logger.info("Application created")
    return app
