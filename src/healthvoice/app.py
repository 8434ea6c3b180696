"""
FastAPI application factory and main app configuration.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.errors import APIError, domain_error_status
from .api.routers import auth, doctor, health, sessions
from .api.utils.responses import fail
from .application.controllers.registry import DoctorRegistry, SessionRegistry
from .application.use_cases.seed_demo_data import SeedDemoDataUseCase
from .core.config import Settings, get_settings
from .core.container import Container, ServiceNames, build_container
from .core.exceptions import HealthVoiceException, InferenceServiceError
from .core.structured_logger import configure_logging
from .domain.errors import DomainError
from .middleware.performance_middleware import PerformanceMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware

logger = logging.getLogger("healthvoice")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    container: Container = app.state.container
    settings = container.settings
    logger.info("Starting %s v%s (env=%s)", settings.app_name, settings.app_version, settings.app_env)

    mongo_client = None
    if settings.database.backend == "mongo":
        from .adapters.db.mongo.database import init_database

        try:
            mongo_client = await init_database(settings.database)
        except Exception as e:
            logger.error("Database connection failed: %s", e, exc_info=True)
            raise

    if settings.session.seed_demo_data:
        await SeedDemoDataUseCase(
            container.get(ServiceNames.ACCOUNT_REPOSITORY),
            container.get(ServiceNames.APPOINTMENT_REPOSITORY),
            bcrypt_rounds=settings.security.bcrypt_rounds,
        ).execute()

    logger.info("Application startup completed")

    yield

    logger.info("Shutting down %s", settings.app_name)
    await app.state.doctors.stop_all()
    if mongo_client is not None:
        mongo_client.close()


def create_app(
    settings: Optional[Settings] = None, container: Optional[Container] = None
) -> FastAPI:
    """Create and configure FastAPI application.

    Tests pass their own ``container`` to swap in fake services.
    """
    settings = settings or (container.settings if container else get_settings())
    configure_logging(settings.logging.level, settings.logging.format)
    container = container or build_container(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Voice-first patient triage with a clinic appointment queue",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.container = container
    app.state.sessions = SessionRegistry(container)
    app.state.doctors = DoctorRegistry(container)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
        allow_headers=["*"],
        max_age=600,
    )
    app.add_middleware(PerformanceMiddleware)
    # Added last so it runs first and request_id is set for everything else
    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(sessions.router)
    app.include_router(doctor.router)

    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "login": "POST /auth/login",
                "signup": "POST /auth/signup",
                "start_session": "POST /sessions",
                "send_message": "POST /sessions/{session_id}/messages",
                "book": "POST /sessions/{session_id}/booking",
                "queue": "GET /doctor/{doctor_id}/queue",
                "call_next": "POST /doctor/{doctor_id}/queue/next",
                "complete": "POST /doctor/{doctor_id}/consultation/complete",
                "records": "GET /doctor/{doctor_id}/records",
            },
        }

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        status_code = domain_error_status(exc)
        logger.warning("DomainError: %s (%s) %s", exc.error_code, status_code, exc.message)
        return JSONResponse(
            status_code=status_code,
            content=fail(request, exc.error_code or "DOMAIN_ERROR", exc.message, exc.details).model_dump(),
        )

    @app.exception_handler(HealthVoiceException)
    async def infrastructure_error_handler(request: Request, exc: HealthVoiceException):
        status_code = 502 if isinstance(exc, InferenceServiceError) else 500
        logger.error("%s: %s", type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=status_code,
            content=fail(request, exc.error_code or "INTERNAL_ERROR", exc.message).model_dump(),
        )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        req_id = getattr(request.state, "request_id", None)
        logger.error("APIError: %s (%s) %s | request_id=%s", exc.code, exc.http_status, exc.message, req_id)
        return JSONResponse(
            status_code=exc.http_status,
            content=fail(request, exc.code, exc.message, exc.details).model_dump(),
        )

    @app.exception_handler(RequestValidationError)
    async def pydantic_error_handler(request: Request, exc: RequestValidationError):
        error_details = exc.errors()
        logger.error("ValidationError on %s %s: %s", request.method, request.url.path, error_details)

        error_messages = []
        for error in error_details:
            loc = " -> ".join(str(x) for x in error.get("loc", []))
            error_messages.append(f"{loc}: {error.get('msg', 'Validation error')}")

        return JSONResponse(
            status_code=422,
            content=fail(
                request,
                "INVALID_INPUT",
                f"Input validation failed: {'; '.join(error_messages)}",
                {"path": request.url.path},
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        req_id = getattr(request.state, "request_id", None)
        logger.error("Unhandled error: %s | request_id=%s", type(exc).__name__, req_id, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=fail(
                request, "INTERNAL_ERROR", "An unexpected error has occurred. Please try again later."
            ).model_dump(),
        )

    return app
