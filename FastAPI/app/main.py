import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import PLACEHOLDER_SECRET_KEY, Settings, settings as default_settings
from app.core.exceptions import ServiceError
from app.core.validation import field_errors
from app.database import create_db_engine, create_session_factory, init_db
from app.logging_config import request_log_level, setup_logging
from app.schemas.common import ErrorEnvelope
from app.routers import applications, auth, jobs, users

logger = logging.getLogger(__name__)


def _check_secrets(settings: Settings) -> None:
    env = (settings.app_env or "development").lower()
    if settings.secret_key == PLACEHOLDER_SECRET_KEY:
        if env in {"production", "prod"}:
            raise RuntimeError("SECRET_KEY placeholder is not allowed in production")
        logger.warning("SECRET_KEY is using placeholder default. Set SECRET_KEY in .env for secure deployments.")


def _error_response(status_code: int, message: str, errors: list | None = None) -> JSONResponse:
    body = ErrorEnvelope(message=message, errors=errors or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return _error_response(exc.status_code, exc.message, exc.errors)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_response(400, "Validation failed", field_errors(exc.errors()))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = "Route not found" if exc.status_code == 404 else str(exc.detail)
        return _error_response(exc.status_code, message)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
        return _error_response(500, "Internal server error")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the API. The engine and session factory are created at startup and
    disposed at shutdown; nothing touches the database at import time.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting JobConnect API (%s)", settings.app_env)
        _check_secrets(settings)
        engine = create_db_engine(settings.database_url)
        init_db(engine)
        app.state.engine = engine
        app.state.session_factory = create_session_factory(engine)
        try:
            yield
        finally:
            engine.dispose()
            logger.info("JobConnect API stopped")

    app = FastAPI(
        title="JobConnect API",
        description="Job postings, applications and role-scoped access for recruiters and job seekers.",
        version="1.0.0",
        lifespan=lifespan,
    )

    cors_origins = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        # An exception escaping the route still ends as a 500
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.log(
                request_log_level(status_code),
                "%s %s %d %.1fms",
                request.method, request.url.path, status_code, elapsed_ms,
            )

    register_exception_handlers(app)

    for router in (auth.router, users.router, jobs.router, applications.router):
        app.include_router(router, prefix=settings.api_prefix)

    @app.get(f"{settings.api_prefix}/health")
    def health(request: Request):
        try:
            with request.app.state.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Readiness check failed")
            return JSONResponse(status_code=503, content={"success": False, "message": "Database unavailable"})
        return {"success": True, "message": "JobConnect API is running"}

    return app


app = create_app()
