import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from deploy_platform.api.routes.dashboard import router as dashboard_router
from deploy_platform.api.routes.networks import router as networks_router
from deploy_platform.api.routes.system import router as system_router
from deploy_platform.api.routes.users import router as users_router
from deploy_platform.api.routes.wizard import router as wizard_router
from deploy_platform.container import build_container
from deploy_platform.core.errors import (
    ConfigurationInvalid, DuplicateKeyError, EntityNotFound, PersistenceError,
    PlatformError, PlatformValidationError, ServiceControlError,
)
from deploy_platform.infrastructure.host import HostMetrics
from deploy_platform.infrastructure.postgres.config import Settings, settings as default_settings
from deploy_platform.infrastructure.postgres.database import Database
from deploy_platform.infrastructure.supervisor import ProcessSupervisor


logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message, **extra})


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else first.get("msg", "Invalid request")


def register_exception_handlers(app: FastAPI) -> None:
    """Map the PlatformError hierarchy onto the ``{success, error}`` envelope."""

    @app.exception_handler(ConfigurationInvalid)
    async def configuration_invalid(request: Request, exc: ConfigurationInvalid):
        return _error(400, str(exc), errors=exc.errors)

    @app.exception_handler(PlatformValidationError)
    async def validation_error(request: Request, exc: PlatformValidationError):
        return _error(400, str(exc))

    @app.exception_handler(EntityNotFound)
    async def not_found(request: Request, exc: EntityNotFound):
        return _error(404, str(exc))

    @app.exception_handler(DuplicateKeyError)
    async def duplicate_key(request: Request, exc: DuplicateKeyError):
        return _error(400, str(exc))

    @app.exception_handler(PersistenceError)
    async def persistence_error(request: Request, exc: PersistenceError):
        logger.error(f"Persistence failure on {request.method} {request.url.path}: {exc}")
        return _error(500, str(exc))

    @app.exception_handler(ServiceControlError)
    async def service_control_error(request: Request, exc: ServiceControlError):
        logger.error(f"Service control failure: {exc}")
        return _error(500, str(exc))

    @app.exception_handler(PlatformError)
    async def platform_error(request: Request, exc: PlatformError):
        return _error(500, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return _error(400, _validation_message(exc))

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error(500, str(exc))


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    supervisor: Optional[ProcessSupervisor] = None,
    host_metrics: Optional[HostMetrics] = None,
) -> FastAPI:
    settings = settings or default_settings
    container = build_container(
        settings=settings,
        database=database,
        supervisor=supervisor,
        host_metrics=host_metrics,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container.database.open()
        if settings.auto_create_tables:
            container.database.create_all()
        logger.info("Admin server started")
        yield
        container.database.close()
        logger.info("Admin server stopped")

    app = FastAPI(title="Cosmos Deploy Admin API", lifespan=lifespan)
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed:.1f} ms)")
        return response

    register_exception_handlers(app)

    @app.get("/health")
    def health():
        return {"status": "OK", "message": "Admin server is running"}

    app.include_router(users_router)
    app.include_router(networks_router)
    app.include_router(system_router)
    app.include_router(dashboard_router)
    app.include_router(wizard_router)

    return app


app = create_app()
