from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from guardian.config import Settings, settings as default_settings
from guardian.database import create_engine_from_settings, create_session_factory, init_db
from guardian.exceptions import GuardianError
from guardian.api.health import router as health_router
from guardian.api.locations import router as locations_router
from guardian.services.notification_service import build_notifier
from guardian.utils.middleware import LoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app_settings = app.state.settings
    await init_db(app.state.engine)

    logger.info(f"Guardian server running on http://{app_settings.host}:{app_settings.port}")
    logger.info("Report location:  POST /api/location")
    logger.info("Latest position:  GET  /api/latest/{device_id}")
    logger.info("Daily trail:      GET  /api/history/{device_id}?date=YYYY-MM-DD")
    logger.info("Device roster:    GET  /api/devices")

    yield

    await app.state.notifier.close()
    await app.state.engine.dispose()


async def guardian_error_handler(request: Request, exc: GuardianError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "invalid request", "details": jsonable_encoder(exc.errors())}
    )


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "internal server error"}
    )


def create_app(settings: Settings = None) -> FastAPI:
    """Build the application together with the storage engine it owns."""
    settings = settings or default_settings

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Stores device location reports and serves latest position, daily trail and device roster",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = create_engine_from_settings(settings)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.notifier = build_notifier(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(GuardianError, guardian_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(locations_router)
    app.include_router(health_router)

    return app


def run():
    import uvicorn
    from guardian.utils.logging import setup_logging

    setup_logging(default_settings.log_level, default_settings.log_format, default_settings.log_file)
    uvicorn.run(
        create_app(default_settings),
        host=default_settings.host,
        port=default_settings.port,
        log_config=None,
    )
