from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from sqlalchemy import text
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from fieldtasks.api import auth, tasks, users
from fieldtasks.core.config import Settings, get_settings
from fieldtasks.core.logging_config import setup_logging
from fieldtasks.core.metrics import request_count, request_duration, db_connected, get_metrics_text
from fieldtasks.db.session import build_engine, build_sessionmaker, create_tables
from fieldtasks.services.auth import AuthService
import time
import logging

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "POST, GET, OPTIONS, PUT, DELETE"
ALLOWED_HEADERS = "Accept, Content-Type, Content-Length, Authorization"


def _endpoint_label(request: Request) -> str:
    # label by route template so path ids never become separate series
    route = request.scope.get("route")
    return route.path if route is not None else "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        try:
            response = await call_next(request)
        except Exception:
            endpoint = _endpoint_label(request)
            request_count.labels(
                method=request.method,
                endpoint=endpoint,
                status=500
            ).inc()
            request_duration.labels(
                method=request.method,
                endpoint=endpoint
            ).observe(time.time() - start_time)
            raise

        endpoint = _endpoint_label(request)
        request_count.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code
        ).inc()
        request_duration.labels(
            method=request.method,
            endpoint=endpoint
        ).observe(time.time() - start_time)
        return response


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Stamp the cross-origin headers on every response.

    OPTIONS requests never reach routing or authentication: they are answered
    here with 200 and an empty body.
    """

    def __init__(self, app, allow_origin: str = "*"):
        super().__init__(app)
        self.cors_headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": ALLOWED_METHODS,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        }

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)
        response.headers.update(self.cors_headers)
        return response


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting...")

    try:
        await create_tables(app.state.engine)
        db_connected.set(1)
        logger.info("Database connected, tables ready")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        db_connected.set(0)
        raise

    yield

    logger.info("Application shutting down...")
    await app.state.engine.dispose()
    db_connected.set(0)
    logger.info("Shutdown complete")


def create_app(settings: Settings | None = None, **engine_kwargs) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings.database_url, echo=settings.DEBUG, **engine_kwargs)
    app.state.sessionmaker = build_sessionmaker(app.state.engine)
    app.state.auth_service = AuthService(settings)

    app.add_middleware(MetricsMiddleware)
    app.add_middleware(CORSHeadersMiddleware, allow_origin=settings.ALLOWED_ORIGIN)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(auth.router)
    app.include_router(tasks.router)
    app.include_router(users.router)

    @app.get("/metrics", tags=["monitoring"])
    async def metrics():
        return Response(
            content=get_metrics_text(),
            media_type="text/plain; version=0.0.4; charset=utf-8"
        )

    @app.get("/health", tags=["monitoring"])
    async def health_check(request: Request):
        try:
            async with request.app.state.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            database = "connected"
        except Exception as e:
            logger.warning(f"Health check database probe failed: {e}")
            database = "disconnected"

        return {
            "status": "healthy" if database == "connected" else "degraded",
            "service": settings.API_TITLE,
            "version": settings.API_VERSION,
            "dependencies": {"database": database}
        }

    return app


def run():
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
