from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware
from transfer_pricing.api import quotes, routes
from transfer_pricing.api.deps import build_quote_service
from transfer_pricing.core.config import settings
from transfer_pricing.core.exceptions import InvalidVehicleType, RouteNotFound, RepositoryUnavailable
from transfer_pricing.core.redis import init_redis, close_redis, is_redis_connected
from transfer_pricing.core.metrics import request_count, request_duration, db_connected, redis_connected, get_metrics_text
from transfer_pricing.db.session import engine, check_database
import time
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        try:
            response = await call_next(request)
            duration = time.time() - start_time

            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code
            ).inc()

            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)

            return response
        except Exception:
            duration = time.time() - start_time
            request_count.labels(
                method=request.method,
                endpoint=request.url.path,
                status=500
            ).inc()
            request_duration.labels(
                method=request.method,
                endpoint=request.url.path
            ).observe(duration)
            raise


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting...")

    logger.info("Initializing Redis connection...")
    try:
        await init_redis()
        redis_connected.set(1)
        logger.info("Redis connected")
    except Exception as e:
        logger.error(f"Redis connection failed: {e}")
        redis_connected.set(0)

    logger.info("Checking database connection...")
    database_up = await check_database()
    app.state.database_connected = database_up
    db_connected.set(1 if database_up else 0)

    yield

    logger.info("Application shutting down...")
    usage = app.state.quote_service.composer.usage
    if hasattr(usage, "drain"):
        await usage.drain()
    await close_redis()
    redis_connected.set(0)
    await engine.dispose()
    app.state.database_connected = False
    db_connected.set(0)
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan
)
app.state.quote_service = build_quote_service()

app.add_middleware(MetricsMiddleware)

app.include_router(quotes.router)
app.include_router(routes.router)


@app.exception_handler(RouteNotFound)
async def route_not_found_handler(request: Request, exc: RouteNotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidVehicleType)
async def invalid_vehicle_type_handler(request: Request, exc: InvalidVehicleType):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(RepositoryUnavailable)
async def repository_unavailable_handler(request: Request, exc: RepositoryUnavailable):
    logger.error(f"Quote aborted: {exc}")
    return JSONResponse(
        status_code=503,
        content={"detail": "Pricing data temporarily unavailable"},
        headers={"Retry-After": "1"},
    )


@app.get("/metrics", tags=["monitoring"])
async def metrics():
    return Response(
        content=get_metrics_text(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@app.get("/health", tags=["monitoring"])
async def health_check(request: Request):
    database_up = getattr(request.app.state, "database_connected", False)
    return {
        "status": "healthy",
        "service": settings.API_TITLE,
        "version": settings.API_VERSION,
        "dependencies": {
            "redis": "connected" if is_redis_connected() else "disconnected",
            "database": "connected" if database_up else "disconnected"
        }
    }


@app.get("/readiness", tags=["monitoring"])
async def readiness_check():
    if not is_redis_connected():
        return JSONResponse(
            status_code=503,
            content={"ready": False, "reason": "Redis not available"},
        )

    return {
        "ready": True,
        "service": settings.API_TITLE
    }


@app.get("/", tags=["root"])
async def root():
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "docs": "/docs",
        "health": "/health",
        "metrics": "/metrics"
    }
