import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from . import models  # noqa: F401  - registers tables on Base
from .config import ALLOWED_ORIGINS, RATE_LIMIT_ENABLED
from .database import Base, engine
from .domain.accounts import router as auth_router
from .domain.accounts import users_router
from .domain.admin import router as admin_router
from .domain.bookings import router as bookings_router
from .domain.messages import router as messages_router
from .domain.notifications import router as notifications_router
from .domain.properties import router as properties_router
from .domain.reviews import router as reviews_router
from .errors import register_exception_handlers
from .rate_limiter import get_redis_client

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 BrokerConnect API starting")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info(f"✅ Schema ready ({len(Base.metadata.tables)} tables)")
    except SQLAlchemyError as e:
        # Several workers may race on first boot; requests then surface store_unavailable
        logger.error(f"❌ Could not create database schema: {e}")

    if RATE_LIMIT_ENABLED and get_redis_client() is None:
        logger.warning("⚠️ Rate limits are tracked per process (no Redis)")

    yield
    logger.info("👋 BrokerConnect API shutting down")


app = FastAPI(title="BrokerConnect API", version="1.0.0", lifespan=lifespan)

register_exception_handlers(app)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    duration_ms = (time.time() - start_time) * 1000
    logger.info(f"{request.method} {request.url.path} - {response.status_code} ({duration_ms:.0f}ms)")
    return response


# CORS Configuration
# Browsers reject credentials with a wildcard origin, so only allow them for explicit lists
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials="*" not in ALLOWED_ORIGINS,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(properties_router)
app.include_router(bookings_router)
app.include_router(messages_router)
app.include_router(notifications_router)
app.include_router(reviews_router)
app.include_router(admin_router)


@app.get("/api/health")
def health():
    return {"status": "OK", "message": "BrokerConnect API is running"}


@app.get("/api/health/redis")
async def redis_health_check():
    """Rate limiter backend status"""
    redis_client = get_redis_client()
    if redis_client is None:
        return {"status": "degraded", "redis": {"connected": False, "fallback": "in-memory"}}

    started = time.perf_counter()
    try:
        redis_client.ping()
    except Exception as e:
        return {"status": "unhealthy", "redis": {"connected": False, "error": str(e)}}
    return {
        "status": "healthy",
        "redis": {"connected": True, "latency_ms": round((time.perf_counter() - started) * 1000, 2)},
    }
