"""
SocialFold API — entry point.

Startup sequence:
  1. Configure OTel tracing (→ Jaeger via OTLP)
  2. Create tables if not present
  3. Start the ranking-service HTTP client
  4. Expose Prometheus /metrics endpoint
"""
import logging

from contextlib import asynccontextmanager
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from socialfold.config import settings
from socialfold.database import init_db
from socialfold.telemetry import setup_tracing, instrument_app
from socialfold.clients.ranking_client import ranking_client
from socialfold.routers import comments, feed, notifications, posts, users

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)

# Set up tracing before the app is created so all imports are instrumented
setup_tracing()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage startup and shutdown of all external connections."""
    logger.info("Starting SocialFold API (env=%s)", settings.environment)

    await init_db()
    await ranking_client.start()

    logger.info("All services connected. API ready.")
    yield

    logger.info("Shutting down...")
    await ranking_client.stop()


app = FastAPI(
    title="SocialFold API",
    description=(
        "Social network backend: users, follows, posts, likes, comments, "
        "notifications and a ranked home timeline."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

# ── Routers ────────────────────────────────────────────────────────────────
app.include_router(users.router, prefix="/users", tags=["Users"])
app.include_router(posts.router, prefix="/posts", tags=["Posts"])
app.include_router(comments.router, prefix="/comments", tags=["Comments"])
app.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
app.include_router(feed.router, prefix="/feed", tags=["Feed"])

# ── Prometheus metrics endpoint ────────────────────────────────────────────
# Mounted at /metrics — scraped by Prometheus
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── OTel FastAPI instrumentation ──────────────────────────────────────────
instrument_app(app)


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "ok", "service": settings.service_name}
