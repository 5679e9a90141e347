"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
import asyncio
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import SessionMiddleware
from api.session_store import cleanup_expired
from api.routers import charts, data_source, filters, profiling
from config.settings import Config

config = Config.load()

logging.basicConfig(
    level=getattr(logging, config.app.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("eda_profiler")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Periodic cleanup of expired sessions."""
    async def _cleanup_loop():
        while True:
            await asyncio.sleep(config.app.cleanup_interval_seconds)
            cleanup_expired()

    logger.info("Starting %s", config.app.title)
    task = asyncio.create_task(_cleanup_loop())
    yield
    task.cancel()


app = FastAPI(
    title=config.app.title,
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.app.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Session cookie middleware
app.add_middleware(SessionMiddleware)

# Register routers
app.include_router(data_source.router)
app.include_router(profiling.router)
app.include_router(filters.router)
app.include_router(charts.router)


@app.get("/health")
def health():
    return {"status": "healthy"}
