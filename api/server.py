"""
habitline API Server - REST API for the day timeline.
"""
# ruff: noqa: S104
# S104: Development server binding (guarded by __name__ check)

import logging
import os

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from habitline import __version__, config
from habitline.observability import CorrelationIdMiddleware, configure_logging

logger = logging.getLogger(__name__)

# FastAPI app initialization
app = FastAPI(
    title="habitline API",
    description="Habit timeline scheduling and daily progress tracking",
    version=__version__,
)

# CORS middleware - configurable via CORS_ORIGINS env var
# Dev default: allow all origins; Production: set CORS_ORIGINS to comma-separated list
cors_origins_env = os.getenv("CORS_ORIGINS", "*")
cors_origins = (
    ["*"] if cors_origins_env == "*" else [o.strip() for o in cors_origins_env.split(",")]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationIdMiddleware)

from api.timeline_router import get_session, timeline_router  # noqa: E402

app.include_router(timeline_router, prefix="/api")


@app.on_event("startup")
async def log_startup():
    """Build the session eagerly so config errors surface at boot."""
    session = get_session()
    grid = session.grid.config
    logger.info("=== habitline Startup ===")
    logger.info(
        f"Timeline window {grid.start_hour}-{grid.end_hour}h, "
        f"{grid.pixels_per_hour}px/h, snap {grid.snap_interval_minutes}min"
    )
    logger.info(f"Strict invariants: {session.strict}")


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": __version__}


def main():
    """Run the server."""
    configure_logging()
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)


if __name__ == "__main__":
    main()
