"""FastAPI Application Entry Point.

Configures the app, lifespan, CORS, and includes the evaluation routes.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from eva import config
from eva.logging_config import get_api_logger

logger = get_api_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup state and warn about missing credentials."""
    logger.info("EVA server listening on %s:%d", config.API_HOST, config.API_PORT)
    if not config.ANTHROPIC_API_KEY:
        logger.warning(
            "ANTHROPIC_API_KEY not set — /analyze will fail. "
            "Set ANTHROPIC_API_KEY in .env or environment."
        )
    yield


app = FastAPI(title="EVA Evaluation API", version="1.0.0", lifespan=lifespan)

# CORS: plugin iframes post from a null origin, so the default is "*"
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials="*" not in config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
from .routes.analyze import router as analyze_router  # noqa: E402

app.include_router(analyze_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "ok"}


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("app.main:app", host=config.API_HOST, port=config.API_PORT)
