"""Main FastAPI application for the PR labeler."""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from pr_labeler.api.routes import close_backend
from pr_labeler.api.routes import router as api_router
from pr_labeler.config import get_settings
from pr_labeler.utils import get_logger

logger = get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> None:
    """Application lifespan events."""
    logger.info("Starting %s", settings.app_name)
    if not settings.github_webhook_secret:
        logger.warning("GITHUB_WEBHOOK_SECRET is not set, webhook signatures will not be verified")

    yield

    close_backend()
    logger.info("Shutting down %s", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    description="Keeps pull request labels in sync with per-repository matching rules",
    version=settings.app_version,
    lifespan=lifespan,
)

app.include_router(api_router, prefix=settings.api_prefix)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
    }


def run() -> None:
    """Run the webhook server."""
    uvicorn.run(
        "pr_labeler.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
