"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from codelogs.api import auth, contents, engagement, follows, gists, users
from codelogs.api.errors import register_exception_handlers
from codelogs.config import get_settings
from codelogs.services.storage import get_upload_storage

settings = get_settings()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    logger.info(f"API mounted at /{settings.api_namespace} ({settings.environment})")
    yield


app = FastAPI(
    title="CodeLogs API",
    description="Social code-snippet blogging: posts, follows, comments and votes",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:8080",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_exception_handlers(app)

# Register routers
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(contents.router)
app.include_router(follows.router)
app.include_router(engagement.router)
app.include_router(gists.router)

# Uploaded attachments and profile pictures
app.mount(
    settings.uploads_url_path,
    StaticFiles(directory=get_upload_storage().upload_dir),
    name="uploads",
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"success": True, "status": "healthy", "environment": settings.environment}
