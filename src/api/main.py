"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from dotenv import load_dotenv

# Load environment variables from .env file
# Must be called before importing modules that read env vars (like the user service)
load_dotenv()

# Add src to path
# main.py is at src/api/main.py, so src is 2 levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.errors import install_error_handlers
from api.routes import health, users
from utils.logging import setup_structured_logging
from adapter.mongodb.connection import DatabaseConnectionError, close, connect

# Set up structured JSON logging
setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Users API"
DEFAULT_PORT = 8080


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: open the database, then close it on shutdown."""
    try:
        db = connect()
    except DatabaseConnectionError:
        logger.critical("Failed to connect to the database, refusing to start", exc_info=True)
        raise

    app.state.db = db

    yield  # App runs here

    app.state.db = None
    close(db)


# Create FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="CRUD API for users backed by MongoDB",
    version=VERSION,
    lifespan=lifespan,
    docs_url="/swagger",
    redoc_url=None,
    openapi_url="/swagger/openapi.json",
)

install_error_handlers(app)

# Register routes
app.include_router(users.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", DEFAULT_PORT))
    logger.info(f"Server is running on port {port}")
    # Application logs go through structured logging; uvicorn's access log is off
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False,
        log_config=None,  # keep the structured logging set up above
    )
