import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI

# Explicitly load .env files at startup
# Load order (later files override earlier):
# 1. project .env (project defaults)
# 2. project .env.local (local overrides)
project_root = Path(__file__).parent.parent
env_file = project_root / ".env"
env_local = project_root / ".env.local"

if env_file.exists():
    load_dotenv(env_file, override=False)

if env_local.exists():
    load_dotenv(env_local, override=True)

from .api.health import router as health_router
from .api.procedures import router as procedures_router
from .core.config import get_settings
from .lifecycle import lifespan
from .middleware.error_handler import register_error_handlers
from .utils.logging import setup_logging
from .version import __version__

settings = get_settings()
setup_logging(log_level=settings.log_level, log_to_file=settings.log_to_file)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build the FastAPI application with all routers and handlers."""
    application = FastAPI(
        title="Procedural Memory",
        description="Extract procedural steps from text and schedule their review",
        version=__version__,
        lifespan=lifespan,
    )
    register_error_handlers(application)
    application.include_router(health_router)
    application.include_router(procedures_router)
    return application


app = create_app()


@app.get("/")
async def root():
    return {"service": "procedural-memory", "version": __version__, "status": "running"}


def run() -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    current = get_settings()
    uvicorn.run(
        "procedural_memory.main:app",
        host=current.host,
        port=current.port,
        reload=current.debug,
        log_level=current.log_level.lower(),
    )


if __name__ == "__main__":
    run()
