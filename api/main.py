# Main entry point for the WatchSync FastAPI application
# Sets up the API, middleware, service initialization, error mapping and health check endpoint

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging
import os

from api.dependencies import get_services
from api.models.responses import ErrorResponse
from api.routes import imports, shows, videos
from utils.errors import AuthenticationRequiredError, NotFoundError
from utils.watchsync_config import DEFAULT_CONFIG_PATH, load_configuration
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup logic ---
    setup_logging(verbosity=1)
    logger.info("Starting WatchSync API server")

    # Tests may attach services before startup
    if not getattr(app.state, "services", None):
        config_path = os.getenv('WATCHSYNC_CONFIG', DEFAULT_CONFIG_PATH)
        app.state.config = load_configuration(config_path)
        app.state.services = get_services(app.state.config)

    yield

    # --- Shutdown logic ---
    logger.info("Shutting down WatchSync API server")


app = FastAPI(
    title="WatchSync API",
    description="API for importing and synchronizing tracked movies, TV shows and watch-later videos",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AuthenticationRequiredError)
async def authentication_required_handler(request: Request, exc: AuthenticationRequiredError):
    logger.warning(f"{request.method} {request.url.path}: authentication required ({exc.message})")
    body = ErrorResponse(error=f"YouTube authentication required: {exc.message}", requires_auth=True)
    return JSONResponse(status_code=401, content=body.model_dump())


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=404, content=ErrorResponse(error=str(exc)).model_dump())


app.include_router(imports.router, prefix="/api/import", tags=["import"])
app.include_router(shows.router, prefix="/api/shows", tags=["shows"])
app.include_router(videos.router, prefix="/api/videos", tags=["videos"])


@app.get("/")
async def root():
    """Root endpoint: returns API info and version."""
    return {"message": "WatchSync API", "version": "1.0.0"}


@app.get("/health")
async def health_check(request: Request):
    """
    Health check endpoint.
    Verifies the database is reachable and reports whether TMDB is configured.
    """
    services = request.app.state.services
    status = {"api": "ok"}
    healthy = True

    try:
        services["db"].get_all_shows()
        status["database"] = "ok"
    except Exception as e:
        status["database"] = f"error: {e}"
        healthy = False

    status["tmdb"] = "ok" if getattr(services.get("tmdb"), "api_key", None) else "not configured"

    status["status"] = "healthy" if healthy else "unhealthy"
    return status


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
