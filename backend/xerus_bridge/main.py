import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from .config import log_configuration, settings, validate_config
from .routers import icons

logging.basicConfig(
    level=logging.INFO if settings.is_development else logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: validate and log configuration.
    Shutdown: nothing to release; request clients are scoped per request.
    """
    logger.info("Validating configuration...")
    validate_config()
    log_configuration()
    logger.info("Application startup complete")
    yield


app = FastAPI(title="Xerus Bridge", version="1.0.0", lifespan=lifespan)


# HTTPException is handled by FastAPI; everything else becomes a JSON 500
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    if isinstance(exc, HTTPException):
        raise exc

    logger.error(f"Unhandled exception on {request.url.path}: {type(exc).__name__}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.include_router(icons.router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Xerus Bridge is running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.environment}
