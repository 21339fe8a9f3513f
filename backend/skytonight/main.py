"""Main FastAPI application."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from skytonight import __version__
from skytonight.api import router
from skytonight.core import get_settings
from skytonight.core.errors import ApiError

logger = logging.getLogger(__name__)

# Get settings
settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create FastAPI app
app = FastAPI(
    title="Sky Tonight API",
    description="Tonight's visible sky objects and the Stella stargazing guide",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    """Render API errors as ``{"error": {"code", "message"}}``."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include API routes
app.include_router(router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    """Log configuration on startup."""
    logger.info("Sky Tonight API starting...")
    logger.info("USNO API: %s (celnav %s)", settings.usno_base_url, "on" if settings.celnav_enabled else "off")
    logger.info("Stella model: %s", settings.openai_model)
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set; Stella chat will return MODEL_ERROR")


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Sky Tonight API shutting down...")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("skytonight.main:app", host=settings.host, port=settings.port, reload=settings.reload)
