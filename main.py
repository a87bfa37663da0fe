"""
FastAPI Application Entry Point

Integrates:
  - WhatsApp webhook (verification + voice message relay)
  - Health check
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Config
from infra.config import get_config
from webhook.whatsapp import router as whatsapp_router

# Setup logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    relay_config = get_config()

    # Startup
    logger.info("=" * 60)
    logger.info("WhatsApp voice relay starting up...")
    logger.info(f"Environment: {Config.ENVIRONMENT}")
    logger.info(f"Transcription service: {relay_config.transcription_service}")
    if relay_config.generate_summary:
        logger.info(f"Summary service: {relay_config.ai_service}")
    else:
        logger.info("Summaries: disabled")
    if relay_config.allowed_senders:
        logger.info(f"Allow-list: {len(relay_config.allowed_senders)} sender(s)")
    if not relay_config.app_secret:
        logger.warning(
            "WHATSAPP_APP_SECRET not set - webhook signatures are NOT verified"
        )
    missing = relay_config.missing_settings()
    if missing:
        logger.warning(f"Missing required environment variables: {', '.join(missing)}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("WhatsApp voice relay shutting down...")


# Create FastAPI app
app = FastAPI(
    title="WhatsApp Voice Relay",
    description="Transcribes WhatsApp voice messages and replies with the text",
    version="1.0.0",
    lifespan=lifespan,
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return PlainTextResponse("Internal Server Error", status_code=500)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Plain-text errors; unknown method on a known path is reported as 404."""
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not Found", status_code=404)
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code)


# Include routers
app.include_router(whatsapp_router)


@app.get("/health")
async def health():
    """Liveness check."""
    return PlainTextResponse("OK", status_code=200)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=Config.PORT,
        reload=Config.ENVIRONMENT == "development",
    )
