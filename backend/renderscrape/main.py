"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from renderscrape.api import capture, scrape
from renderscrape.config import config
from renderscrape.dependencies import get_page_manager
from renderscrape.errors import BrowserUnavailable, ScrapeError
from renderscrape.schemas import HealthResponse
from renderscrape.services.page_manager import PageManager, page_manager

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "POST /scrape - Scrape Play Store apps",
    "POST /scrape-generic - Scrape any website with custom selectors",
    "POST /screenshot - Take screenshot of any page",
    "POST /pdf - Generate PDF of any page",
    "GET /health - Health check",
]


def configure_logging() -> None:
    """Apply the configured log level and format to the root logger."""
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the shared browser with the app and close it on shutdown.

    A failed launch is not fatal: the health check reports it and the next
    request tries to start the browser again.
    """
    configure_logging()
    logger.info("Starting render scrape service...")
    if config.BROWSER_LAUNCH_ON_STARTUP:
        try:
            await page_manager.start()
        except BrowserUnavailable:
            logger.error("Browser unavailable at startup; will retry on first request")
    yield
    logger.info("Shutting down service...")
    await page_manager.shutdown()


app = FastAPI(
    title="render scrape service",
    description="Headless-browser scraping of rendered pages: listings, selectors, screenshots and PDFs",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers.
app.include_router(scrape.router)
app.include_router(capture.router)


@app.exception_handler(ScrapeError)
async def scrape_error_handler(request: Request, exc: ScrapeError) -> JSONResponse:
    """Report a core failure as ``{"success": false, "error": ...}``."""
    if exc.status_code >= 500:
        logger.error("Scraping error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as input errors."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": "; ".join(messages) or "Invalid request"},
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report anything else as a generic scraping failure."""
    logger.exception("Unexpected failure on %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": str(exc) or "Error scraping website"},
    )


@app.get("/")
def read_root():
    """Return service metadata.

    Returns:
        dict: Basic service information for smoke testing.
    """
    return {
        "message": "render scrape service",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
def health_check(manager: PageManager = Depends(get_page_manager)):
    """Report whether the shared browser is up and list the endpoints.

    Returns:
        HealthResponse: Browser status and endpoint listing.
    """
    return HealthResponse(
        status="ok",
        browser="initialized" if manager.is_initialized else "not initialized",
        endpoints=ENDPOINTS,
    )
