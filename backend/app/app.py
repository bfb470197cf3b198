"""FastAPI application."""

import argparse
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from configs import settings
from src.controllers.price_controllers import AVAILABLE_ENDPOINTS, price_router
from src.logger_config import configure_logging
from src.models.price_models import ServiceInfo

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("price_api.app")

SERVICE_VERSION = "1.0.0"

logger.info("Starting FastAPI application...")
app = FastAPI(
    title="Medicine Price Scraper API",
    root_path=settings.ROOT_PATH_BACKEND,
    description="Compare medicine prices across online pharmacies",
    version=SERVICE_VERSION,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(price_router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed input as a 400 with the first validation message."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "message": message},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Keep error bodies flat and list the endpoints on unknown routes."""
    if isinstance(exc.detail, dict):
        content: Dict[str, Any] = exc.detail
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        content = {
            "error": "Endpoint not found",
            "available_endpoints": AVAILABLE_ENDPOINTS,
        }
    else:
        content = {"error": "Request failed", "message": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error: %s", exc, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "message": str(exc)},
    )


@app.get("/", response_description="Service metadata")  # type: ignore[misc]
async def index() -> ServiceInfo:
    """Define a route for handling HTTP GET requests to the root URL ("/")."""
    return ServiceInfo(
        message="Medicine Price Scraper API",
        version=SERVICE_VERSION,
        endpoints={
            "/api/search/:medicine": "Search for medicine prices",
            "/api/pharmacy/:pharmacy/:medicine": "Search a single pharmacy",
            "/api/batch-search": "Compare up to "
            f"{settings.BATCH_MAX_QUERIES} medicines in one request",
        },
    )


if __name__ == "__main__":
    import uvicorn

    parser = argparse.ArgumentParser()
    parser.add_argument("--host", default=settings.HOST, help="Application host.")
    parser.add_argument("--port", default=settings.PORT, help="Application port.")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development purposes.",
    )
    args = parser.parse_args()
    logger.info("Medicine Price Scraper API running on port %s", args.port)
    uvicorn.run("app:app", host=args.host, port=int(args.port), reload=args.reload)
