import asyncio
import os
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import collection_routes, custom_routes
from api.deps import describe_errors
from db.store import RecordStore
from utils.logger import get_logger

_logger = get_logger("server")

API_BASE_PATH = os.getenv("API_BASE_PATH", "/api")
LATENCY_SECONDS = int(os.getenv("API_LATENCY_MS", "500")) / 1000


def create_app(
    store: Optional[RecordStore] = None,
    latency: float = LATENCY_SECONDS,
    base_path: str = API_BASE_PATH,
) -> FastAPI:
    """
    Build the store server.

    Custom routes are mounted before the generic collection router because the
    generic `/{collection}/{id}` shapes would otherwise swallow them.
    """
    app = FastAPI(title="Record Store API")
    app.state.store = store or RecordStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # registered first, so it runs inside the latency middleware
    @app.middleware("http")
    async def log_request(request: Request, call_next):
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        _logger.info(f"{stamp} - {request.method} {target}")
        return await call_next(request)

    @app.middleware("http")
    async def simulate_latency(request: Request, call_next):
        if latency > 0:
            await asyncio.sleep(latency)
        return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse({"error": describe_errors(exc.errors())}, status_code=400)

    app.include_router(custom_routes.router, prefix=base_path)
    app.include_router(collection_routes.router, prefix=base_path)
    return app
