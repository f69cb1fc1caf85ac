import time
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config.settings import settings

logger = logging.getLogger(__name__)

QUIET_PATHS = ("/", "/api/health")


def setup_middleware(app: FastAPI):
    """CORS y log de requests"""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
        # El frontend lee el nombre del PDF del comprobante
        expose_headers=["Content-Disposition"],
        max_age=3600
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start_time

        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        if request.url.path not in QUIET_PATHS:
            log = logger.warning if response.status_code >= 500 else logger.info
            log(f"{request.method} {request.url.path} -> {response.status_code} ({elapsed:.3f}s)")

        return response
