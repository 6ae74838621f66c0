import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from app.config.settings import settings

logger = logging.getLogger(__name__)

def setup_middleware(app: FastAPI):
    """CORS para el frontend y bitácora de cada request"""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "Accept", "Origin"],
        expose_headers=["X-Process-Time"],
        max_age=3600
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        inicio = time.perf_counter()
        response = await call_next(request)
        duracion = time.perf_counter() - inicio

        response.headers["X-Process-Time"] = f"{duracion:.4f}"

        # Los 5xx ya se registraron con traza en el manejador de errores
        nivel = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            nivel,
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {duracion:.4f}s"
        )

        return response
