# app/core/exceptions.py
"""
Errores de dominio de la API.

Cada error conoce su código HTTP; los manejadores registrados en
``setup_exception_handlers`` los convierten en la respuesta uniforme
``{"success": false, "message": ...}``.
"""
import logging
from decimal import Decimal

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base de todos los errores que llegan al cliente con su mensaje"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(AppError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class BusinessRuleError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST


class InsufficientStockError(BusinessRuleError):
    def __init__(self, producto_id: int, disponible: int, solicitado: int):
        super().__init__(
            f"Stock insuficiente para Producto ID {producto_id}. "
            f"Stock: {disponible}, solicitado: {solicitado}."
        )
        self.producto_id = producto_id
        self.disponible = disponible
        self.solicitado = solicitado


class InsufficientPaymentError(BusinessRuleError):
    def __init__(self, total_pagado: Decimal, total: Decimal):
        super().__init__(
            f"El total pagado ({total_pagado:.2f}) es menor que el total de la venta ({total:.2f})."
        )
        self.total_pagado = total_pagado
        self.total = total


class ProtectedEntityError(BusinessRuleError):
    status_code = status.HTTP_403_FORBIDDEN


class InternalError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Error interno del servidor."):
        super().__init__(message)


def error_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers
    )


def setup_exception_handlers(app: FastAPI):
    """Registrar manejadores que producen el sobre {success, message}"""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
        return error_response(exc.status_code, exc.message, headers)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errores = []
        for error in exc.errors():
            campo = ".".join(str(p) for p in error.get("loc", []) if p != "body")
            errores.append(f"{campo}: {error.get('msg')}" if campo else error.get("msg"))
        return error_response(
            status.HTTP_400_BAD_REQUEST,
            "Datos inválidos. " + "; ".join(errores)
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"❌ Error no controlado en {request.method} {request.url.path}")
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Error interno del servidor."
        )
