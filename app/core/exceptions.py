"""
Manejadores globales de errores.

Todas las respuestas de error se devuelven como JSON ``{"message": ...}``.
"""
import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", []) if p != "body")
    message = f"Datos inválidos: {field} - {first.get('msg')}" if field else "Datos inválidos"
    return JSONResponse(status_code=400, content={"message": message, "errors": errors})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Captura cualquier excepción no controlada, la registra con traceback
    y responde 500 sin exponer detalles internos.
    """
    logger.error(
        f"Unhandled exception in {request.method} {request.url.path}: {exc}",
        exc_info=True
    )
    return JSONResponse(status_code=500, content={"message": "Error del servidor"})


def setup_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
