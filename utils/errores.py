# utils/errores.py
# ---------------------------
# Taxonomia de errores del API y manejadores que los convierten
# en la envoltura uniforme {statusCode, message, data, metadata}.
# ---------------------------

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError

from utils.respuesta import respuesta

logger = logging.getLogger(__name__)


class ErrorAPI(Exception):
    """Error base: lleva el codigo HTTP y el mensaje que vera el cliente."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TokenRequerido(ErrorAPI):
    """No se envio credencial en el header Authorization."""

    status_code = 401

    def __init__(self, message: str = "Token requerido"):
        super().__init__(message)


class TokenInvalido(ErrorAPI):
    """La credencial no se pudo verificar o ya expiro."""

    status_code = 403

    def __init__(self, message: str = "Token inválido"):
        super().__init__(message)


class EstadoNoValido(ErrorAPI):
    """El estado_id no existe en el catalogo del recurso."""

    status_code = 400

    def __init__(self, message: str = "Estado no válido"):
        super().__init__(message)


class Conflicto(ErrorAPI):
    """Clave natural duplicada o transicion de estado rechazada."""

    status_code = 400


class NoEncontrado(ErrorAPI):
    status_code = 404


class ErrorAlmacen(ErrorAPI):
    """Falla inesperada de la base de datos; el detalle solo va al log."""

    status_code = 500


def registrar_manejadores(app: FastAPI) -> None:
    """Instala los exception handlers que responden con la envoltura."""

    @app.exception_handler(ErrorAPI)
    async def manejar_error_api(request: Request, exc: ErrorAPI):
        return respuesta(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def manejar_validacion(request: Request, exc: RequestValidationError):
        return respuesta(400, "Validation errors", data=jsonable_encoder(exc.errors()))

    @app.exception_handler(Exception)
    async def manejar_inesperado(request: Request, exc: Exception):
        logger.exception("Error no controlado en %s %s", request.method, request.url.path)
        return respuesta(500, "Error interno del servidor")
