# utils/respuesta.py
# ---------------------------
# Envoltura uniforme de respuesta para todos los endpoints.
# ---------------------------

from typing import Any, Optional, Union

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class Metadata(BaseModel):
    """Metadatos de paginacion; solo se llenan en los listados."""
    page: int
    size: int
    total: int


class Envoltura(BaseModel):
    """
    Esquema documentado de la respuesta:
    data es {} en errores y metadata solo lleva page/size/total en listados.
    """
    statusCode: int
    message: str
    data: Union[dict, list]
    metadata: Union[Metadata, dict]


def respuesta(
    status_code: int,
    message: str,
    data: Any = None,
    metadata: Optional[dict] = None,
) -> JSONResponse:
    """Construye la JSONResponse con la envoltura {statusCode, message, data, metadata}."""
    contenido = {
        "statusCode": status_code,
        "message": message,
        "data": {} if data is None else data,
        "metadata": metadata or {},
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(contenido))
