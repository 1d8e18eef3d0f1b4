# utils/estado.py

from typing import Optional

from sqlalchemy import Table, select
from sqlalchemy.ext.asyncio import AsyncSession

# -------------------------------
# Convencion de estados
# -------------------------------
# Los catalogos estado_* pueden crecer, pero 1 y 2 siempre
# significan activo e inactivo y guian el filtrado del listado.
ESTADO_ACTIVO = 1
ESTADO_INACTIVO = 2

FILTROS_ESTADO: dict[str, Optional[int]] = {
    "activo": ESTADO_ACTIVO,
    "inactivo": ESTADO_INACTIVO,
    "todos": None,
}


def resolver_filtro_estado(filtro: str) -> Optional[int]:
    """
    Traduce el parametro ?estado= al id de estado a filtrar.

    Parámetros:
    - filtro (str): "activo", "inactivo" o "todos".

    Retorna:
    - 1, 2 o None (sin filtro).

    Excepciones:
    - ValueError si el filtro no es uno de los tres valores conocidos.
    """
    try:
        return FILTROS_ESTADO[filtro]
    except KeyError:
        raise ValueError(f"Filtro de estado desconocido: {filtro!r}") from None


async def es_estado_valido(db: AsyncSession, catalogo: Table, estado_id: int) -> bool:
    """
    Indica si estado_id existe en el catalogo de estados del recurso.

    Hace una sola lectura; no valida tipo ni signo del id,
    eso lo resuelven los esquemas Pydantic antes de llegar aqui.
    """
    result = await db.execute(
        select(catalogo.c.id).where(catalogo.c.id == estado_id).limit(1)
    )
    return result.first() is not None
