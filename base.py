# base.py
# ---------------------------
# Nucleo generico de los recursos con ciclo de vida por estado.
# GestorRecurso implementa listar / obtener / crear / actualizar /
# baja logica / cambio de estado sobre cualquier tabla con estado_id;
# BaseRouter expone esas operaciones como endpoints REST.
# ---------------------------

import logging
from contextlib import asynccontextmanager
from typing import Any, Callable, Generic, Literal, Optional, Type, TypeVar
from uuid import UUID, uuid4

from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel
from sqlalchemy import func, insert, literal, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from db import get_async_db
from utils.auth import autenticar
from utils.errores import Conflicto, ErrorAlmacen, EstadoNoValido, NoEncontrado
from utils.estado import ESTADO_INACTIVO, es_estado_valido, resolver_filtro_estado
from utils.respuesta import Envoltura, respuesta

logger = logging.getLogger(__name__)

# Tipos genéricos
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)
ReadSchemaType = TypeVar("ReadSchemaType", bound=BaseModel)

# Límites de paginación: el OFFSET resultante cabe en un INTEGER de 32 bits
MAX_PAGINA = 1_000_000
MAX_TAMANO = 1_000


class EstadoUpdate(BaseModel):
    """Cuerpo del PATCH /{id}/status."""
    estado_id: int


class GestorRecurso:
    """
    Operaciones de ciclo de vida para un recurso con catalogo de estados.

    Parámetros:
    - modelo: modelo ORM de la tabla del recurso (debe tener id y estado_id).
    - modelo_estado: modelo ORM del catalogo estado_* del recurso.
    - campo_clave: columna que debe ser unica al crear (email o nombre).
    - singular / plural: nombres usados en los mensajes ("cliente", "clientes").
    - preparar: funcion opcional aplicada a los campos antes del INSERT
      (p.ej. hashear la contraseña de un usuario).

    Ningun registro se borra fisicamente: la baja logica pasa estado_id a 2.
    """

    def __init__(
        self,
        modelo,
        modelo_estado,
        campo_clave: str,
        singular: str,
        plural: str,
        preparar: Optional[Callable[[dict], dict]] = None,
    ):
        self.tabla = modelo.__table__
        self.catalogo = modelo_estado.__table__
        self.campo_clave = campo_clave
        self.singular = singular
        self.plural = plural
        self.preparar = preparar

    @property
    def titulo(self) -> str:
        return self.singular.capitalize()

    @asynccontextmanager
    async def _almacen(self, db: AsyncSession, mensaje: str):
        # Cualquier falla del driver se registra y se reporta con un mensaje fijo
        try:
            yield
        except SQLAlchemyError:
            await db.rollback()
            logger.exception(mensaje)
            raise ErrorAlmacen(mensaje)

    async def _buscar(self, db: AsyncSession, id: UUID) -> Optional[dict]:
        result = await db.execute(select(self.tabla).where(self.tabla.c.id == id))
        fila = result.mappings().first()
        return dict(fila) if fila is not None else None

    async def estado_valido(self, db: AsyncSession, estado_id: int) -> bool:
        return await es_estado_valido(db, self.catalogo, estado_id)

    async def listar(
        self,
        db: AsyncSession,
        page: int = 1,
        size: int = 10,
        estado: str = "todos",
    ) -> tuple[list[dict], int]:
        """
        Devuelve la pagina pedida y el total de registros que cumplen el
        mismo filtro de estado. El orden es created_at, id.
        """
        logger.info(
            "Request to get all %s - Page: %s, Size: %s, Estado: %s",
            self.plural, page, size, estado,
        )
        estado_id = resolver_filtro_estado(estado)
        offset = (page - 1) * size

        consulta = select(self.tabla)
        conteo = select(func.count()).select_from(self.tabla)
        if estado_id is not None:
            consulta = consulta.where(self.tabla.c.estado_id == estado_id)
            conteo = conteo.where(self.tabla.c.estado_id == estado_id)
        consulta = (
            consulta
            .order_by(self.tabla.c.created_at, self.tabla.c.id)
            .limit(size)
            .offset(offset)
        )

        async with self._almacen(db, f"Error obteniendo {self.plural}"):
            result = await db.execute(consulta)
            registros = [dict(fila) for fila in result.mappings().all()]
            total = await db.scalar(conteo)
        return registros, int(total or 0)

    async def obtener(self, db: AsyncSession, id: UUID) -> dict:
        logger.info("Request to get %s by ID - ID: %s", self.singular, id)
        async with self._almacen(db, f"Error obteniendo {self.singular}"):
            registro = await self._buscar(db, id)
        if registro is None:
            logger.warning("%s not found - ID: %s", self.titulo, id)
            raise NoEncontrado(f"{self.titulo} no encontrado")
        return registro

    async def crear(self, db: AsyncSession, campos: dict) -> dict:
        """
        Valida el estado y luego inserta solo si la clave natural no existe,
        en una sola sentencia INSERT ... SELECT ... WHERE NOT EXISTS.
        """
        logger.info(
            "Request to create %s - %s: %s",
            self.singular, self.campo_clave, campos.get(self.campo_clave),
        )
        async with self._almacen(db, f"Error creando {self.singular}"):
            if not await self.estado_valido(db, campos["estado_id"]):
                raise EstadoNoValido()

            valores = {"id": uuid4(), **campos}
            if self.preparar is not None:
                valores = self.preparar(valores)

            columnas = list(valores)
            clave = self.tabla.c[self.campo_clave]
            origen = select(
                *[literal(valores[c], type_=self.tabla.c[c].type) for c in columnas]
            ).where(
                ~select(clave)
                .where(clave == valores[self.campo_clave])
                .correlate(None)
                .exists()
            )
            stmt = (
                insert(self.tabla)
                .from_select(columnas, origen)
                .returning(*self.tabla.c)
            )
            fila = (await db.execute(stmt)).mappings().first()
            if fila is None:
                await db.rollback()
                raise Conflicto(f"{self.titulo} con este {self.campo_clave} ya existe")
            registro = dict(fila)
            await db.commit()
        return registro

    async def actualizar(self, db: AsyncSession, id: UUID, campos: dict) -> dict:
        """
        Reemplaza todos los campos mutables. No vuelve a verificar la
        unicidad de la clave natural.
        """
        logger.info("Request to update %s - ID: %s", self.singular, id)
        async with self._almacen(db, f"Error actualizando {self.singular}"):
            if await self._buscar(db, id) is None:
                logger.warning("%s not found for update - ID: %s", self.titulo, id)
                raise NoEncontrado(f"{self.titulo} no encontrado")
            if not await self.estado_valido(db, campos["estado_id"]):
                raise EstadoNoValido()

            stmt = (
                update(self.tabla)
                .where(self.tabla.c.id == id)
                .values(**campos)
                .returning(*self.tabla.c)
            )
            fila = (await db.execute(stmt)).mappings().first()
            if fila is None:
                # Sin borrado fisico esto no deberia ocurrir
                await db.rollback()
                raise NoEncontrado(f"{self.titulo} no encontrado")
            registro = dict(fila)
            await db.commit()
        return registro

    async def eliminar(self, db: AsyncSession, id: UUID) -> dict:
        """Baja logica: estado_id -> 2, solo si el registro no esta ya inactivo."""
        logger.info("Request to logically delete %s - ID: %s", self.singular, id)
        async with self._almacen(db, f"Error eliminando {self.singular}"):
            stmt = (
                update(self.tabla)
                .where(
                    self.tabla.c.id == id,
                    self.tabla.c.estado_id != ESTADO_INACTIVO,
                )
                .values(estado_id=ESTADO_INACTIVO)
                .returning(*self.tabla.c)
            )
            fila = (await db.execute(stmt)).mappings().first()
            if fila is None:
                await db.rollback()
                if await self._buscar(db, id) is None:
                    logger.warning("%s not found for logical delete - ID: %s", self.titulo, id)
                    raise NoEncontrado(f"{self.titulo} no encontrado")
                raise Conflicto(f"El {self.singular} ya está inactivo")
            registro = dict(fila)
            await db.commit()
        return registro

    async def cambiar_estado(self, db: AsyncSession, id: UUID, estado_id: int) -> dict:
        """
        Transicion a estado_id. Rechaza la transicion al mismo estado y
        los estados que no existen en el catalogo. El UPDATE se condiciona
        al estado leido, asi que una carrera perdida tambien es Conflicto.
        """
        logger.info("Request to update status of %s - ID: %s", self.singular, id)
        async with self._almacen(db, f"Error actualizando estado del {self.singular}"):
            actual = await self._buscar(db, id)
            if actual is None:
                logger.warning("%s not found for status update - ID: %s", self.titulo, id)
                raise NoEncontrado(f"{self.titulo} no encontrado")
            if actual["estado_id"] == estado_id:
                raise Conflicto(f"El {self.singular} ya se encuentra en ese estado")
            if not await self.estado_valido(db, estado_id):
                raise EstadoNoValido()

            stmt = (
                update(self.tabla)
                .where(
                    self.tabla.c.id == id,
                    self.tabla.c.estado_id == actual["estado_id"],
                )
                .values(estado_id=estado_id)
                .returning(*self.tabla.c)
            )
            fila = (await db.execute(stmt)).mappings().first()
            if fila is None:
                await db.rollback()
                logger.warning("Concurrent status change on %s - ID: %s", self.singular, id)
                raise Conflicto(f"El {self.singular} ya se encuentra en ese estado")
            registro = dict(fila)
            await db.commit()
        return registro


# Generador de router genérico
class BaseRouter(Generic[CreateSchemaType, UpdateSchemaType, ReadSchemaType]):
    """
    Registra los seis endpoints de un recurso sobre un GestorRecurso.
    Todos exigen token Bearer y responden con la envoltura uniforme.
    """

    def __init__(
        self,
        gestor: GestorRecurso,
        create_schema: Type[CreateSchemaType],
        update_schema: Type[UpdateSchemaType],
        read_schema: Type[ReadSchemaType],
    ):
        self.gestor = gestor
        self.create_schema = create_schema
        self.update_schema = update_schema
        self.read_schema = read_schema
        self.router = APIRouter(dependencies=[Depends(autenticar)])
        self._register_routes()

    def serializar(self, registro: dict) -> dict[str, Any]:
        return self.read_schema.model_validate(registro).model_dump(mode="json")

    def _register_routes(self):
        gestor = self.gestor
        plural = gestor.plural.capitalize()

        @self.router.get("", response_model=Envoltura)
        async def listar(
            page: int = Query(1, ge=1, le=MAX_PAGINA, description="Número de página"),
            size: int = Query(10, ge=1, le=MAX_TAMANO, description="Tamaño de la página"),
            estado: Literal["activo", "inactivo", "todos"] = Query("todos"),
            db: AsyncSession = Depends(get_async_db)
        ):
            registros, total = await gestor.listar(db, page, size, estado)
            message = f"{plural} obtenidos con éxito"
            if not registros:
                message = f"No se encontraron {gestor.plural}"
            return respuesta(
                200,
                message,
                data=[self.serializar(r) for r in registros],
                metadata={"page": page, "size": size, "total": total},
            )

        @self.router.get("/{id}", response_model=Envoltura)
        async def obtener(id: UUID, db: AsyncSession = Depends(get_async_db)):
            registro = await gestor.obtener(db, id)
            return respuesta(200, f"{gestor.titulo} obtenido con éxito", self.serializar(registro))

        @self.router.post("", response_model=Envoltura)
        async def crear(
            entrada: self.create_schema,
            db: AsyncSession = Depends(get_async_db)
        ):
            registro = await gestor.crear(db, entrada.model_dump())
            return respuesta(200, f"{gestor.titulo} creado con éxito", self.serializar(registro))

        @self.router.put("/{id}", response_model=Envoltura)
        async def actualizar(
            id: UUID,
            entrada: self.update_schema,
            db: AsyncSession = Depends(get_async_db)
        ):
            registro = await gestor.actualizar(db, id, entrada.model_dump())
            return respuesta(200, f"{gestor.titulo} actualizado con éxito", self.serializar(registro))

        @self.router.delete("/{id}", response_model=Envoltura)
        async def eliminar(id: UUID, db: AsyncSession = Depends(get_async_db)):
            registro = await gestor.eliminar(db, id)
            return respuesta(
                200, f"{gestor.titulo} eliminado lógicamente con éxito", self.serializar(registro)
            )

        @self.router.patch("/{id}/status", response_model=Envoltura)
        async def cambiar_estado(
            id: UUID,
            entrada: EstadoUpdate = Body(...),
            db: AsyncSession = Depends(get_async_db)
        ):
            registro = await gestor.cambiar_estado(db, id, entrada.estado_id)
            return respuesta(
                200, f"Estado del {gestor.singular} actualizado con éxito", self.serializar(registro)
            )

    def get_router(self):
        return self.router
