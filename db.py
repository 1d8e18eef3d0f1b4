# db.py
# ---------------------------
# Configuracion de la conexion y sesion a PostgreSQL
# Usando SQLAlchemy Async y FastAPI para inyectar la sesion por request.
# ---------------------------

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


def _construir_url() -> str:
    """
    Devuelve la URL de conexion. DATABASE_URL tiene prioridad; si no existe
    se arma con las variables DB_* y DB_PASSWORD es obligatoria.
    """
    url = os.getenv("DATABASE_URL")
    if not url:
        db_user     = os.getenv("DB_USER")
        db_password = os.getenv("DB_PASSWORD")
        db_host     = os.getenv("DB_HOST")
        db_port     = os.getenv("DB_PORT")
        db_name     = os.getenv("DB_NAME")

        if not db_password:
            raise ValueError("Se requiere DB_PASSWORD")

        return f"postgresql+asyncpg://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"

    # Convertir URLs sincronas a su driver asincrono
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return url


def _opciones_motor(url: str) -> dict:
    # SQLite (pruebas) comparte una sola conexion en memoria
    if url.startswith("sqlite"):
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "pool_size": 50,     # Maximo de conexiones persistentes en el pool
        "max_overflow": 0,   # No crear conexiones fuera del limite del pool
        "pool_timeout": 30,  # Tiempo (seg) que espera al pedir conexion antes de error
        "pool_recycle": 1800 # Recicla conexiones cada 30 min
    }


DATABASE_URL = _construir_url()

# ---------------------------
# Motor de base de datos asincrono
# ---------------------------
engine = create_async_engine(
    DATABASE_URL,
    echo=False,       # No imprimir SQL en consola (usar LOG_LEVEL_SQL para debugging)
    **_opciones_motor(DATABASE_URL)
)

# ---------------------------
# Generador de sesiones asincronas
# ---------------------------
# expire_on_commit=False para que los objetos no pierdan atributos tras commit
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False
)

# ---------------------------
# Base declarativa para modelos ORM
# ---------------------------
Base = declarative_base()


def _crear_tablas_habilitado() -> bool:
    return os.getenv("DB_CREATE_ALL", "").lower() in ("1", "true", "yes")


async def crear_tablas() -> None:
    """
    Crea las tablas faltantes y siembra los catalogos de estado con
    1 = activo y 2 = inactivo. Es idempotente.
    """
    # Importacion diferida: los modelos se registran en Base al importarse
    from cliente import EstadoCliente
    from maquilador import EstadoMaquilador
    from usuario import EstadoUsuario

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        for modelo in (EstadoCliente, EstadoMaquilador, EstadoUsuario):
            for id_estado, nombre in ((1, "activo"), (2, "inactivo")):
                if await db.get(modelo, id_estado) is None:
                    db.add(modelo(id=id_estado, nombre=nombre))
        await db.commit()
    logger.info("Tablas verificadas y catalogos de estado sembrados")


# ---------------------------
# Lifespan hook para FastAPI
# ---------------------------
# Al arrancar crea las tablas si DB_CREATE_ALL esta activo;
# al shutdown cerramos el engine y liberamos el pool.
@asynccontextmanager
async def lifespan(app):
    if _crear_tablas_habilitado():
        await crear_tablas()
    yield
    await engine.dispose()


# ---------------------------
# Dependencia para obtener sesion
# ---------------------------
async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Provee una sesion de base de datos por request.
    Cada operacion confirma o revierte su propia transaccion.
    """
    async with AsyncSessionLocal() as db:
        yield db
    # Al salir del async with, la sesion se cierra automaticamente
