# maquilador.py
# ---------------------------
# Módulo de endpoints REST para gestión de maquiladores
# (fabricantes por contrato). La clave natural es el nombre.

from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Uuid, func

from db import Base
from base import BaseRouter, GestorRecurso

# --------------------------------------
# Modelos ORM
# --------------------------------------
class EstadoMaquilador(Base):
    __tablename__ = "estado_maquilador"

    id     = Column(Integer, primary_key=True, autoincrement=False)
    nombre = Column(String(50), nullable=False)


class Maquilador(Base):
    __tablename__ = "maquiladores"

    id        = Column(Uuid(as_uuid=True), primary_key=True)
    nombre    = Column(String(50), nullable=False, index=True)
    direccion = Column(String(100), nullable=False)
    capacidad = Column(Integer, nullable=False)
    estado_id = Column(Integer, ForeignKey("estado_maquilador.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

# ----------------------------------
# Schemas Pydantic
# ----------------------------------
class MaquiladorBase(BaseModel):
    nombre: str = Field(..., min_length=1, max_length=50, pattern=r"^[a-zA-Z\s]+$")
    # Letras, dígitos y espacios
    direccion: str = Field(..., min_length=1, max_length=100, pattern=r"^[a-zA-Z0-9\s]+$")
    capacidad: int = Field(..., ge=1)
    estado_id: int

class MaquiladorCreate(MaquiladorBase):
    pass

class MaquiladorUpdate(MaquiladorBase):
    pass

class MaquiladorRead(BaseModel):
    id: UUID
    nombre: str
    direccion: str
    capacidad: int
    estado_id: int
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}

# ---------------------------
# Gestor y router
# ---------------------------
gestor = GestorRecurso(
    Maquilador,
    EstadoMaquilador,
    campo_clave="nombre",
    singular="maquilador",
    plural="maquiladores",
)

router = BaseRouter(gestor, MaquiladorCreate, MaquiladorUpdate, MaquiladorRead).get_router()
