# cliente.py
# ---------------------------
# Módulo de endpoints REST para gestión de la entidad Cliente.
# Usa FastAPI, SQLAlchemy Async y Pydantic para validación.
# El ciclo de vida (estado, baja lógica) lo implementa base.GestorRecurso.

from pydantic import BaseModel, Field                           # Pydantic para schemas de entrada/salida
from uuid import UUID                                           # UUID para identificadores únicos
from datetime import datetime                                   # Fecha y hora
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Uuid, func

from db import Base
from base import BaseRouter, GestorRecurso
from utils.validacion import Email

# Solo letras y espacios (sin números)
PATRON_NOMBRE = r"^[a-zA-Z\s]+$"

# --------------------------------------
# Definición de los modelos ORM (SQLAlchemy)
# --------------------------------------
class EstadoCliente(Base):
    __tablename__ = "estado_cliente"

    id     = Column(Integer, primary_key=True, autoincrement=False)
    nombre = Column(String(50), nullable=False)


class Cliente(Base):
    __tablename__ = "clientes"

    # El id lo genera la aplicación al crear (uuid4)
    id        = Column(Uuid(as_uuid=True), primary_key=True)
    nombre    = Column(String(50), nullable=False)
    direccion = Column(String(100), nullable=False)
    contacto  = Column(String(50), nullable=False)
    telefono  = Column(String(10), nullable=False)
    # Sin restricción UNIQUE: la unicidad solo se exige al crear
    email     = Column(String(255), nullable=False, index=True)
    estado_id = Column(Integer, ForeignKey("estado_cliente.id"), nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False
    )

# ----------------------------------
# Schemas de validación con Pydantic
# ----------------------------------
class ClienteBase(BaseModel):
    """
    Esquema base con campos comunes para crear/actualizar Cliente.
    """
    nombre: str = Field(..., min_length=1, max_length=50, pattern=PATRON_NOMBRE)
    direccion: str = Field(..., min_length=1, max_length=100)
    contacto: str = Field(..., min_length=1, max_length=50)
    telefono: str = Field(..., pattern=r"^[0-9]{10}$")
    email: Email
    estado_id: int

class ClienteCreate(ClienteBase):
    """Esquema para creación; hereda todos los campos base."""
    pass

class ClienteUpdate(ClienteBase):
    """Esquema para actualización completa (todos los campos obligatorios)."""
    pass

class ClienteRead(BaseModel):
    """
    Esquema de lectura (salida) con los campos persistidos.
    """
    id: UUID
    nombre: str
    direccion: str
    contacto: str
    telefono: str
    email: str
    estado_id: int
    created_at: datetime
    updated_at: datetime
    model_config = {"from_attributes": True}

# ---------------------------
# Gestor y router
# ---------------------------
gestor = GestorRecurso(
    Cliente,
    EstadoCliente,
    campo_clave="email",
    singular="cliente",
    plural="clientes",
)

router = BaseRouter(gestor, ClienteCreate, ClienteUpdate, ClienteRead).get_router()
