# usuario.py
# ---------------------------
# Módulo de endpoints REST para gestión de la entidad Usuario.
# Incluye CRUD con baja lógica y manejo seguro de contraseñas:
# la contraseña se hashea (bcrypt) antes del INSERT y nunca se devuelve.

from pydantic import BaseModel, Field                           # Pydantic para schemas de entrada/salida
from uuid import UUID                                           # UUID para identificadores únicos
from datetime import datetime                                   # Fecha y hora
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Uuid, func

from db import Base
from base import BaseRouter, GestorRecurso
from utils.validacion import Email
from utils.seguridad import hash_password

# --------------------------------------
# Definición de los modelos ORM (SQLAlchemy)
# --------------------------------------
class EstadoUsuario(Base):
    __tablename__ = "estado_usuario"

    id     = Column(Integer, primary_key=True, autoincrement=False)
    nombre = Column(String(50), nullable=False)


class Usuario(Base):
    __tablename__ = "usuarios"

    id        = Column(Uuid(as_uuid=True), primary_key=True)
    nombre    = Column(String(50), nullable=False)
    email     = Column(String(255), nullable=False, index=True)
    password  = Column(String(255), nullable=False)  # Hash bcrypt, nunca texto plano
    role      = Column(String(50), nullable=False)
    estado_id = Column(Integer, ForeignKey("estado_usuario.id"), nullable=False)
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
class UsuarioBase(BaseModel):
    """
    Esquema base con campos comunes para crear/actualizar Usuario.
    """
    nombre: str = Field(..., min_length=1, max_length=50, pattern=r"^[a-zA-Z\s]+$")
    email: Email
    role: str = Field(..., min_length=1, max_length=50)
    estado_id: int

class UsuarioCreate(UsuarioBase):
    """Esquema para creación; incluye password en texto plano."""
    password: str = Field(..., min_length=6)  # Se hashea antes de persistir

class UsuarioUpdate(UsuarioBase):
    """
    Esquema para actualización completa. No incluye password:
    el hash almacenado no se reescribe al actualizar.
    """
    pass

class UsuarioRead(BaseModel):
    """
    Esquema de lectura (salida).
    NUNCA incluye el hash de la contraseña.
    """
    id: UUID
    nombre: str
    email: str
    role: str
    estado_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


def preparar_usuario(valores: dict) -> dict:
    """Reemplaza la contraseña en texto plano por su hash antes del INSERT."""
    valores = dict(valores)
    valores["password"] = hash_password(valores["password"])
    return valores

# ---------------------------
# Gestor y router
# ---------------------------
gestor = GestorRecurso(
    Usuario,
    EstadoUsuario,
    campo_clave="email",
    singular="usuario",
    plural="usuarios",
    preparar=preparar_usuario,
)

router = BaseRouter(gestor, UsuarioCreate, UsuarioUpdate, UsuarioRead).get_router()
