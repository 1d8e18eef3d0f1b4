"""Shared fixtures: in-memory SQLite store, seeded status lookups, API clients."""

import os

# Must be set before db.py is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.pop("DB_CREATE_ALL", None)

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

import db
from main import create_app
from utils.auth import VerificadorToken

SECRETO = "secreto-de-pruebas-con-al-menos-32-bytes"


@pytest_asyncio.fixture
async def bd():
    """Fresh schema per test: tables created, lookups seeded with 1 and 2."""
    await db.crear_tablas()
    yield
    # Dropping the StaticPool connection discards the in-memory database
    await db.engine.dispose()


@pytest_asyncio.fixture
async def session(bd):
    async with db.AsyncSessionLocal() as s:
        yield s


@pytest.fixture
def verificador() -> VerificadorToken:
    return VerificadorToken(SECRETO)


@pytest.fixture
def token(verificador: VerificadorToken) -> str:
    return verificador.emitir({"id": "test-user-id", "email": "test@example.com"})


@pytest.fixture
def app(verificador: VerificadorToken):
    return create_app(verificador)


@pytest_asyncio.fixture
async def client(bd, app, token):
    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"Authorization": f"Bearer {token}"},
    ) as c:
        yield c


@pytest_asyncio.fixture
async def anon_client(bd, app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


def _cliente(**overrides) -> dict:
    data = {
        "nombre": "Ana Lopez",
        "direccion": "Calle Uno 123",
        "contacto": "Ana",
        "telefono": "5512345678",
        "email": "a@b.com",
        "estado_id": 1,
    }
    data.update(overrides)
    return data


def _maquilador(**overrides) -> dict:
    data = {
        "nombre": "Textiles del Norte",
        "direccion": "Av Industrial 45",
        "capacidad": 1000,
        "estado_id": 1,
    }
    data.update(overrides)
    return data


def _usuario(**overrides) -> dict:
    data = {
        "nombre": "Carlos Ruiz",
        "email": "carlos@example.com",
        "password": "secreto123",
        "role": "admin",
        "estado_id": 1,
    }
    data.update(overrides)
    return data


# Payload builders exposed as fixtures: call with keyword overrides
@pytest.fixture
def cliente_payload():
    return _cliente


@pytest.fixture
def maquilador_payload():
    return _maquilador


@pytest.fixture
def usuario_payload():
    return _usuario
