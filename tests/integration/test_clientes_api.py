"""End-to-end tests for /clientes through the ASGI app."""

import uuid

import pytest
from sqlalchemy.exc import OperationalError

import base


def assert_error_envelope(response, status_code, message):
    assert response.status_code == status_code
    body = response.json()
    assert body == {"statusCode": status_code, "message": message, "data": {}, "metadata": {}}


@pytest.mark.asyncio
async def test_create_then_get_round_trip(client, cliente_payload):
    payload = cliente_payload()
    response = await client.post("/clientes", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["statusCode"] == 200
    assert body["message"] == "Cliente creado con éxito"
    assert body["metadata"] == {}
    creado = body["data"]
    uuid.UUID(creado["id"])
    assert creado["estado_id"] == 1

    response = await client.get(f"/clientes/{creado['id']}")
    assert response.status_code == 200
    assert response.json()["message"] == "Cliente obtenido con éxito"
    obtenido = response.json()["data"]
    for key, value in payload.items():
        assert obtenido[key] == value
    assert obtenido["id"] == creado["id"]


@pytest.mark.asyncio
async def test_duplicate_email_is_conflict(client, cliente_payload):
    first = await client.post("/clientes", json=cliente_payload(email="a@b.com"))
    assert first.status_code == 200

    second = await client.post("/clientes", json=cliente_payload(email="a@b.com", nombre="Otra"))
    assert_error_envelope(second, 400, "Cliente con este email ya existe")


@pytest.mark.asyncio
async def test_email_is_stored_as_sent_without_case_folding(client, cliente_payload):
    primero = await client.post("/clientes", json=cliente_payload(email="Ana@Example.COM"))
    assert primero.status_code == 200
    creado = primero.json()["data"]
    assert creado["email"] == "Ana@Example.COM"

    obtenido = (await client.get(f"/clientes/{creado['id']}")).json()["data"]
    assert obtenido["email"] == "Ana@Example.COM"

    segundo = await client.post("/clientes", json=cliente_payload(email="Ana@example.com"))
    assert segundo.status_code == 200
    assert segundo.json()["data"]["email"] == "Ana@example.com"


@pytest.mark.asyncio
async def test_create_with_unknown_state_is_rejected(client, cliente_payload):
    response = await client.post("/clientes", json=cliente_payload(estado_id=9))
    assert_error_envelope(response, 400, "Estado no válido")

    listado = await client.get("/clientes")
    assert listado.json()["metadata"]["total"] == 0


@pytest.mark.asyncio
async def test_get_missing_returns_404_with_empty_data(client):
    response = await client.get(f"/clientes/{uuid.uuid4()}")
    assert_error_envelope(response, 404, "Cliente no encontrado")


@pytest.mark.asyncio
async def test_malformed_id_is_validation_error(client):
    response = await client.get("/clientes/no-es-uuid")

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation errors"
    assert body["data"]


@pytest.mark.asyncio
async def test_field_shape_errors_return_validation_envelope(client, cliente_payload):
    response = await client.post(
        "/clientes",
        json=cliente_payload(telefono="123", email="no-es-email", nombre="Ana 2"),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["statusCode"] == 400
    assert body["message"] == "Validation errors"
    campos = {error["loc"][-1] for error in body["data"]}
    assert {"telefono", "email", "nombre"} <= campos


@pytest.mark.asyncio
async def test_list_filters_and_metadata(client, cliente_payload):
    ids = []
    for i in range(3):
        response = await client.post("/clientes", json=cliente_payload(email=f"c{i}@example.com"))
        ids.append(response.json()["data"]["id"])
    await client.delete(f"/clientes/{ids[0]}")

    activos = (await client.get("/clientes", params={"estado": "activo"})).json()
    assert activos["message"] == "Clientes obtenidos con éxito"
    assert {c["estado_id"] for c in activos["data"]} == {1}
    assert activos["metadata"] == {"page": 1, "size": 10, "total": 2}

    inactivos = (await client.get("/clientes", params={"estado": "inactivo"})).json()
    assert [c["id"] for c in inactivos["data"]] == [ids[0]]
    assert inactivos["metadata"]["total"] == 1

    todos = (await client.get("/clientes")).json()
    assert todos["metadata"]["total"] == 3
    assert len(todos["data"]) == 3


@pytest.mark.asyncio
async def test_list_rejects_bad_pagination_and_filter(client):
    for params in ({"page": 0}, {"size": 0}, {"estado": "borrado"}, {"page": "uno"}):
        response = await client.get("/clientes", params=params)
        assert response.status_code == 400
        assert response.json()["message"] == "Validation errors"


@pytest.mark.asyncio
async def test_list_rejects_oversized_pagination(client):
    for params in (
        {"page": 10**19},
        {"page": 1_000_001},
        {"size": 1_001},
        {"page": 1_000_000, "size": 10**12},
    ):
        response = await client.get("/clientes", params=params)
        assert response.status_code == 400
        assert response.json()["message"] == "Validation errors"

    response = await client.get("/clientes", params={"page": 1_000_000, "size": 1_000})
    assert response.status_code == 200
    assert response.json()["data"] == []


@pytest.mark.asyncio
async def test_update_replaces_all_fields(client, cliente_payload):
    creado = (await client.post("/clientes", json=cliente_payload())).json()["data"]

    nuevo = cliente_payload(
        nombre="Ana Maria",
        direccion="Calle Dos 456",
        contacto="Maria",
        telefono="5587654321",
        email="ana@example.com",
        estado_id=2,
    )
    response = await client.put(f"/clientes/{creado['id']}", json=nuevo)

    assert response.status_code == 200
    assert response.json()["message"] == "Cliente actualizado con éxito"
    actualizado = response.json()["data"]
    for key, value in nuevo.items():
        assert actualizado[key] == value
    assert actualizado["id"] == creado["id"]


@pytest.mark.asyncio
async def test_update_missing_and_invalid_state(client, cliente_payload):
    response = await client.put(f"/clientes/{uuid.uuid4()}", json=cliente_payload())
    assert_error_envelope(response, 404, "Cliente no encontrado")

    creado = (await client.post("/clientes", json=cliente_payload())).json()["data"]
    response = await client.put(f"/clientes/{creado['id']}", json=cliente_payload(estado_id=50))
    assert_error_envelope(response, 400, "Estado no válido")


@pytest.mark.asyncio
async def test_update_does_not_recheck_email_uniqueness(client, cliente_payload):
    await client.post("/clientes", json=cliente_payload(email="uno@example.com"))
    segundo = (await client.post("/clientes", json=cliente_payload(email="dos@example.com"))).json()["data"]

    response = await client.put(
        f"/clientes/{segundo['id']}", json=cliente_payload(email="uno@example.com")
    )
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "uno@example.com"


@pytest.mark.asyncio
async def test_soft_delete_twice(client, cliente_payload):
    creado = (await client.post("/clientes", json=cliente_payload())).json()["data"]

    first = await client.delete(f"/clientes/{creado['id']}")
    assert first.status_code == 200
    assert first.json()["message"] == "Cliente eliminado lógicamente con éxito"
    assert first.json()["data"]["estado_id"] == 2

    second = await client.delete(f"/clientes/{creado['id']}")
    assert_error_envelope(second, 400, "El cliente ya está inactivo")

    # The row is still there
    obtenido = await client.get(f"/clientes/{creado['id']}")
    assert obtenido.json()["data"]["estado_id"] == 2


@pytest.mark.asyncio
async def test_delete_missing_is_404(client):
    response = await client.delete(f"/clientes/{uuid.uuid4()}")
    assert_error_envelope(response, 404, "Cliente no encontrado")


@pytest.mark.asyncio
async def test_set_status_transitions(client, cliente_payload):
    creado = (await client.post("/clientes", json=cliente_payload())).json()["data"]
    url = f"/clientes/{creado['id']}/status"

    same = await client.patch(url, json={"estado_id": 1})
    assert_error_envelope(same, 400, "El cliente ya se encuentra en ese estado")

    changed = await client.patch(url, json={"estado_id": 2})
    assert changed.status_code == 200
    assert changed.json()["message"] == "Estado del cliente actualizado con éxito"
    assert changed.json()["data"]["estado_id"] == 2

    same_inactive = await client.patch(url, json={"estado_id": 2})
    assert_error_envelope(same_inactive, 400, "El cliente ya se encuentra en ese estado")

    back = await client.patch(url, json={"estado_id": 1})
    assert back.json()["data"]["estado_id"] == 1


@pytest.mark.asyncio
async def test_set_status_body_must_carry_integer(client, cliente_payload):
    creado = (await client.post("/clientes", json=cliente_payload())).json()["data"]

    response = await client.patch(f"/clientes/{creado['id']}/status", json={"estado_id": "uno"})
    assert response.status_code == 400
    assert response.json()["message"] == "Validation errors"


@pytest.mark.asyncio
async def test_store_failure_returns_generic_500(client, cliente_payload, monkeypatch):
    async def falla(*args, **kwargs):
        raise OperationalError("SELECT id FROM estado_cliente", {}, Exception("password=hunter2"))

    monkeypatch.setattr(base, "es_estado_valido", falla)

    response = await client.post("/clientes", json=cliente_payload())
    assert_error_envelope(response, 500, "Error creando cliente")
    assert "hunter2" not in response.text
