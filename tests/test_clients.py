from datetime import datetime
from decimal import Decimal

from app.modules.clients.service import ClientsService
from app.shared.database.models import Client, ClientCredit, Sale, Zone

NEW_CLIENT = {
    "tipo_documento": "RUC",
    "documento": "20601234567",
    "nombre": "Comercial Andina SAC",
    "direccion": "Av. Grau 456",
    "correo": "compras@andina.pe"
}


def test_create_and_get_client(client, cashier_headers):
    response = client.post("/api/clientes", json=NEW_CLIENT, headers=cashier_headers)

    assert response.status_code == 201
    client_id = response.json()["clienteId"]

    response = client.get(f"/api/clientes/{client_id}", headers=cashier_headers)
    assert response.status_code == 200
    assert response.json()["nombre"] == "Comercial Andina SAC"
    assert response.json()["tipo_documento"] == "RUC"


def test_create_client_requires_fields(client, cashier_headers):
    payload = dict(NEW_CLIENT)
    del payload["direccion"]
    response = client.post("/api/clientes", json=payload, headers=cashier_headers)
    assert response.status_code == 400


def test_create_client_duplicate_document(client, cashier_headers, customer):
    payload = dict(NEW_CLIENT, documento=customer.documento)
    response = client.post("/api/clientes", json=payload, headers=cashier_headers)
    assert response.status_code == 409


def test_seller_cannot_list_clients(client, seller_headers):
    assert client.get("/api/clientes", headers=seller_headers).status_code == 403


def test_update_client(client, cashier_headers, customer, db_session):
    response = client.put(
        f"/api/clientes/{customer.id}",
        json={"telefono": "999000111"},
        headers=cashier_headers
    )
    assert response.status_code == 200

    db_session.expire_all()
    assert db_session.get(Client, customer.id).telefono == "999000111"


def test_update_client_rejects_null_required_fields(client, cashier_headers, customer, db_session):
    for field in ("documento", "nombre", "direccion", "tipo_documento"):
        response = client.put(f"/api/clientes/{customer.id}", json={field: None}, headers=cashier_headers)
        assert response.status_code == 400, field

    db_session.expire_all()
    assert db_session.get(Client, customer.id).documento == "45678912"


def test_update_client_allows_clearing_optional_fields(client, cashier_headers, customer, db_session):
    response = client.put(f"/api/clientes/{customer.id}", json={"correo": None}, headers=cashier_headers)
    assert response.status_code == 200

    db_session.expire_all()
    assert db_session.get(Client, customer.id).correo is None


def test_create_client_duplicate_detected_on_commit(client, cashier_headers, customer, monkeypatch):
    # Otro registro con el mismo documento se confirma después de la verificación
    monkeypatch.setattr(ClientsService, "_ensure_unique_document", lambda self, documento, exclude_id=None: None)

    payload = dict(NEW_CLIENT, documento=customer.documento)
    response = client.post("/api/clientes", json=payload, headers=cashier_headers)

    assert response.status_code == 409
    assert response.json()["message"] == f"Ya existe un cliente con documento {customer.documento}"


def test_update_client_duplicate_detected_on_commit(client, cashier_headers, customer, monkeypatch):
    other = client.post("/api/clientes", json=NEW_CLIENT, headers=cashier_headers).json()["clienteId"]
    monkeypatch.setattr(ClientsService, "_ensure_unique_document", lambda self, documento, exclude_id=None: None)

    response = client.put(f"/api/clientes/{other}", json={"documento": customer.documento}, headers=cashier_headers)

    assert response.status_code == 409


def test_update_missing_client(client, cashier_headers):
    response = client.put("/api/clientes/999", json={"telefono": "1"}, headers=cashier_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Cliente no encontrado"


def test_delete_client_admin_only(client, cashier_headers, admin_headers, customer, db_session):
    assert client.delete(f"/api/clientes/{customer.id}", headers=cashier_headers).status_code == 403

    response = client.delete(f"/api/clientes/{customer.id}", headers=admin_headers)
    assert response.status_code == 200

    db_session.expire_all()
    assert db_session.get(Client, customer.id) is None


def test_delete_client_with_sales_conflicts(client, admin_headers, admin_user, customer, db_session):
    db_session.add(Sale(id_usuario=admin_user.id, id_cliente=customer.id, numero_venta="V-1"))
    db_session.commit()

    response = client.delete(f"/api/clientes/{customer.id}", headers=admin_headers)
    assert response.status_code == 409


def test_search_clients(client, seller_headers, customer, db_session):
    for i in range(12):
        db_session.add(Client(tipo_documento="DNI", documento=f"1000000{i:02d}", nombre=f"Juana {i}", direccion="x"))
    db_session.commit()

    response = client.get("/api/clientes/buscar", params={"q": "juan"}, headers=seller_headers)

    assert response.status_code == 200
    results = response.json()
    assert len(results) == 10
    assert all("juan" in r["nombre"].lower() for r in results)
    assert results[0]["latitud"] == "Sin ubicación"


def test_search_clients_requires_query(client, seller_headers):
    response = client.get("/api/clientes/buscar", headers=seller_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "Debe enviar el parámetro q"


def _credit(db, customer, total, tipo, day):
    db.add(ClientCredit(
        cliente_id=customer.id,
        fecha=datetime(2024, 5, day, 10, 0),
        detalle=f"{tipo} {day}",
        total=Decimal(total),
        tipo=tipo
    ))


def test_client_debt_and_detail(client, cashier_headers, customer, db_session):
    _credit(db_session, customer, "100.00", "cargo", 1)
    _credit(db_session, customer, "-40.00", "abono", 3)
    _credit(db_session, customer, "15.50", "cargo", 2)
    db_session.commit()

    response = client.get(f"/api/clientes/{customer.id}/deuda", headers=cashier_headers)
    assert response.status_code == 200
    assert response.json() == {"id": customer.id, "nombre": "Juan Pérez", "saldo": 75.5}

    response = client.get(f"/api/clientes/{customer.id}/deuda/detalle", headers=cashier_headers)
    assert response.status_code == 200
    assert [m["saldo"] for m in response.json()] == [100.0, 115.5, 75.5]


def test_client_debt_without_movements_is_zero(client, cashier_headers, customer):
    response = client.get(f"/api/clientes/{customer.id}/deuda", headers=cashier_headers)
    assert response.json()["saldo"] == 0


def test_clients_by_zone(client, cashier_headers, customer, zone, db_session):
    _credit(db_session, customer, "20.00", "cargo", 1)
    other_zone = Zone(nombre="Norte")
    db_session.add(other_zone)
    db_session.commit()
    db_session.add(Client(tipo_documento="DNI", documento="11111111", nombre="Otro", direccion="x", zona_id=other_zone.id))
    db_session.commit()

    response = client.get("/api/clientes/por-zona", params={"zona_id": zone.id}, headers=cashier_headers)

    assert response.status_code == 200
    assert response.json() == [{"id": customer.id, "nombre": "Juan Pérez", "saldo": 20.0}]


def test_clients_by_zone_requires_zone(client, cashier_headers):
    assert client.get("/api/clientes/por-zona", headers=cashier_headers).status_code == 400


def test_zones_and_branches(client, seller_headers, zone, branch):
    zones = client.get("/api/zonas", headers=seller_headers).json()
    branches = client.get("/api/sucursales", headers=seller_headers).json()

    assert zones == [{"id": zone.id, "nombre": "Centro"}]
    assert branches[0]["nombre"] == "Principal"
