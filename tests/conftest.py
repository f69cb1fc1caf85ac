import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SMTP_HOST"] = "smtp.example.com"
os.environ["EMAIL_FROM"] = "caja@example.com"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.config.database import Base, get_db
from app.core.auth.security import hash_password, create_access_token
from app.main import app
from app.shared.database.models import (
    User, Client, Product, Branch, Zone, InvoiceSeries
)

PASSWORD = "secret123"


@pytest.fixture(scope="session")
def password_hash():
    return hash_password(PASSWORD)


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ==================== USUARIOS ====================

def _make_user(db, password_hash, nombre, correo, rol, activo=True):
    user = User(nombre=nombre, correo=correo, password=password_hash, rol=rol, activo=activo)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token({'id': user.id, 'rol': user.rol})}"}


@pytest.fixture()
def admin_user(db_session, password_hash):
    return _make_user(db_session, password_hash, "Admin", "admin@example.com", "admin")


@pytest.fixture()
def seller_user(db_session, password_hash):
    return _make_user(db_session, password_hash, "Vendedor Uno", "vendedor@example.com", "vendedor")


@pytest.fixture()
def cashier_user(db_session, password_hash):
    return _make_user(db_session, password_hash, "Caja Uno", "caja@example.com", "caja")


@pytest.fixture()
def inactive_user(db_session, password_hash):
    return _make_user(db_session, password_hash, "Inactivo", "inactivo@example.com", "vendedor", activo=False)


@pytest.fixture()
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture()
def seller_headers(seller_user):
    return auth_headers(seller_user)


@pytest.fixture()
def cashier_headers(cashier_user):
    return auth_headers(cashier_user)


# ==================== DATOS ====================

@pytest.fixture()
def zone(db_session):
    zone = Zone(nombre="Centro")
    db_session.add(zone)
    db_session.commit()
    db_session.refresh(zone)
    return zone


@pytest.fixture()
def branch(db_session):
    branch = Branch(nombre="Principal", direccion="Jr. Lima 100", activo=True)
    db_session.add(branch)
    db_session.commit()
    db_session.refresh(branch)
    return branch


@pytest.fixture()
def customer(db_session, zone):
    customer = Client(
        tipo_documento="DNI",
        documento="45678912",
        nombre="Juan Pérez",
        direccion="Av. Arequipa 123",
        telefono="987654321",
        correo="juan@example.com",
        zona_id=zone.id
    )
    db_session.add(customer)
    db_session.commit()
    db_session.refresh(customer)
    return customer


@pytest.fixture()
def products(db_session):
    items = [
        Product(nombre="Arroz 5kg", categoria="Abarrotes", precio=Decimal("25.00"), stock=10, activo=True),
        Product(nombre="Aceite 1L", categoria="Abarrotes", precio=Decimal("11.80"), stock=5, activo=True),
        Product(nombre="Detergente", categoria="Limpieza", precio=Decimal("8.50"), stock=3, activo=True),
    ]
    db_session.add_all(items)
    db_session.commit()
    for item in items:
        db_session.refresh(item)
    return items


@pytest.fixture()
def invoice_series(db_session):
    series = [
        InvoiceSeries(listado="Boleta B001", ctipdocu="03", cserdocu="B001", correlativo=0, activo=True),
        InvoiceSeries(listado="Factura F001", ctipdocu="01", cserdocu="F001", correlativo=0, activo=True),
    ]
    db_session.add_all(series)
    db_session.commit()
    return series


@pytest.fixture()
def register_sale(client, seller_headers, customer):
    """Registrar una venta vía API y devolver el JSON de respuesta"""
    def _register(lines, tipo_comprobante="boleta", **extra):
        payload = {
            "id_cliente": customer.id,
            "tipo_comprobante": tipo_comprobante,
            "productos": lines,
            **extra
        }
        response = client.post("/api/ventas/registro", json=payload, headers=seller_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _register
