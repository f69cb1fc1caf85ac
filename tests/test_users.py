from app.shared.database.models import User
from app.core.auth.security import verify_password


def test_admin_registers_user(client, admin_headers, db_session):
    response = client.post(
        "/api/users/register",
        json={"nombre": "Nueva Caja", "correo": "Nueva@Example.com ", "password": "pw", "rol": "caja"},
        headers=admin_headers
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Usuario creado correctamente"

    user = db_session.query(User).filter(User.id == body["userId"]).one()
    assert user.correo == "nueva@example.com"
    assert user.rol == "caja"
    assert verify_password("pw", user.password)


def test_register_defaults_to_seller_role(client, admin_headers, db_session):
    response = client.post(
        "/api/users/register",
        json={"nombre": "V", "correo": "v@example.com", "password": "pw"},
        headers=admin_headers
    )
    assert response.status_code == 201
    assert db_session.get(User, response.json()["userId"]).rol == "vendedor"


def test_register_duplicate_email(client, admin_headers, seller_user):
    response = client.post(
        "/api/users/register",
        json={"nombre": "Otro", "correo": "vendedor@example.com", "password": "pw"},
        headers=admin_headers
    )
    assert response.status_code == 409
    assert response.json()["message"] == "El correo ya está registrado"


def test_register_missing_fields(client, admin_headers):
    response = client.post("/api/users/register", json={"nombre": "Sin correo"}, headers=admin_headers)
    assert response.status_code == 400


def test_register_unknown_role(client, admin_headers):
    response = client.post(
        "/api/users/register",
        json={"nombre": "X", "correo": "x@example.com", "password": "pw", "rol": "gerente"},
        headers=admin_headers
    )
    assert response.status_code == 400


def test_list_users(client, admin_headers, seller_user, cashier_user):
    response = client.get("/api/users", headers=admin_headers)

    assert response.status_code == 200
    emails = {u["correo"] for u in response.json()}
    assert emails == {"admin@example.com", "vendedor@example.com", "caja@example.com"}
    assert all("password" not in u for u in response.json())
