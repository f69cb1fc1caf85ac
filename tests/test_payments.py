from app.shared.database.models import ClientCredit, Invoice, InvoiceSeries, Payment, Sale


def _pay(client, headers, sale_id, tipo="boleta", metodo="efectivo"):
    return client.post(
        "/api/pagos",
        json={"id_venta": sale_id, "tipo_comprobante": tipo, "metodo_pago": metodo},
        headers=headers
    )


def test_payment_approves_sale_and_issues_invoice(client, cashier_headers, register_sale, products, invoice_series, db_session):
    sale = register_sale([{"id_producto": products[0].id, "cantidad": 2}, {"id_producto": products[1].id, "cantidad": 1}])

    response = _pay(client, cashier_headers, sale["id"])

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Pago registrado"
    assert body["total"] == 61.8
    assert body["igv"] == 9.43
    assert body["comprobante"]["serie"] == "B001"
    assert body["comprobante"]["numero"] == "00000001"

    db_session.expire_all()
    assert db_session.get(Sale, sale["id"]).estado == "aprobado"
    invoice = db_session.get(Invoice, body["comprobante"]["id"])
    assert invoice.ctipdocu == "03"
    assert invoice.cliente_documento == "45678912"
    assert invoice.hash


def test_payments_issue_consecutive_numbers_per_series(client, cashier_headers, register_sale, products, invoice_series, db_session):
    numbers = []
    for _ in range(3):
        sale = register_sale([{"id_producto": products[0].id, "cantidad": 1}])
        numbers.append(_pay(client, cashier_headers, sale["id"]).json()["comprobante"]["numero"])

    sale = register_sale([{"id_producto": products[0].id, "cantidad": 1}])
    factura = _pay(client, cashier_headers, sale["id"], tipo="factura").json()["comprobante"]

    assert numbers == ["00000001", "00000002", "00000003"]
    assert factura == {"id": factura["id"], "serie": "F001", "numero": "00000001"}

    db_session.expire_all()
    boleta_series = db_session.query(InvoiceSeries).filter(InvoiceSeries.cserdocu == "B001").one()
    assert boleta_series.correlativo == 3


def test_payment_twice_conflicts(client, cashier_headers, register_sale, products, invoice_series, db_session):
    sale = register_sale([{"id_producto": products[0].id, "cantidad": 1}])
    assert _pay(client, cashier_headers, sale["id"]).status_code == 201

    response = _pay(client, cashier_headers, sale["id"])

    assert response.status_code == 409
    assert response.json()["message"] == "La venta ya fue pagada"
    assert db_session.query(Payment).count() == 1


def test_payment_of_cancelled_sale_conflicts(client, cashier_headers, register_sale, products, invoice_series):
    sale = register_sale([{"id_producto": products[0].id, "cantidad": 1}])
    client.post(f"/api/ventas/{sale['id']}/cancelar", headers=cashier_headers)

    assert _pay(client, cashier_headers, sale["id"]).status_code == 409


def test_payment_of_missing_sale(client, cashier_headers, invoice_series):
    response = _pay(client, cashier_headers, 999)
    assert response.status_code == 404
    assert response.json()["message"] == "Venta no encontrada o sin detalle"


def test_payment_without_series_rolls_back(client, cashier_headers, register_sale, products, db_session):
    sale = register_sale([{"id_producto": products[0].id, "cantidad": 1}])

    response = _pay(client, cashier_headers, sale["id"])

    assert response.status_code == 409
    db_session.expire_all()
    assert db_session.query(Payment).count() == 0
    assert db_session.get(Sale, sale["id"]).estado == "pendiente"


def test_payment_rejects_unknown_method(client, cashier_headers, register_sale, products, invoice_series):
    sale = register_sale([{"id_producto": products[0].id, "cantidad": 1}])
    assert _pay(client, cashier_headers, sale["id"], metodo="cheque").status_code == 400


def test_credit_payment_charges_client_account(client, cashier_headers, register_sale, products, invoice_series, customer, db_session):
    sale = register_sale([{"id_producto": products[0].id, "cantidad": 1}])

    response = _pay(client, cashier_headers, sale["id"], metodo="credito")
    assert response.status_code == 201

    credit = db_session.query(ClientCredit).one()
    assert credit.tipo == "cargo"
    assert float(credit.total) == 25.0
    assert credit.comprobante_id == response.json()["comprobante"]["id"]

    debt = client.get(f"/api/clientes/{customer.id}/deuda", headers=cashier_headers).json()
    assert debt["saldo"] == 25.0


def test_list_and_get_payments(client, cashier_headers, register_sale, products, invoice_series):
    sale = register_sale([{"id_producto": products[0].id, "cantidad": 1}])
    payment_id = _pay(client, cashier_headers, sale["id"], metodo="yape").json()["id"]

    listed = client.get("/api/pagos", headers=cashier_headers).json()
    assert [p["id"] for p in listed] == [payment_id]

    response = client.get(f"/api/pagos/{payment_id}", headers=cashier_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["metodo_pago"] == "yape"
    assert body["numero_venta"] == sale["numero_venta"]
    assert body["estado"] == "aprobado"
    assert body["cliente"] == "Juan Pérez"
    assert body["vendedor"] == "Vendedor Uno"

    assert client.get("/api/pagos/999", headers=cashier_headers).status_code == 404


def test_cancelling_credit_sale_reverses_debt(client, cashier_headers, register_sale, products, invoice_series, customer, db_session):
    sale = register_sale([{"id_producto": products[0].id, "cantidad": 2}])
    invoice_id = _pay(client, cashier_headers, sale["id"], metodo="credito").json()["comprobante"]["id"]

    response = client.post(f"/api/ventas/{sale['id']}/cancelar", headers=cashier_headers)
    assert response.status_code == 200

    debt = client.get(f"/api/clientes/{customer.id}/deuda", headers=cashier_headers).json()
    assert debt["saldo"] == 0

    movements = client.get(f"/api/clientes/{customer.id}/deuda/detalle", headers=cashier_headers).json()
    assert [(m["tipo"], m["total"], m["saldo"]) for m in movements] == [("cargo", 50.0, 50.0), ("abono", -50.0, 0.0)]
    assert {m["comprobante_id"] for m in movements} == {invoice_id}


def test_cancelling_cash_sale_leaves_account_untouched(client, cashier_headers, register_sale, products, invoice_series, db_session):
    sale = register_sale([{"id_producto": products[0].id, "cantidad": 1}])
    _pay(client, cashier_headers, sale["id"])

    client.post(f"/api/ventas/{sale['id']}/cancelar", headers=cashier_headers)

    assert db_session.query(ClientCredit).count() == 0
