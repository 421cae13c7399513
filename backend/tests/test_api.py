from datetime import date


def order_payload(supplier_id, personnel_id, **overrides):
    body = {
        "order_date": "2024-01-07",
        "product_code": "P-7",
        "product_name": "Cable tie 200mm",
        "quantity_ordered": 40,
        "supplier_id": supplier_id,
        "personnel_id": personnel_id,
    }
    body.update(overrides)
    return body


# ---------- auth ----------
def test_register_login_me(client):
    r = client.post("/auth/register", json={
        "email": "Clerk@Example.com", "password": "secret1",
        "first_name": "Zeynep", "last_name": "Kaya",
    })
    assert r.status_code == 201
    assert r.json()["role"] == "staff"
    assert r.json()["email"] == "clerk@example.com"

    r = client.post("/auth/login", json={"email": "clerk@example.com", "password": "secret1"})
    assert r.status_code == 200
    token = r.json()["access_token"]

    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["first_name"] == "Zeynep"


def test_register_duplicate_email_conflicts(client):
    body = {"email": "dup@example.com", "password": "secret1", "first_name": "A", "last_name": "B"}
    assert client.post("/auth/register", json=body).status_code == 201
    assert client.post("/auth/register", json=body).status_code == 409


def test_login_with_wrong_password_is_unauthorized(client):
    client.post("/auth/register", json={
        "email": "x@example.com", "password": "secret1", "first_name": "A", "last_name": "B",
    })
    r = client.post("/auth/login", json={"email": "x@example.com", "password": "wrong-one"})
    assert r.status_code == 401


def test_missing_or_bad_token_is_unauthorized(client):
    assert client.get("/orders").status_code == 401
    r = client.get("/orders", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["detail"] == "Unauthorized - Invalid token"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


# ---------- orders ----------
def test_order_crud_over_http(client, staff_headers, make_supplier, make_personnel):
    supplier = make_supplier()
    person = make_personnel()

    r = client.post("/orders", json=order_payload(supplier.id, person.id), headers=staff_headers)
    assert r.status_code == 201
    order = r.json()
    assert order["supplier"]["name"] == "Acme Parts"

    r = client.put(f"/orders/{order['id']}", json={"quantity_ordered": 7}, headers=staff_headers)
    assert r.status_code == 200
    assert r.json()["quantity_ordered"] == 7
    assert r.json()["product_code"] == order["product_code"]

    assert len(client.get(f"/orders/supplier/{supplier.id}", headers=staff_headers).json()) == 1
    assert len(client.get(f"/orders/personnel/{person.id}", headers=staff_headers).json()) == 1

    assert client.delete(f"/orders/{order['id']}", headers=staff_headers).status_code == 200
    assert client.get(f"/orders/{order['id']}", headers=staff_headers).status_code == 404


def test_order_with_missing_field_is_bad_request(client, staff_headers):
    body = order_payload(1, 1)
    del body["product_name"]

    r = client.post("/orders", json=body, headers=staff_headers)

    assert r.status_code == 400
    assert r.json()["detail"] == "Validation failed"


def test_order_with_zero_quantity_is_bad_request(client, staff_headers):
    r = client.post("/orders", json=order_payload(1, 1, quantity_ordered=0), headers=staff_headers)
    assert r.status_code == 400


# ---------- stock ----------
def test_stock_entry_and_exit_over_http(client, staff_headers, make_order):
    order = make_order()

    r = client.post("/stocks", json={"entry_date": "2024-01-01", "quantity": 50, "order_id": order.id},
                    headers=staff_headers)
    assert r.status_code == 201
    stock_id = r.json()["id"]
    assert r.json()["exit_date"] is None

    r = client.patch(f"/stocks/{stock_id}/exit", json={"exit_date": "2024-02-01", "quantity": 20},
                     headers=staff_headers)
    assert r.status_code == 200
    assert r.json()["quantity"] == 30
    assert r.json()["exit_date"] == "2024-02-01"

    r = client.patch(f"/stocks/{stock_id}/exit", json={"exit_date": "2024-02-02", "quantity": 31},
                     headers=staff_headers)
    assert r.status_code == 409
    assert client.get(f"/stocks/{stock_id}", headers=staff_headers).json()["quantity"] == 30


def test_stock_entry_for_unknown_order_is_not_found(client, staff_headers):
    r = client.post("/stocks", json={"entry_date": "2024-01-01", "quantity": 5, "order_id": 999},
                    headers=staff_headers)
    assert r.status_code == 404


def test_stock_entry_with_negative_quantity_is_bad_request(client, staff_headers, make_order):
    order = make_order()
    r = client.post("/stocks", json={"entry_date": "2024-01-01", "quantity": -1, "order_id": order.id},
                    headers=staff_headers)
    assert r.status_code == 400


def test_stock_of_deleted_order_still_readable(client, staff_headers, make_order, make_stock):
    order = make_order()
    record = make_stock(order, 4)

    client.delete(f"/orders/{order.id}", headers=staff_headers)
    r = client.get(f"/stocks/{record.id}", headers=staff_headers)

    assert r.status_code == 200
    assert r.json()["order"] is None


# ---------- reports ----------
def test_stock_movement_forbidden_for_staff(client, staff_headers):
    r = client.get("/reports/stock-movement",
                   params={"startDate": "2024-01-01", "endDate": "2024-01-31"}, headers=staff_headers)
    assert r.status_code == 403
    assert r.json()["detail"] == "insufficient permissions"


def test_stock_movement_for_manager(client, manager_headers, make_order, make_stock):
    make_stock(make_order(product_code="P1"), 7, entry_date=date(2024, 1, 3), exit_date=date(2024, 1, 20))

    r = client.get("/reports/stock-movement",
                   params={"startDate": "2024-01-01", "endDate": "2024-01-31"}, headers=manager_headers)

    assert r.status_code == 200
    assert [e["type"] for e in r.json()] == ["entry", "exit"]


def test_stock_movement_requires_dates(client, admin_headers):
    r = client.get("/reports/stock-movement", params={"startDate": "2024-01-01"}, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Start date and end date are required"


def test_low_stock_alerts_over_http(client, staff_headers, make_order, make_stock):
    make_stock(make_order(product_code="P1"), 5)
    make_stock(make_order(product_code="P2"), 15)

    r = client.get("/reports/low-stock-alerts", headers=staff_headers)
    assert [a["product_code"] for a in r.json()] == ["P1"]

    r = client.get("/reports/low-stock-alerts", params={"threshold": 20}, headers=staff_headers)
    assert {a["product_code"] for a in r.json()} == {"P1", "P2"}

    assert client.get("/reports/low-stock-alerts", params={"threshold": 0},
                      headers=staff_headers).status_code == 400


def test_stock_summary_over_http(client, staff_headers, make_order, make_stock):
    order = make_order(product_code="P1")
    make_stock(order, 5)
    make_stock(order, 3, exit_date=date(2024, 1, 9))

    rows = client.get("/reports/stock-summary", headers=staff_headers).json()

    assert rows == [{
        "product_code": "P1", "product_name": "Hex bolt M8", "supplier": "Acme Parts",
        "total_quantity": 8, "available_quantity": 5, "last_entry_date": "2024-01-01",
    }]


def test_unknown_principal_is_forbidden_on_restricted_report(client, auth_headers, make_personnel, db_session):
    person = make_personnel(role="admin")
    headers = auth_headers(person)
    db_session.delete(person)
    db_session.commit()

    r = client.get("/reports/stock-movement",
                   params={"startDate": "2024-01-01", "endDate": "2024-01-31"}, headers=headers)

    assert r.status_code == 403
    assert r.json()["detail"] == "role unverifiable"


# ---------- audit log ----------
def test_admin_sees_audit_trail_of_writes(client, admin_headers, staff_headers, make_order):
    order = make_order()
    client.post("/stocks", json={"entry_date": "2024-01-01", "quantity": 5, "order_id": order.id},
                headers=staff_headers)

    assert client.get("/logs", headers=staff_headers).status_code == 403

    r = client.get("/logs", params={"action": "STOCK_ENTRY"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["total"] == 1
    assert r.json()["items"][0]["resource"] == "stock"


# ---------- master data ----------
def test_company_and_supplier_crud(client, staff_headers):
    r = client.post("/companies", json={"name": "Depo Ltd", "tax_number": "1234567890"}, headers=staff_headers)
    assert r.status_code == 201
    company_id = r.json()["id"]
    r = client.put(f"/companies/{company_id}", json={"phone": "+90 312 000 0000"}, headers=staff_headers)
    assert r.json()["name"] == "Depo Ltd"
    assert r.json()["phone"] == "+90 312 000 0000"

    r = client.post("/suppliers", json={"name": "Bolt Co"}, headers=staff_headers)
    assert r.status_code == 201
    supplier_id = r.json()["id"]
    assert client.delete(f"/suppliers/{supplier_id}", headers=staff_headers).status_code == 200
    assert client.get(f"/suppliers/{supplier_id}", headers=staff_headers).status_code == 404


def test_role_change_is_admin_only(client, manager_headers, admin_headers, make_personnel):
    person = make_personnel()

    r = client.put(f"/personnel/{person.id}/role", json={"role": "manager"}, headers=manager_headers)
    assert r.status_code == 403

    r = client.put(f"/personnel/{person.id}/role", json={"role": "manager"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["role"] == "manager"


def test_personnel_cannot_delete_themselves(client, auth_headers, make_personnel):
    person = make_personnel()

    r = client.delete(f"/personnel/{person.id}", headers=auth_headers(person))

    assert r.status_code == 400
