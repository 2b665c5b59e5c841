import config
from conftest import PASSWORD, auth


def test_customer_login_returns_token_and_unit(client, seed):
    res = client.post("/api/auth/customer/login", json={"email": "RAVI@test.in", "password": PASSWORD})
    assert res.status_code == 200
    body = res.json()
    assert body["user"]["type"] == "customer"
    assert body["user"]["unit_no"] == "101"

    me = client.get("/api/auth/me", headers=auth(body["token"]))
    assert me.status_code == 200
    assert me.json()["user"]["id"] == seed.cust1_id


def test_employee_login_includes_role(client, seed):
    res = client.post("/api/auth/employee/login", json={"email": "sub@test.in", "password": PASSWORD})
    assert res.status_code == 200
    assert res.json()["user"]["role"] == "sub_admin"


def test_login_rejects_bad_password(client, seed):
    res = client.post("/api/auth/employee/login", json={"email": "admin@test.in", "password": "wrong"})
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid email or password"}


def test_login_missing_fields_is_400(client, seed):
    res = client.post("/api/auth/customer/login", json={"email": "ravi@test.in"})
    assert res.status_code == 400
    assert "password" in res.json()["error"]


def test_login_writes_audit_row(client, seed):
    client.post("/api/auth/customer/login", json={"email": "ravi@test.in", "password": PASSWORD})
    logs = client.get("/api/audit-logs", params={"action": "login"}, headers=seed.admin).json()
    assert logs["pagination"]["total"] == 1
    assert logs["audit_logs"][0]["actor_id"] == seed.cust1_id


def test_missing_and_invalid_tokens_are_401(client, seed):
    assert client.get("/api/auth/me").status_code == 401
    res = client.get("/api/auth/me", headers=auth("not-a-token"))
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid or expired token"}


def test_deactivated_account_is_rejected_with_valid_token(client, seed):
    assert client.delete(f"/api/employees/{seed.emp2_id}", headers=seed.admin).status_code == 200
    assert client.get("/api/auth/me", headers=seed.emp2).status_code == 401


def test_change_password(client, seed):
    res = client.post(
        "/api/auth/change-password",
        json={"current_password": "nope", "new_password": "abcdef"},
        headers=seed.cust1,
    )
    assert res.status_code == 400

    res = client.post(
        "/api/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "abc"},
        headers=seed.cust1,
    )
    assert res.status_code == 400

    res = client.post(
        "/api/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "N3wSecret"},
        headers=seed.cust1,
    )
    assert res.status_code == 200
    login = client.post("/api/auth/customer/login", json={"email": "ravi@test.in", "password": "N3wSecret"})
    assert login.status_code == 200


def test_setup_disabled_by_default(client, seed):
    assert client.post("/api/auth/setup").status_code == 403


def test_setup_resets_default_passwords(client, seed, monkeypatch):
    monkeypatch.setattr(config, "ALLOW_SETUP", True)
    res = client.post("/api/auth/setup")
    assert res.status_code == 200
    assert res.json()["updated"] == {"admin": 1, "sub_admin": 1, "employee": 2, "customer": 2}

    login = client.post(
        "/api/auth/employee/login",
        json={"email": "admin@test.in", "password": config.DEFAULT_ADMIN_PASSWORD},
    )
    assert login.status_code == 200
