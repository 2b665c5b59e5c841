def register(client, headers, unit_id, number="MH12 ab 1234", **extra):
    return client.post("/api/vehicles", json={"unit_id": unit_id, "vehicle_number": number, **extra}, headers=headers)


def test_customer_registers_vehicle_for_own_unit(client, seed):
    res = register(client, seed.cust1, seed.units["101"], make="Maruti")
    assert res.status_code == 201
    vehicle = res.json()["vehicle"]
    assert vehicle["vehicle_number"] == "MH12AB1234"
    assert vehicle["customer_id"] == seed.cust1_id
    assert vehicle["registered_by_employee_id"] is None

    assert register(client, seed.cust1, seed.units["102"], number="KA01 X 1").status_code == 403


def test_staff_registration_defaults_to_unit_owner(client, seed):
    res = register(client, seed.emp1, seed.units["102"], tenant_id=None)
    assert res.status_code == 201
    assert res.json()["vehicle"]["customer_id"] == seed.cust2_id
    assert res.json()["vehicle"]["registered_by_employee_id"] == seed.emp1_id


def test_active_vehicle_number_is_unique(client, seed):
    first = register(client, seed.emp1, seed.units["101"]).json()["vehicle"]
    assert register(client, seed.emp1, seed.units["102"], number="mh12ab1234").status_code == 409

    client.delete(f"/api/vehicles/{first['id']}", headers=seed.emp1)
    assert register(client, seed.emp1, seed.units["102"], number="mh12ab1234").status_code == 201


def test_tenant_and_owner_must_belong_to_unit(client, seed):
    assert register(client, seed.emp1, seed.units["102"], tenant_id=seed.tenant1_id).status_code == 400
    assert register(client, seed.emp1, seed.units["102"], customer_id=seed.cust1_id).status_code == 400
    assert register(client, seed.emp1, seed.units["101"], tenant_id=seed.tenant1_id).status_code == 201
    assert register(client, seed.emp1, 9999, number="X1").status_code == 404


def test_list_is_scoped_for_customers(client, seed):
    register(client, seed.emp1, seed.units["101"], number="AA1")
    register(client, seed.emp1, seed.units["102"], number="BB2")

    mine = client.get("/api/vehicles", headers=seed.cust2).json()["vehicles"]
    assert [v["vehicle_number"] for v in mine] == ["BB2"]
    assert mine[0]["customer_name"] == "Meena Owner"
    assert mine[0]["registered_by_name"] == "Esha Emp"

    everything = client.get("/api/vehicles", headers=seed.admin).json()["vehicles"]
    assert [v["vehicle_number"] for v in everything] == ["AA1", "BB2"]

    filtered = client.get("/api/vehicles", params={"unit_id": seed.units["101"]}, headers=seed.admin).json()["vehicles"]
    assert [v["unit_no"] for v in filtered] == ["101"]


def test_get_update_and_delete(client, seed):
    vehicle_id = register(client, seed.cust1, seed.units["101"]).json()["vehicle"]["id"]
    assert client.get(f"/api/vehicles/{vehicle_id}", headers=seed.cust2).status_code == 403
    assert client.get(f"/api/vehicles/{vehicle_id}", headers=seed.cust1).json()["vehicle"]["unit_no"] == "101"

    res = client.put(f"/api/vehicles/{vehicle_id}", json={"color": "Red", "vehicle_number": "mh 14 zz 9"}, headers=seed.cust1)
    assert res.status_code == 200
    assert res.json()["vehicle"]["vehicle_number"] == "MH14ZZ9"
    assert client.put(f"/api/vehicles/{vehicle_id}", json={}, headers=seed.cust1).status_code == 400

    assert client.delete(f"/api/vehicles/{vehicle_id}", headers=seed.cust2).status_code == 403
    assert client.delete(f"/api/vehicles/{vehicle_id}", headers=seed.cust1).status_code == 200
    assert client.get(f"/api/vehicles/{vehicle_id}", headers=seed.admin).status_code == 404


def test_blank_vehicle_number_is_rejected(client, seed):
    assert register(client, seed.emp1, seed.units["101"], number="   ").status_code == 400
    assert register(client, seed.emp1, seed.units["101"], vehicle_type=" ").status_code == 400
    assert client.get("/api/vehicles", headers=seed.admin).json()["vehicles"] == []


def test_update_rejects_null_or_blank_required_fields(client, seed):
    vehicle_id = register(client, seed.emp1, seed.units["101"]).json()["vehicle"]["id"]
    path = f"/api/vehicles/{vehicle_id}"
    for body in ({"vehicle_type": None}, {"vehicle_number": None}, {"vehicle_number": "  "}):
        assert client.put(path, json=body, headers=seed.emp1).status_code == 400, body

    # Optional details may be cleared
    res = client.put(path, json={"color": None}, headers=seed.emp1)
    assert res.status_code == 200
    assert res.json()["vehicle"]["vehicle_number"] == "MH12AB1234"
    assert res.json()["vehicle"]["vehicle_type"] == "Car"
