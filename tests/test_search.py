def test_short_query_returns_nothing(client, seed):
    res = client.get("/api/search", params={"q": "1"}, headers=seed.admin)
    assert res.status_code == 200
    assert res.json()["units"] == []
    assert res.json()["complaints"] == []
    assert "at least 2" in res.json()["message"]


def test_search_units_by_owner_and_number(client, seed):
    units = client.get("/api/search", params={"q": "ravi"}, headers=seed.admin).json()["units"]
    assert [u["unit_no"] for u in units] == ["101"]
    assert units[0]["tenant_name"] == "Tara Tenant"

    units = client.get("/api/search", params={"q": "10"}, headers=seed.emp1).json()["units"]
    assert [u["unit_no"] for u in units] == ["101", "102", "103"]


def test_customer_search_is_limited_to_own_unit(client, seed, raise_complaint):
    raise_complaint(description="Bathroom leak")
    raise_complaint(headers=seed.cust2, unit_no="102", description="Kitchen leak")

    body = client.get("/api/search", params={"q": "10"}, headers=seed.cust2).json()
    assert [u["unit_no"] for u in body["units"]] == ["102"]

    body = client.get("/api/search", params={"q": "leak"}, headers=seed.cust2).json()
    assert [c["description"] for c in body["complaints"]] == ["Kitchen leak"]


def test_complaint_search_scope_for_staff(client, seed, raise_complaint):
    complaint = raise_complaint(description="Bathroom leak")
    raise_complaint(headers=seed.cust2, unit_no="102", description="Kitchen leak")

    assert len(client.get("/api/search", params={"q": "leak"}, headers=seed.admin).json()["complaints"]) == 2
    assert client.get("/api/search", params={"q": "leak"}, headers=seed.emp1).json()["complaints"] == []

    client.post(f"/api/complaints/{complaint['id']}/assign", json={"employee_id": seed.emp1_id}, headers=seed.admin)
    found = client.get("/api/search", params={"q": complaint["complaint_no"]}, headers=seed.emp1).json()["complaints"]
    assert [c["id"] for c in found] == [complaint["id"]]
    assert found[0]["status"] == "Assigned"
