from datetime import date


def test_admin_dashboard(client, seed, raise_complaint):
    first = raise_complaint()
    raise_complaint(headers=seed.cust2, unit_no="102")
    client.post(f"/api/complaints/{first['id']}/assign", json={"employee_id": seed.emp1_id}, headers=seed.admin)

    assert client.get("/api/dashboard/admin", headers=seed.emp1).status_code == 403
    body = client.get("/api/dashboard/admin", headers=seed.sub_admin).json()

    assert body["unit_stats"] == {"total": 4, "occupied": 2, "vacant": 2, "under_construction": 0}
    assert body["complaint_stats"]["total"] == 2
    assert body["complaint_stats"]["Open"] == 1
    assert body["complaint_stats"]["Assigned"] == 1
    assert body["open_by_category"] == [{"category": "Plumbing", "count": 2}]
    assert body["counts"] == {"customers": 2, "employees": 4, "tenants": 1, "kyc_complete_owners": 0}
    assert len(body["recent_complaints"]) == 2

    esha = next(e for e in body["employee_workload"] if e["id"] == seed.emp1_id)
    assert esha["open_complaints"] == 1
    assert esha["resolved_complaints"] == 0


def test_employee_dashboard(client, seed, raise_complaint):
    complaint = raise_complaint()
    client.post(f"/api/complaints/{complaint['id']}/assign", json={"employee_id": seed.emp1_id}, headers=seed.admin)
    client.post(
        f"/api/complaints/{complaint['id']}/schedule",
        json={"visit_date": date.today().isoformat()},
        headers=seed.emp1,
    )

    body = client.get("/api/dashboard/employee", headers=seed.emp1).json()
    assert [c["id"] for c in body["complaints"]] == [complaint["id"]]
    assert body["stats"]["Scheduled"] == 1
    assert body["todays_visits"][0]["customer_name"] == "Ravi Owner"

    assert client.get("/api/dashboard/employee", headers=seed.emp2).json()["complaints"] == []
    assert client.get("/api/dashboard/employee", headers=seed.cust1).status_code == 403


def test_customer_dashboard(client, seed, raise_complaint):
    raise_complaint()
    assert client.get("/api/dashboard/customer", headers=seed.emp1).status_code == 403

    body = client.get("/api/dashboard/customer", headers=seed.cust1).json()
    assert body["profile"]["unit_no"] == "101"
    assert "password_hash" not in body["profile"]
    assert body["stats"]["Open"] == 1
    assert body["kyc"]["completion_percentage"] == 0
    assert body["categories"][0]["name"] == "Plumbing"
