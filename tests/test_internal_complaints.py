import re


def raise_internal(client, headers, **body):
    payload = {"category": "IT", "description": "Printer jammed", **body}
    res = client.post("/api/internal-complaints", json=payload, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()["complaint"]


def test_staff_raise_internal_complaint(client, seed):
    complaint = raise_internal(client, seed.emp1)
    assert re.fullmatch(r"IC-\d{6}-\d{4}", complaint["complaint_no"])
    assert complaint["status"] == "Pending"

    titles = [n["title"] for n in client.get("/api/notifications", headers=seed.admin).json()["notifications"]]
    assert titles == ["New Internal Complaint"]

    res = client.post("/api/internal-complaints", json={"category": "IT", "description": "x"}, headers=seed.cust1)
    assert res.status_code == 403


def test_visibility(client, seed):
    mine = raise_internal(client, seed.emp1)
    raise_internal(client, seed.emp2, category="Furniture")

    assert [c["id"] for c in client.get("/api/internal-complaints", headers=seed.emp1).json()["complaints"]] == [mine["id"]]
    assert len(client.get("/api/internal-complaints", headers=seed.sub_admin).json()["complaints"]) == 2
    assert client.get(f"/api/internal-complaints/{mine['id']}", headers=seed.emp2).status_code == 403
    assert client.get("/api/internal-complaints/9999", headers=seed.admin).status_code == 404


def test_assign_and_resolve(client, seed):
    complaint = raise_internal(client, seed.emp1)
    path = f"/api/internal-complaints/{complaint['id']}"

    assert client.post(f"{path}/assign", json={"employee_id": seed.emp2_id}, headers=seed.emp1).status_code == 403
    res = client.post(f"{path}/assign", json={"employee_id": seed.emp2_id}, headers=seed.admin)
    assert res.json()["complaint"]["status"] == "In-Progress"

    # The assignee can now see and resolve it
    assert client.get(path, headers=seed.emp2).status_code == 200
    res = client.patch(f"{path}/status", json={"status": "Resolved", "resolution_notes": "Roller replaced"}, headers=seed.emp2)
    assert res.status_code == 200
    assert res.json()["complaint"]["resolved_by_employee_id"] == seed.emp2_id

    titles = [n["title"] for n in client.get("/api/notifications", headers=seed.emp1).json()["notifications"]]
    assert titles == ["Internal Complaint Resolved"]

    detail = client.get(path, headers=seed.emp1).json()
    assert detail["complaint"]["resolved_by_name"] == "Eknath Emp"
    assert [a["action"] for a in detail["audit_trail"]] == [
        "internal_complaint_created",
        "internal_complaint_assigned",
        "internal_complaint_status",
    ]

    assert client.post(f"{path}/assign", json={"employee_id": seed.emp1_id}, headers=seed.admin).status_code == 409


def test_uninvolved_staff_cannot_update(client, seed):
    complaint = raise_internal(client, seed.emp1)
    res = client.patch(f"/api/internal-complaints/{complaint['id']}/status", json={"status": "Resolved"}, headers=seed.emp2)
    assert res.status_code == 403
    res = client.patch(f"/api/internal-complaints/{complaint['id']}/status", json={"status": "Done"}, headers=seed.emp1)
    assert res.status_code == 400


def test_admin_delete_keeps_audit(client, seed):
    complaint = raise_internal(client, seed.emp1)
    path = f"/api/internal-complaints/{complaint['id']}"
    assert client.delete(path, headers=seed.sub_admin).status_code == 403
    assert client.delete(path, headers=seed.admin).status_code == 200
    assert client.get(path, headers=seed.admin).status_code == 404

    logs = client.get(
        "/api/audit-logs",
        params={"entity_type": "internal_complaint", "entity_id": complaint["id"]},
        headers=seed.admin,
    ).json()["audit_logs"]
    assert [log["action"] for log in logs] == ["internal_complaint_deleted", "internal_complaint_created"]


def test_blank_fields_are_rejected(client, seed):
    for body in ({"category": "IT", "description": "  "}, {"category": " ", "description": "Printer jammed"}):
        assert client.post("/api/internal-complaints", json=body, headers=seed.emp1).status_code == 400, body
