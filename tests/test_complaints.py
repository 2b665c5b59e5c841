import re
from datetime import date, timedelta

from models import EmployeeLeave, LeaveStatus


def test_categories_are_public_and_seeded(client, seed):
    res = client.get("/api/complaints/categories/list")
    assert res.status_code == 200
    categories = res.json()["categories"]
    assert categories[0]["name"] == "Plumbing"
    assert any(sub["name"] == "Leakage" for sub in categories[0]["sub_categories"])


def test_customer_raises_complaint_for_own_unit(client, seed, raise_complaint):
    complaint = raise_complaint()
    assert re.fullmatch(r"EC-\d{6}-\d{4}", complaint["complaint_no"])
    assert complaint["status"] == "Open"
    assert complaint["customer_id"] == seed.cust1_id
    assert complaint["unit_no"] == "101"

    # Every active manager is notified
    for headers in (seed.admin, seed.sub_admin):
        notes = client.get("/api/notifications", headers=headers).json()
        assert notes["unread_count"] == 1
        assert notes["notifications"][0]["complaint_id"] == complaint["id"]


def test_customer_cannot_raise_for_another_unit(client, seed, category_id):
    res = client.post(
        "/api/complaints",
        json={"unit_id": seed.units["102"], "category_id": category_id, "description": "x"},
        headers=seed.cust1,
    )
    assert res.status_code == 403


def test_staff_raised_complaint_attaches_unit_owner(client, seed, raise_complaint):
    complaint = raise_complaint(headers=seed.emp1, unit_no="102")
    assert complaint["customer_id"] == seed.cust2_id


def test_missing_description_is_400(client, seed, category_id):
    res = client.post(
        "/api/complaints",
        json={"unit_id": seed.units["101"], "category_id": category_id},
        headers=seed.cust1,
    )
    assert res.status_code == 400


def test_list_is_scoped_per_role(client, seed, raise_complaint):
    mine = raise_complaint()
    other = raise_complaint(headers=seed.cust2, unit_no="102")
    client.post(f"/api/complaints/{other['id']}/assign", json={"employee_id": seed.emp1_id}, headers=seed.admin)

    cust_view = client.get("/api/complaints", headers=seed.cust1).json()["complaints"]
    assert [c["id"] for c in cust_view] == [mine["id"]]

    emp_view = client.get("/api/complaints", headers=seed.emp1).json()["complaints"]
    assert [c["id"] for c in emp_view] == [other["id"]]
    assert client.get("/api/complaints", headers=seed.emp2).json()["complaints"] == []

    admin_view = client.get("/api/complaints", headers=seed.admin).json()
    assert admin_view["pagination"]["total"] == 2

    filtered = client.get("/api/complaints", params={"status": "Assigned"}, headers=seed.admin).json()
    assert [c["id"] for c in filtered["complaints"]] == [other["id"]]


def test_customer_cannot_view_other_customers_complaint(client, seed, raise_complaint):
    other = raise_complaint(headers=seed.cust2, unit_no="102")
    assert client.get(f"/api/complaints/{other['id']}", headers=seed.cust1).status_code == 403
    assert client.get(f"/api/complaints/{other['id']}", headers=seed.cust2).status_code == 200
    assert client.get("/api/complaints/99999", headers=seed.admin).status_code == 404


def test_full_lifecycle(client, seed, raise_complaint):
    complaint = raise_complaint()
    cid = complaint["id"]
    visit = (date.today() + timedelta(days=2)).isoformat()

    res = client.post(f"/api/complaints/{cid}/assign", json={"employee_id": seed.emp1_id}, headers=seed.sub_admin)
    assert res.status_code == 200
    assert res.json()["complaint"]["status"] == "Assigned"
    assert res.json()["complaint"]["assigned_to_name"] == "Esha Emp"

    res = client.post(f"/api/complaints/{cid}/schedule", json={"visit_date": visit, "visit_time": "10:30"}, headers=seed.emp1)
    assert res.status_code == 200
    assert res.json()["complaint"]["status"] == "Scheduled"
    assert res.json()["complaint"]["visit_date"] == visit

    res = client.post(f"/api/complaints/{cid}/start", headers=seed.emp1)
    assert res.json()["complaint"]["status"] == "In Progress"

    res = client.post(f"/api/complaints/{cid}/resolve", json={"resolution_notes": "Washer replaced"}, headers=seed.emp1)
    body = res.json()["complaint"]
    assert body["status"] == "Resolved"
    assert body["resolved_by_employee_id"] == seed.emp1_id
    assert body["resolution_notes"] == "Washer replaced"

    res = client.post(f"/api/complaints/{cid}/close", headers=seed.admin)
    assert res.json()["complaint"]["status"] == "Closed"
    assert res.json()["complaint"]["closed_at"] is not None

    detail = client.get(f"/api/complaints/{cid}", headers=seed.cust1).json()
    actions = [entry["action"] for entry in detail["audit_trail"]]
    assert actions == [
        "complaint_created",
        "complaint_assigned",
        "complaint_scheduled",
        "complaint_started",
        "complaint_resolved",
        "complaint_closed",
    ]

    titles = [n["title"] for n in client.get("/api/notifications", headers=seed.cust1).json()["notifications"]]
    assert "Complaint Resolved" in titles
    assert "Visit Scheduled" in titles


def test_invalid_transitions_are_409(client, seed, raise_complaint):
    cid = raise_complaint()["id"]

    assert client.post(f"/api/complaints/{cid}/schedule", json={"visit_date": "2030-01-01"}, headers=seed.admin).status_code == 409
    assert client.post(f"/api/complaints/{cid}/start", headers=seed.admin).status_code == 409
    assert client.post(f"/api/complaints/{cid}/resolve", json={}, headers=seed.admin).status_code == 409

    assert client.post(f"/api/complaints/{cid}/close", headers=seed.admin).status_code == 200
    res = client.post(f"/api/complaints/{cid}/close", headers=seed.admin)
    assert res.status_code == 409
    assert "Closed" in res.json()["error"]
    res = client.post(f"/api/complaints/{cid}/assign", json={"employee_id": seed.emp1_id}, headers=seed.admin)
    assert res.status_code == 409


def test_only_managers_assign_and_close(client, seed, raise_complaint):
    cid = raise_complaint()["id"]
    assert client.post(f"/api/complaints/{cid}/assign", json={"employee_id": seed.emp1_id}, headers=seed.emp1).status_code == 403
    assert client.post(f"/api/complaints/{cid}/close", headers=seed.cust1).status_code == 403


def test_employee_acts_only_on_own_assignment(client, seed, raise_complaint):
    cid = raise_complaint()["id"]
    client.post(f"/api/complaints/{cid}/assign", json={"employee_id": seed.emp1_id}, headers=seed.admin)

    res = client.post(f"/api/complaints/{cid}/schedule", json={"visit_date": "2030-01-01"}, headers=seed.emp2)
    assert res.status_code == 403
    assert client.post(f"/api/complaints/{cid}/start", headers=seed.emp2).status_code == 403
    assert client.post(f"/api/complaints/{cid}/start", headers=seed.cust1).status_code == 403


def test_schedule_blocked_by_approved_leave(client, seed, raise_complaint, db_session):
    cid = raise_complaint()["id"]
    client.post(f"/api/complaints/{cid}/assign", json={"employee_id": seed.emp1_id}, headers=seed.admin)
    leave_day = date.today() + timedelta(days=5)
    db_session.add(EmployeeLeave(employee_id=seed.emp1_id, leave_date=leave_day, status=LeaveStatus.APPROVED))
    db_session.commit()

    res = client.post(f"/api/complaints/{cid}/schedule", json={"visit_date": leave_day.isoformat()}, headers=seed.emp1)
    assert res.status_code == 409

    other_day = (leave_day + timedelta(days=1)).isoformat()
    res = client.post(f"/api/complaints/{cid}/schedule", json={"visit_date": other_day}, headers=seed.emp1)
    assert res.status_code == 200


def test_reassign_from_scheduled_clears_visit(client, seed, raise_complaint):
    cid = raise_complaint()["id"]
    client.post(f"/api/complaints/{cid}/assign", json={"employee_id": seed.emp1_id}, headers=seed.admin)
    client.post(f"/api/complaints/{cid}/schedule", json={"visit_date": "2030-01-01"}, headers=seed.emp1)

    res = client.post(f"/api/complaints/{cid}/assign", json={"employee_id": seed.emp2_id}, headers=seed.admin)
    assert res.status_code == 200
    body = res.json()["complaint"]
    assert body["status"] == "Assigned"
    assert body["assigned_to_employee_id"] == seed.emp2_id
    assert body["visit_date"] is None


def test_blank_description_is_400(client, seed, category_id):
    res = client.post(
        "/api/complaints",
        json={"unit_id": seed.units["101"], "category_id": category_id, "description": "   "},
        headers=seed.cust1,
    )
    assert res.status_code == 400
    assert client.get("/api/complaints", headers=seed.cust1).json()["complaints"] == []
