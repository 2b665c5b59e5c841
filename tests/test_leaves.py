from datetime import date, timedelta

from models import Employee

D1 = date.today() + timedelta(days=10)
D2 = D1 + timedelta(days=1)
D3 = D1 + timedelta(days=2)


def apply(client, headers, *dates, **extra):
    payload = {"dates": [d.isoformat() for d in dates], **extra}
    return client.post("/api/leaves", json=payload, headers=headers)


def leave_ids(client, headers, **params):
    return [leave["id"] for leave in client.get("/api/leaves", params=params, headers=headers).json()["leaves"]]


def titles(client, headers):
    return [n["title"] for n in client.get("/api/notifications", headers=headers).json()["notifications"]]


def test_apply_multiple_days_skips_duplicates(client, seed):
    res = apply(client, seed.emp1, D1, D2, reason="Family function")
    assert res.status_code == 201
    assert res.json()["inserted"] == [D1.isoformat(), D2.isoformat()]

    res = apply(client, seed.emp1, D2, D3)
    assert res.status_code == 201
    assert res.json()["inserted"] == [D3.isoformat()]
    assert res.json()["skipped"] == [D2.isoformat()]
    assert "1 skipped" in res.json()["message"]

    assert apply(client, seed.emp1, D1).status_code == 409


def test_apply_requires_a_date(client, seed):
    assert client.post("/api/leaves", json={"reason": "x"}, headers=seed.emp1).status_code == 400
    assert apply(client, seed.emp1, D1, leave_type="Quarter Day").status_code == 400
    assert apply(client, seed.cust1, D1).status_code == 403


def test_single_leave_date_field(client, seed):
    res = client.post("/api/leaves", json={"leave_date": D1.isoformat(), "leave_type": "First Half"}, headers=seed.emp1)
    assert res.status_code == 201
    leave = client.get("/api/leaves", headers=seed.emp1).json()["leaves"][0]
    assert leave["leave_type"] == "First Half"
    assert leave["status"] == "Pending"
    assert leave["manager_name"] == "Sunil Sub"


def test_application_notifies_reporting_manager_only(client, seed):
    apply(client, seed.emp1, D1)
    assert titles(client, seed.sub_admin) == ["Leave Request"]
    assert titles(client, seed.admin) == []


def test_application_without_manager_notifies_all_managers(client, seed):
    apply(client, seed.emp2, D1)
    assert titles(client, seed.sub_admin) == ["Leave Request"]
    assert titles(client, seed.admin) == ["Leave Request"]


def test_review_rules(client, seed):
    apply(client, seed.emp1, D1)
    leave_id = leave_ids(client, seed.emp1)[0]
    path = f"/api/leaves/{leave_id}"

    # Not the reporting manager, and not oneself
    assert client.patch(path, json={"status": "Approved"}, headers=seed.emp2).status_code == 403
    assert client.patch(path, json={"status": "Approved"}, headers=seed.emp1).status_code == 403
    assert client.patch(path, json={"status": "Pending"}, headers=seed.sub_admin).status_code == 400

    res = client.patch(path, json={"status": "Approved", "remarks": "Enjoy"}, headers=seed.sub_admin)
    assert res.status_code == 200
    assert client.patch(path, json={"status": "Rejected"}, headers=seed.admin).status_code == 409
    assert client.patch("/api/leaves/9999", json={"status": "Approved"}, headers=seed.admin).status_code == 404

    leave = client.get("/api/leaves", headers=seed.emp1).json()["leaves"][0]
    assert leave["status"] == "Approved"
    assert leave["reviewed_by_name"] == "Sunil Sub"
    assert leave["review_remarks"] == "Enjoy"
    assert titles(client, seed.emp1) == ["Leave Approved"]


def test_managers_cannot_approve_their_own_leave(client, seed):
    apply(client, seed.admin, D1)
    leave_id = leave_ids(client, seed.admin, employee_id=seed.admin_id)[0]
    assert client.patch(f"/api/leaves/{leave_id}", json={"status": "Approved"}, headers=seed.admin).status_code == 403
    assert client.patch(f"/api/leaves/{leave_id}", json={"status": "Approved"}, headers=seed.sub_admin).status_code == 200


def test_reporting_employee_reviews_direct_reports(client, seed, db_session):
    emp2 = db_session.query(Employee).filter(Employee.id == seed.emp2_id).first()
    emp2.reporting_manager_id = seed.emp1_id
    db_session.commit()

    apply(client, seed.emp2, D1)
    apply(client, seed.emp1, D2)

    listing = client.get("/api/leaves", headers=seed.emp1).json()
    assert {leave["employee_id"] for leave in listing["leaves"]} == {seed.emp1_id, seed.emp2_id}
    assert listing["pending_count"] == 1

    emp2_leave = next(leave for leave in listing["leaves"] if leave["employee_id"] == seed.emp2_id)
    res = client.patch(f"/api/leaves/{emp2_leave['id']}", json={"status": "Rejected"}, headers=seed.emp1)
    assert res.status_code == 200
    assert titles(client, seed.emp2) == ["Leave Rejected"]


def test_list_scope(client, seed):
    apply(client, seed.emp1, D1)
    apply(client, seed.emp2, D1)

    assert len(leave_ids(client, seed.emp2)) == 1
    assert len(leave_ids(client, seed.sub_admin)) == 2
    assert len(leave_ids(client, seed.admin, employee_id=seed.emp1_id)) == 1
    assert leave_ids(client, seed.admin, status="Approved") == []
    assert client.get("/api/leaves", headers=seed.admin).json()["pending_count"] == 2


def test_rejected_date_can_be_reapplied(client, seed):
    apply(client, seed.emp1, D1)
    leave_id = leave_ids(client, seed.emp1)[0]
    client.patch(f"/api/leaves/{leave_id}", json={"status": "Rejected"}, headers=seed.admin)
    assert apply(client, seed.emp1, D1).status_code == 201


def test_cancel_rules(client, seed):
    apply(client, seed.emp1, D1, D2)
    first, second = sorted(leave_ids(client, seed.emp1))

    assert client.delete(f"/api/leaves/{first}", headers=seed.emp2).status_code == 403
    client.patch(f"/api/leaves/{second}", json={"status": "Approved"}, headers=seed.admin)
    assert client.delete(f"/api/leaves/{second}", headers=seed.emp1).status_code == 409

    assert client.delete(f"/api/leaves/{first}", headers=seed.emp1).status_code == 200
    assert leave_ids(client, seed.emp1) == [second]


def test_blocked_dates_are_approved_only(client, seed):
    apply(client, seed.emp1, D1, D2)
    first, _ = sorted(leave_ids(client, seed.emp1))
    client.patch(f"/api/leaves/{first}", json={"status": "Approved"}, headers=seed.admin)

    res = client.get("/api/leaves/blocked-dates", headers=seed.emp1)
    assert [b["leave_date"] for b in res.json()["blocked_dates"]] == [D1.isoformat()]

    res = client.get("/api/calendar/leaves/approved-dates", params={"employee_id": seed.emp1_id}, headers=seed.admin)
    assert [b["leave_date"] for b in res.json()["blocked_dates"]] == [D1.isoformat()]


def test_calendar_single_day_leave(client, seed):
    res = client.post("/api/calendar/leaves", json={"leave_date": D1.isoformat()}, headers=seed.emp1)
    assert res.status_code == 201
    leave_id = res.json()["id"]
    assert client.post("/api/calendar/leaves", json={"leave_date": D1.isoformat()}, headers=seed.emp1).status_code == 409

    assert client.post(f"/api/calendar/leaves/{leave_id}/approve", headers=seed.emp2).status_code == 403
    res = client.post(f"/api/calendar/leaves/{leave_id}/reject", json={"remarks": "Short staffed"}, headers=seed.sub_admin)
    assert res.status_code == 200
    assert client.post(f"/api/calendar/leaves/{leave_id}/approve", headers=seed.admin).status_code == 409

    leaves = client.get("/api/calendar/leaves", headers=seed.emp1).json()["leaves"]
    assert leaves[0]["status"] == "Rejected"
    assert leaves[0]["review_remarks"] == "Short staffed"


def test_calendar_cancel(client, seed):
    leave_id = client.post("/api/calendar/leaves", json={"leave_date": D1.isoformat()}, headers=seed.emp1).json()["id"]
    assert client.delete(f"/api/calendar/leaves/{leave_id}", headers=seed.admin).status_code == 403
    assert client.delete(f"/api/calendar/leaves/{leave_id}", headers=seed.emp1).status_code == 200
    assert client.delete(f"/api/calendar/leaves/{leave_id}", headers=seed.emp1).status_code == 404


def test_calendar_view(client, seed, raise_complaint):
    complaint = raise_complaint()
    client.post(f"/api/complaints/{complaint['id']}/assign", json={"employee_id": seed.emp1_id}, headers=seed.admin)
    client.post(
        f"/api/complaints/{complaint['id']}/schedule",
        json={"visit_date": date.today().isoformat(), "visit_time": "10:30"},
        headers=seed.emp1,
    )
    leave_id = client.post("/api/calendar/leaves", json={"leave_date": D1.isoformat()}, headers=seed.emp1).json()["id"]
    client.post(f"/api/calendar/leaves/{leave_id}/approve", headers=seed.sub_admin)

    body = client.get("/api/calendar", params={"view": "today"}, headers=seed.emp1).json()
    assert [v["complaint_no"] for v in body["visits"]] == [complaint["complaint_no"]]
    assert body["visits"][0]["unit_no"] == "101"
    assert body["summary"] == {"total": 1, "today": 1, "upcoming": 0, "overdue": 0}
    assert body["leaves"] == []

    body = client.get("/api/calendar", params={"view": "all"}, headers=seed.emp1).json()
    assert [leave["leave_date"] for leave in body["leaves"]] == [D1.isoformat()]

    # Someone else's calendar is only visible to managers
    assert client.get("/api/calendar", params={"view": "all", "employee_id": seed.emp1_id}, headers=seed.emp2).json()["visits"] == []
    assert len(client.get("/api/calendar", params={"view": "all", "employee_id": seed.emp1_id}, headers=seed.admin).json()["visits"]) == 1

    assert client.get("/api/calendar", params={"view": "year"}, headers=seed.emp1).status_code == 400
