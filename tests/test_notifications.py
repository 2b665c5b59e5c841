import pytest

import config
from services import notification_service


def test_notifications_are_per_recipient(client, seed, raise_complaint):
    raise_complaint()

    assert client.get("/api/notifications", headers=seed.cust1).json()["unread_count"] == 0
    body = client.get("/api/notifications", headers=seed.admin).json()
    assert body["unread_count"] == 1
    assert body["notifications"][0]["title"] == "New Complaint"
    assert body["notifications"][0]["recipient_type"] == "employee"


def test_mark_one_read(client, seed, raise_complaint):
    raise_complaint()
    note_id = client.get("/api/notifications", headers=seed.admin).json()["notifications"][0]["id"]

    # Someone else's notification looks like a missing one
    assert client.post(f"/api/notifications/{note_id}/read", headers=seed.sub_admin).status_code == 404
    assert client.post(f"/api/notifications/{note_id}/read", headers=seed.admin).status_code == 200

    body = client.get("/api/notifications", headers=seed.admin).json()
    assert body["unread_count"] == 0
    assert body["notifications"][0]["is_read"] is True
    assert client.get("/api/notifications", headers=seed.sub_admin).json()["unread_count"] == 1


def test_mark_all_read(client, seed, raise_complaint):
    raise_complaint()
    raise_complaint(description="Door jammed")

    res = client.post("/api/notifications/read-all", headers=seed.sub_admin)
    assert res.json()["updated"] == 2
    assert client.get("/api/notifications", headers=seed.sub_admin).json()["unread_count"] == 0
    assert client.get("/api/notifications", headers=seed.admin).json()["unread_count"] == 2


def test_notifications_require_login(client, seed):
    assert client.get("/api/notifications").status_code == 401


@pytest.fixture()
def sent_emails(monkeypatch):
    sent = []
    monkeypatch.setattr(config, "EMAIL_NOTIFICATIONS", True)
    monkeypatch.setattr(notification_service, "send_notification_email", lambda to, subject, message: sent.append((to, subject)))
    return sent


def test_emails_are_sent_after_commit(client, seed, raise_complaint, sent_emails):
    raise_complaint()
    assert sorted(sent_emails) == [("admin@test.in", "New Complaint"), ("sub@test.in", "New Complaint")]


def test_rolled_back_notifications_send_no_email(seed, db_session, sent_emails):
    notification_service.create_notification(db_session, "employee", seed.admin_id, "Hello", "Queued")
    assert sent_emails == []
    db_session.rollback()
    db_session.commit()
    assert sent_emails == []

    notification_service.create_notification(db_session, "customer", seed.cust1_id, "Hello", "Queued")
    db_session.commit()
    assert sent_emails == [("ravi@test.in", "Hello")]


def test_email_failure_does_not_fail_the_request(client, seed, raise_complaint, monkeypatch):
    def broken(to, subject, message):
        raise RuntimeError("Brevo down")

    monkeypatch.setattr(config, "EMAIL_NOTIFICATIONS", True)
    monkeypatch.setattr(notification_service, "send_notification_email", broken)
    raise_complaint()
    assert client.get("/api/notifications", headers=seed.admin).json()["unread_count"] == 1
