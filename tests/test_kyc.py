OWNER_DOCS = ["aadhar", "pan", "photo", "sale_deed", "maintenance_agreement"]


def upload(client, headers, entity_type, entity_id, doc_type, file_data="data:application/pdf;base64,AAAA", **extra):
    payload = {"doc_type": doc_type, "file_data": file_data, **extra}
    return client.post(f"/api/kyc/{entity_type}/{entity_id}", json=payload, headers=headers)


def test_upload_creates_versions(client, seed):
    first = upload(client, seed.emp1, "customer", seed.cust1_id, "aadhar", file_name="a1.pdf")
    assert first.status_code == 201
    assert first.json()["document"]["version"] == 1
    assert "file_data" not in first.json()["document"]

    second = upload(client, seed.emp1, "customer", seed.cust1_id, "aadhar", file_data="data:v2", file_name="a2.pdf")
    assert second.json()["document"]["version"] == 2

    res = client.get(f"/api/kyc/customer/{seed.cust1_id}", headers=seed.cust1)
    assert res.status_code == 200
    body = res.json()
    assert len(body["documents"]) == 1
    assert body["documents"][0]["file_name"] == "a2.pdf"
    assert body["documents"][0]["version"] == 2
    assert body["documents"][0]["doc_label"] == "Aadhar Card"
    assert [h["version"] for h in body["history"]] == [2, 1]
    assert body["uploaded_types"] == ["aadhar"]
    assert body["completion_percentage"] == 20
    assert body["is_complete"] is False


def test_complete_owner_kyc(client, seed):
    for doc_type in OWNER_DOCS:
        assert upload(client, seed.admin, "customer", seed.cust2_id, doc_type).status_code == 201

    body = client.get(f"/api/kyc/customer/{seed.cust2_id}", headers=seed.admin).json()
    assert body["is_complete"] is True
    assert body["missing_types"] == []
    assert body["completion_percentage"] == 100


def test_upload_validation(client, seed):
    assert upload(client, seed.cust1, "customer", seed.cust1_id, "aadhar").status_code == 403
    assert upload(client, seed.emp1, "vendor", 1, "aadhar").status_code == 400
    assert upload(client, seed.emp1, "customer", 9999, "aadhar").status_code == 404
    # Sale deed is an owner document, not a tenant one
    assert upload(client, seed.emp1, "tenant", seed.tenant1_id, "sale_deed").status_code == 400
    assert upload(client, seed.emp1, "tenant", seed.tenant1_id, "police_verification").status_code == 201


def test_customer_read_scope(client, seed):
    assert client.get(f"/api/kyc/tenant/{seed.tenant1_id}", headers=seed.cust1).status_code == 200
    assert client.get(f"/api/kyc/tenant/{seed.tenant1_id}", headers=seed.cust2).status_code == 403
    assert client.get(f"/api/kyc/customer/{seed.cust1_id}", headers=seed.cust2).status_code == 403


def test_delete_clears_active_slot_and_keeps_history(client, seed):
    upload(client, seed.emp1, "customer", seed.cust1_id, "pan")
    path = f"/api/kyc/customer/{seed.cust1_id}/pan"
    assert client.delete(path, headers=seed.emp1).status_code == 403
    assert client.delete(path, headers=seed.sub_admin).status_code == 200
    assert client.delete(path, headers=seed.sub_admin).status_code == 404

    body = client.get(f"/api/kyc/customer/{seed.cust1_id}", headers=seed.admin).json()
    assert body["documents"] == []
    assert len(body["history"]) == 1

    # A re-upload continues the version sequence
    again = upload(client, seed.emp1, "customer", seed.cust1_id, "pan")
    assert again.json()["document"]["version"] == 2

    history = client.get(f"/api/kyc/history/customer/{seed.cust1_id}", headers=seed.emp2).json()
    assert [h["version"] for h in history["history"]] == [2, 1]
    assert {a["action"] for a in history["audit_logs"]} == {"kyc_uploaded", "kyc_deleted"}


def test_upload_records_unit_history(client, seed):
    upload(client, seed.emp1, "tenant", seed.tenant1_id, "tenancy_contract")
    history = client.get("/api/units/101", headers=seed.admin).json()["history"]
    assert history[0]["event_type"] == "kyc_update"
    assert history[0]["description"] == "Tenancy Contract v1 uploaded for Tara Tenant"


def test_tracker_summary(client, seed):
    for doc_type in OWNER_DOCS:
        upload(client, seed.emp1, "customer", seed.cust1_id, doc_type)

    assert client.get("/api/kyc/tracker/summary", headers=seed.cust1).status_code == 403
    body = client.get("/api/kyc/tracker/summary", headers=seed.emp2).json()
    assert body["summary"] == {
        "total_owners": 2,
        "complete_owners": 1,
        "total_tenants": 1,
        "complete_tenants": 0,
    }
    owner = next(o for o in body["owners"] if o["entity_id"] == seed.cust1_id)
    assert owner["documents"] == {t: True for t in OWNER_DOCS}
    assert body["tenants"][0]["documents"]["tenancy_contract"] is False
