def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok", "app": "Emperium City GRS"}


def test_unknown_api_route_is_json_404(client):
    res = client.get("/api/does-not-exist")
    assert res.status_code == 404
    assert res.json() == {"error": "Route not found"}


def test_unknown_api_post_is_json_404(client):
    res = client.post("/api/nothing/here", json={})
    assert res.status_code == 404
    assert res.json() == {"error": "Route not found"}


def test_spa_fallback_serves_index(client):
    res = client.get("/complaints/42")
    assert res.status_code == 200
    assert "Emperium City" in res.text


def test_placeholder_page_links_to_api_docs(client):
    res = client.get("/static/index.html")
    assert res.status_code == 200
    assert 'href="/docs"' in res.text
