def test_health_check(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"
    assert "timestamp" in r.json()


def test_openapi_lists_routes(client):
    paths = client.get("/openapi.json").json()["paths"]
    assert {"/api/login", "/api/register", "/api/user/index", "/api/user/{user_id}"} <= set(paths)
