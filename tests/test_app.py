def test_health_endpoints(client):
    root = client.get("/")
    health = client.get("/health")

    assert root.status_code == 200
    assert root.json()["status"] == "healthy"
    assert health.status_code == 200
    assert health.json()["tmdb"]["circuit_open"] is False


def test_security_headers_are_set(client):
    response = client.get("/")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "default-src 'self'" in response.headers["Content-Security-Policy"]


def test_error_responses_keep_cors_headers(client):
    response = client.get("/api/auth/me", headers={"Origin": "http://localhost:3000"})

    assert response.status_code == 401
    assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"
    assert "Token-Expired" in response.headers["Access-Control-Expose-Headers"]


def test_unknown_origin_gets_no_cors_headers(client):
    response = client.get("/api/auth/me", headers={"Origin": "http://evil.example"})

    assert response.status_code == 401
    assert "Access-Control-Allow-Origin" not in response.headers
