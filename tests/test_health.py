"""
Tests for the health endpoint and app-level behaviour.
"""


class TestHealth:

    def test_health_ok(self, client):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["status"] == "ok"
        assert body["database"] == "ok"
        assert body["cache"] == "ok"

    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.get_json()["docs"] == "/apidocs/"

    def test_unknown_route_uses_error_envelope(self, client):
        resp = client.get("/api/v1/nope")
        assert resp.status_code == 404
        body = resp.get_json()
        assert body["error"] == "NOT_FOUND"
        assert body["status"] == 404
        assert body["message"]

    def test_swagger_spec_served(self, client):
        resp = client.get("/swagger.json")
        assert resp.status_code == 200
        assert resp.get_json()["info"]["title"] == "Waste Space API"
