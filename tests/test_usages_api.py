"""
Tests for the usage session endpoints.
"""
import pytest


def _start(client, dumpster_id, headers, start_time="2025-01-01T08:00:00Z", **extra):
    body = {"start_time": start_time, **extra}
    return client.post(f"/api/v1/dumpsters/{dumpster_id}/usages/start", headers=headers, json=body)


def _end(client, dumpster_id, usage_id, headers, end_time="2025-01-01T09:00:00Z", **extra):
    body = {"end_time": end_time, **extra}
    return client.put(f"/api/v1/dumpsters/{dumpster_id}/usages/{usage_id}/end", headers=headers, json=body)


class TestUsageLifecycleApi:

    def test_start_and_end(self, client, dumpster, auth_headers):
        started = _start(client, dumpster.id, auth_headers, notes="back alley")
        assert started.status_code == 201
        usage = started.get_json()["data"]
        assert usage["status"] == "active"
        assert usage["end_time"] is None

        ended = _end(client, dumpster.id, usage["id"], auth_headers)
        assert ended.status_code == 200
        data = ended.get_json()["data"]
        assert data["status"] == "completed"
        assert data["duration_minutes"] == 60
        assert data["total_cost"] == pytest.approx(3.0)
        assert data["notes"] == "back alley"

    def test_start_requires_start_time(self, client, dumpster, auth_headers):
        resp = client.post(f"/api/v1/dumpsters/{dumpster.id}/usages/start", headers=auth_headers, json={})
        assert resp.status_code == 400
        assert "start_time" in resp.get_json()["details"]

    def test_start_on_unavailable(self, client, make_dumpster, auth_headers):
        closed = make_dumpster(is_available=False)
        resp = _start(client, closed.id, auth_headers)
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "dumpster is not available"

    def test_duplicate_active_session(self, client, dumpster, auth_headers):
        assert _start(client, dumpster.id, auth_headers).status_code == 201
        assert _start(client, dumpster.id, auth_headers).status_code == 400

    def test_end_before_start(self, client, dumpster, auth_headers):
        usage_id = _start(client, dumpster.id, auth_headers).get_json()["data"]["id"]
        resp = _end(client, dumpster.id, usage_id, auth_headers, end_time="2025-01-01T07:00:00Z")
        assert resp.status_code == 400

    def test_end_by_other_user(self, client, dumpster, auth_headers, other_headers):
        usage_id = _start(client, dumpster.id, auth_headers).get_json()["data"]["id"]
        assert _end(client, dumpster.id, usage_id, other_headers).status_code == 403

    def test_requires_auth(self, client, dumpster):
        assert _start(client, dumpster.id, {}).status_code == 401
        assert client.get("/api/v1/usages").status_code == 401


class TestUsageQueriesApi:

    def test_lists_and_stats(self, client, user, make_dumpster, auth_headers):
        a, b = make_dumpster(), make_dumpster(title="Second dumpster")
        first = _start(client, a.id, auth_headers).get_json()["data"]["id"]
        _end(client, a.id, first, auth_headers, end_time="2025-01-01T10:00:00Z")
        _start(client, b.id, auth_headers)

        all_usages = client.get("/api/v1/usages", headers=auth_headers).get_json()
        assert all_usages["meta"]["total"] == 2

        completed = client.get("/api/v1/usages?status=completed", headers=auth_headers).get_json()
        assert [u["id"] for u in completed["data"]] == [first]

        by_dumpster = client.get(f"/api/v1/dumpsters/{b.id}/usages", headers=auth_headers).get_json()
        assert by_dumpster["meta"]["total"] == 1

        by_user = client.get(f"/api/v1/usages/user/{user.id}", headers=auth_headers).get_json()
        assert by_user["meta"]["total"] == 2

        stats = client.get("/api/v1/usages/stats", headers=auth_headers).get_json()["data"]
        assert stats == {
            "total_usages": 2,
            "active_usages": 1,
            "completed_usages": 1,
            "total_minutes": 120,
            "total_revenue": pytest.approx(6.0),
        }

    def test_invalid_status_filter(self, client, auth_headers):
        resp = client.get("/api/v1/usages?status=paused", headers=auth_headers)
        assert resp.status_code == 400

    def test_get_and_delete(self, client, dumpster, auth_headers):
        usage_id = _start(client, dumpster.id, auth_headers).get_json()["data"]["id"]

        assert client.get(f"/api/v1/usages/{usage_id}", headers=auth_headers).status_code == 200
        assert client.delete(f"/api/v1/usages/{usage_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/api/v1/usages/{usage_id}", headers=auth_headers).status_code == 404
